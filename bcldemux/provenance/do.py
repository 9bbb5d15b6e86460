"""Centralize running of external commands, providing logging and tracking.

Handles a two process pipe where the standard output of a producer streams
into the standard input of a consumer, with both standard error streams
forwarded line by line to a log.
"""
import subprocess
import threading
import time

CHUNK_SIZE = 64 * 1024

def _start(fn, *args):
    t = threading.Thread(target=fn, args=args, daemon=True)
    t.start()
    return t

def _relay(src, dst):
    """Forward chunks from src to dst as they arrive.

    Keeps draining src when dst has gone away so the producer never blocks
    on a full pipe.
    """
    dst_open = True
    for chunk in iter(lambda: src.read1(CHUNK_SIZE), b""):
        if dst_open:
            try:
                dst.write(chunk)
                dst.flush()
            except (BrokenPipeError, ValueError):
                dst_open = False
    src.close()

def _log_lines(stream, log):
    for line in iter(stream.readline, b""):
        line = line.decode("utf-8", errors="replace").rstrip()
        if line:
            log.info(line)
    stream.close()

def _remaining(deadline):
    if deadline is None:
        return None
    return max(0, deadline - time.monotonic())

def _close_stdin(p):
    try:
        p.stdin.close()
    except BrokenPipeError:
        # consumer exited early, reported through its exit code
        pass

def _cl_str(cmd):
    return " ".join(str(x) for x in cmd)

def run_piped(producer_cl, consumer_cl, log, names=("producer", "consumer"), timeout=None):
    """Run producer_cl | consumer_cl, returning both exit codes.

    The consumer input is closed once the producer has exited and its output
    is fully forwarded, whatever the producer exit code. A non-zero producer
    exit is logged but the consumer runs to completion. With a timeout, both
    processes are killed when it expires and subprocess.TimeoutExpired raised.
    """
    log.debug("%s | %s" % (_cl_str(producer_cl), _cl_str(consumer_cl)))
    producer = subprocess.Popen([str(x) for x in producer_cl], stdout=subprocess.PIPE,
                                stderr=subprocess.PIPE, close_fds=True)
    try:
        consumer = subprocess.Popen([str(x) for x in consumer_cl], stdin=subprocess.PIPE,
                                    stdout=subprocess.PIPE, stderr=subprocess.PIPE, close_fds=True)
    except OSError:
        producer.kill()
        producer.communicate()
        raise
    relay = _start(_relay, producer.stdout, consumer.stdin)
    readers = [_start(_log_lines, producer.stderr, log),
               _start(_log_lines, consumer.stderr, log),
               _start(_log_lines, consumer.stdout, log)]
    deadline = time.monotonic() + timeout if timeout else None
    try:
        producer_code = producer.wait(_remaining(deadline))
        relay.join(_remaining(deadline))
        if relay.is_alive():
            raise subprocess.TimeoutExpired(producer_cl, timeout)
        _close_stdin(consumer)
        if producer_code != 0:
            log.error("%s process exited with code %s" % (names[0], producer_code))
        consumer_code = consumer.wait(_remaining(deadline))
    except subprocess.TimeoutExpired:
        for p in (producer, consumer):
            if p.poll() is None:
                p.kill()
        producer.wait()
        consumer.wait()
        raise
    finally:
        relay.join()
        _close_stdin(consumer)
        for t in readers:
            t.join()
    if consumer_code != 0:
        log.error("%s process exited with code %s" % (names[1], consumer_code))
    return producer_code, consumer_code
