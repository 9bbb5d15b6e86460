"""Utility functionality for logging.

A run writes a main log into the Undetermined directory of the run plus a log
per lane. Lane records bubble up to the main log, and errors always reach
stderr, mirroring the plain `ERROR:` marked lines operators grep for.
"""
import os
import sys

import logbook

from bcldemux import utils

LOG_NAME = "bcldemux"
RUN_LOG = "demultiplex.log"

logger = logbook.Logger(LOG_NAME)

FORMAT_STR = "[{record.time:%Y-%m-%dT%H:%M:%S}] {record.level_name}: {record.message}"

def _below_error(record, _):
    return record.level < logbook.ERROR

class CloseableNestedSetup(logbook.NestedSetup):
    def close(self):
        for obj in self.objects:
            if hasattr(obj, "close"):
                obj.close()

def setup_run_logging(log_dir, verbose=False):
    """Setup logging for a demultiplexing run.

    Returns a handler setup to bind with `applicationbound()`, so records
    emitted from lane worker threads reach the same handlers.
    """
    logbook.set_datetime_format("local")
    handlers = [logbook.NullHandler()]
    if log_dir:
        utils.safe_makedir(log_dir)
        handlers.append(logbook.FileHandler(os.path.join(log_dir, RUN_LOG), mode="a",
                                            encoding="utf-8", format_string=FORMAT_STR,
                                            level="DEBUG", bubble=True))
    if verbose:
        handlers.append(logbook.StreamHandler(sys.stdout, format_string="{record.level_name}: {record.message}",
                                              level="DEBUG", filter=_below_error, bubble=True))
    handlers.append(logbook.StreamHandler(sys.stderr, format_string="{record.level_name}: {record.message}",
                                          level="ERROR", bubble=True))
    return CloseableNestedSetup(handlers)

def lane_log_file(log_dir, lane):
    return os.path.join(log_dir, "demultiplex_%s.log" % lane)

def lane_logger(lane, log_dir):
    """Retrieve a logger for a single lane, writing to its own log file.

    The lane handler is attached to the logger itself and bubbles, so the
    same records also reach the run level handlers.
    """
    lane_log = logbook.Logger("%s-lane%s" % (LOG_NAME, lane))
    utils.safe_makedir(log_dir)
    lane_log.handlers.append(logbook.FileHandler(lane_log_file(log_dir, lane), mode="a",
                                                 encoding="utf-8", format_string=FORMAT_STR,
                                                 level="DEBUG", bubble=True))
    return lane_log

def close_lane_logger(lane_log):
    for handler in lane_log.handlers:
        handler.close()
    lane_log.handlers = []
