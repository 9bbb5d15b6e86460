"""Demultiplex a single lane: illumina2bam piped into BamIndexDecoder.
"""
import os
import subprocess

from bcldemux import log
from bcldemux.illumina import demultiplex, transfer
from bcldemux.illumina.sanity import READSTRING
from bcldemux.pipeline.run_info import RunOutcome
from bcldemux.provenance import do

STAGES = ("illumina2bam", "bamIndexDecoder")

def lane_commands(ctx, lane, rows, barcode_file):
    """Build the conversion and decoding commandlines for a lane.
    """
    illumina2bam = demultiplex.illumina2bam_cl(ctx.intensities_dir, lane, rows[0][READSTRING],
                                               ctx.tmp_dir, ctx.config)
    decoder = demultiplex.bamindexdecoder_cl(ctx.output_dir, barcode_file,
                                             ctx.metrics_file(lane), ctx.config)
    return illumina2bam, decoder

def decode_lane(ctx, lane, illumina2bam_cl, decoder_cl):
    """Run the piped conversion for a lane and collect its output files.

    Returns the RunOutcome of the lane; failures never raise so sibling lanes
    are unaffected.
    """
    lane_log = log.lane_logger(lane, ctx.undetermined_dir)
    log_file = log.lane_log_file(ctx.undetermined_dir, lane)
    try:
        lane_log.info("Starting lane %s" % lane)
        try:
            _, code = do.run_piped(illumina2bam_cl, decoder_cl, lane_log, names=STAGES,
                                   timeout=ctx.timeout)
        except subprocess.TimeoutExpired as e:
            msg = "Lane %s did not finish within %s seconds, processes killed" % (lane, e.timeout)
            lane_log.error(msg)
            return RunOutcome.failed(lane, "timeout", None, log_file, msg)
        except OSError as e:
            msg = "Could not start processes for lane %s: %s" % (lane, e)
            lane_log.error(msg)
            return RunOutcome.failed(lane, "launch", None, log_file, msg)
        if code != 0:
            return RunOutcome.failed(lane, STAGES[1], code, log_file)
        _collect_lane_files(ctx, lane, lane_log)
        return RunOutcome.succeeded(lane, log_file)
    finally:
        log.close_lane_logger(lane_log)

def _collect_lane_files(ctx, lane, lane_log):
    """Keep lane configuration and barcode files, share metrics with the lane's projects.
    """
    transfer.copy_files(transfer.lane_files(lane), ctx.tmp_dir, ctx.undetermined_dir, lane_log)
    metrics_file = ctx.metrics_file(lane)
    to_copy = [(metrics_file, os.path.basename(metrics_file))]
    for pdir in ctx.project_dirs():
        if ctx.sheet.project_in_lane(pdir.project, lane):
            transfer.copy_files(to_copy, "", ctx.project_dir(pdir), lane_log)
