"""Main entry point for demultiplexing all lanes of a sequencing run.

Lanes are validated and launched in sample sheet order, run concurrently,
and collected as they finish. Once every launched lane is done the run
metadata, project sample sheets and metrics are assembled and the temporary
directory removed.
"""
import sys
from concurrent import futures

from bcldemux import utils
from bcldemux.illumina import samplesheet, sanity, transfer
from bcldemux.log import logger, setup_run_logging
from bcldemux.pipeline import clargs
from bcldemux.pipeline.lane import decode_lane, lane_commands
from bcldemux.pipeline.run_info import RunContext, RunOutcome

def main(in_args=None):
    """Commandline entry point, returning the process exit code.
    """
    config = clargs.parse_cl_args(sys.argv[1:] if in_args is None else in_args)
    try:
        outcomes = run_main(config)
    except (ValueError, IOError) as e:
        sys.stderr.write("ERROR: %s\n" % e)
        return 1
    return 0 if all(o.ok for o in outcomes) else 1

def run_main(config):
    """Demultiplex a run described by a configuration, returning lane outcomes.
    """
    ctx = RunContext(config)
    utils.safe_makedir(ctx.undetermined_dir)
    utils.safe_makedir(ctx.tmp_dir)
    handler = setup_run_logging(ctx.undetermined_dir, config.get("verbose", False))
    with handler.applicationbound():
        try:
            try:
                ctx.sheet = samplesheet.read_samplesheet(utils.get_in(config, ("dirs", "samplesheet")))
            except (IOError, samplesheet.SampleSheetError) as e:
                logger.error("Could not read sample sheet: %s" % e)
                utils.remove_safe(ctx.tmp_dir)
                raise
            outcomes = run_lanes(ctx, utils.get_in(config, ("algorithm", "omit_lanes"), []))
            logger.info("Final results: \n\t- " + "\n\t- ".join(str(o) for o in outcomes))
        finally:
            handler.close()
    return outcomes

def run_lanes(ctx, omit_lanes=None):
    """Validate and decode every lane of the sample sheet, concurrently.

    All lanes are checked before any lane is started, so decoded output of
    this run never counts as an already decoded library. Returns one outcome
    per lane: omitted and rejected lanes first, then launched lanes in the
    order they finish.
    """
    sheet = ctx.sheet
    omit = set(utils.lane_key(x) for x in (omit_lanes or []))
    force = utils.get_in(ctx.config, ("algorithm", "force"), False)
    sheet_file = utils.get_in(ctx.config, ("dirs", "samplesheet"))
    barcode_files = {}
    for lane, rows in sheet.lanes.items():
        barcode_files[lane] = samplesheet.write_lane_descriptor(lane, sheet.headers, rows, ctx.tmp_dir)
    outcomes = []
    to_run = []
    for lane, rows in sheet.lanes.items():
        if utils.lane_key(lane) in omit:
            logger.info("Omitting lane %s" % lane)
            outcomes.append(RunOutcome.skipped(lane))
            continue
        check = sanity.validate(sheet.headers, rows, ctx.output_dir, sheet_file, force=force)
        if not check.ok:
            msg = "Problem with barcode file %s in lane %s: %s" % (barcode_files[lane], lane,
                                                                  check.message)
            logger.error(msg)
            outcomes.append(RunOutcome.rejected(lane, msg))
        else:
            to_run.append((lane, rows))
    running = {}
    with futures.ThreadPoolExecutor(max_workers=max(1, len(to_run))) as executor:
        for lane, rows in to_run:
            ctx.add_project_dirs(rows)
            illumina2bam_cl, decoder_cl = lane_commands(ctx, lane, rows, barcode_files[lane])
            logger.info("Starting lane %s" % lane)
            running[executor.submit(decode_lane, ctx, lane, illumina2bam_cl, decoder_cl)] = lane
        for future in futures.as_completed(running):
            outcome = _lane_outcome(future, running[future])
            if outcome.ok:
                logger.info(str(outcome))
            else:
                logger.error(str(outcome))
            outcomes.append(outcome)
    if running:
        finalize_run(ctx)
    else:
        logger.info("No lanes were demultiplexed")
        utils.remove_safe(ctx.tmp_dir)
    return outcomes

def _lane_outcome(future, lane):
    try:
        return future.result()
    except Exception as e:
        logger.exception("Unexpected problem demultiplexing lane %s" % lane)
        return RunOutcome.failed(lane, "error", None, None, str(e))

def finalize_run(ctx):
    """Assemble run level output once all lanes are finished.
    """
    transfer.copy_files(transfer.UNDETERMINED_FILES, ctx.basecalls_dir, ctx.undetermined_dir, logger)
    for pdir in ctx.project_dirs():
        out_dir = ctx.project_dir(pdir)
        transfer.copy_files(transfer.PROJECT_FILES, ctx.basecalls_dir, out_dir, logger)
        samplesheet.write_project_samplesheet(ctx.sheet, pdir.project, pdir.run_id, out_dir)
    utils.remove_safe(ctx.tmp_dir)
