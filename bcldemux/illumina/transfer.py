"""Copy run metadata from the sequencer run folder next to demultiplexed output.

Copying is best effort: missing files are reported in the log and skipped.
"""
import os

from bcldemux import utils

# relative to Data/Intensities/BaseCalls, destination name in the Undetermined directory
UNDETERMINED_FILES = [("../../../RunInfo.xml", "RunInfo.xml"),
                      ("../../../runParameters.xml", "runParameters.xml"),
                      ("../../../InterOp/", "InterOp/"),
                      ("../../../First_Base_Report.htm", "First_Base_Report.htm"),
                      ("../../../Config/", "Config/"),
                      ("../../../Recipe/", "Recipe/"),
                      ("../../Status.htm", "Status.htm"),
                      ("../../Status_Files/", "Status_Files/"),
                      ("../../reports/", "reports/"),
                      ("../RTAConfiguration.xml", "RTAConfiguration.xml"),
                      ("../config.xml", "IntensitiesConfig.xml"),
                      ("config.xml", "BaseCallsConfig.xml"),
                      ("BustardSummary.xml", "BustardSummary.xml"),
                      ("BustardSummary.xsl", "BustardSummary.xsl")]

# copied into every project output directory
PROJECT_FILES = [("../../../RunInfo.xml", "RunInfo.xml"),
                 ("../../../runParameters.xml", "runParameters.xml"),
                 ("../../../InterOp/", "InterOp/")]

def lane_files(lane):
    """Lane specific files in the temporary directory, kept with the Undetermined output.
    """
    return [("intensitiesconfig_lane_%s.xml" % lane, "IntensitiesConfig_lane_%s.xml" % lane),
            ("basecallsconfig_lane_%s.xml" % lane, "BaseCallsConfig_lane_%s.xml" % lane),
            ("barcodes_%s.txt" % lane, "barcodes_%s.txt" % lane)]

def copy_files(to_copy, from_dir, to_dir, log):
    """Copy (source, destination) pairs of files and directories, returning copied paths.
    """
    copied = []
    for from_name, to_name in to_copy:
        from_path = os.path.normpath(os.path.join(from_dir, from_name))
        to_path = os.path.normpath(os.path.join(to_dir, to_name))
        if not os.path.exists(from_path):
            log.error("Skipping copy of %s, does not exist." % from_path)
            continue
        try:
            kind = utils.copy_path(from_path, to_path)
        except OSError as e:
            log.error("Skipping copy of %s: %s" % (from_path, e))
            continue
        if kind is None:
            log.error("Skipping copy of %s, is neither dir nor file." % from_path)
        else:
            log.info("Copied %s %s to %s" % ("folder" if kind == "dir" else "file",
                                             from_path, to_path))
            copied.append(to_path)
    return copied
