"""BCL to BAM conversion and barcode decoding command lines for a single lane.

Uses illumina2bam and BamIndexDecoder, both Picard style Java tools taking
KEY=value options. illumina2bam writes an uncompressed BAM stream to stdout
that BamIndexDecoder reads on stdin.
"""
import os

from bcldemux import utils
from bcldemux.pipeline import config_utils

JARS = {"illumina2bam": "illumina2bam.jar",
        "bamindexdecoder": "BamIndexDecoder.jar"}
DEFAULT_MEMORY = {"illumina2bam": "2g",
                  "bamindexdecoder": "1g"}
# parse only the first tile of a lane
DEBUG_TILES = [("FIRST_TILE", 1101), ("TILE_LIMIT", 1)]

def _java_cl(name, config):
    resources = config_utils.get_resources(name, config)
    java = config_utils.get_program("java", config)
    jar = resources.get("jar") or os.path.join(utils.get_in(config, ("dirs", "jar"), os.getcwd()),
                                               JARS[name])
    memory = resources.get("memory", DEFAULT_MEMORY[name])
    jvm_opts = [x for x in resources.get("jvm_opts", []) if not x.startswith("-Xmx")]
    return [java, "-Xmx%s" % memory] + jvm_opts + ["-jar", config_utils.expand_path(jar)]

def _options(opts):
    return ["%s=%s" % (x, y) for x, y in opts]

def read_index(readstring):
    """illumina2bam read identifier from a sample sheet ReadString, eg. Y101,I6 -> Y101I6
    """
    return readstring.replace(",", "")

def illumina2bam_cl(intensities_dir, lane, readstring, tmp_dir, config):
    """Commandline converting the BCL files of a lane into a BAM stream on stdout.
    """
    opts = [("I", intensities_dir),
            ("L", lane),
            ("O", "/dev/stdout"),
            ("PF", "false"),
            ("RI", read_index(readstring)),
            ("QUIET", "true"),
            ("COMPRESSION_LEVEL", 0)]
    if utils.get_in(config, ("algorithm", "debug")):
        opts += DEBUG_TILES
    opts.append(("TEMP_DIR", tmp_dir))
    return _java_cl("illumina2bam", config) + _options(opts)

def output_format(config):
    return "bam" if utils.get_in(config, ("algorithm", "output_format"), "bam") == "bam" else "sam"

def bamindexdecoder_cl(output_dir, barcode_file, metrics_file, config):
    """Commandline splitting a BAM stream on stdin into per library files.
    """
    algorithm = config.get("algorithm", {})
    opts = [("I", "/dev/stdin"),
            ("OUTPUT_DIR", os.path.normpath(output_dir)),
            ("OUTPUT_FORMAT", output_format(config)),
            ("OUTPUT_PREFIX", "na"),
            ("BARCODE_FILE", os.path.normpath(barcode_file)),
            ("M", os.path.normpath(metrics_file)),
            ("MAX_MISMATCHES", algorithm.get("max_mismatches", 0)),
            ("MIN_MISMATCH_DELTA", algorithm.get("min_mismatch_delta", 2)),
            ("MAX_NO_CALLS", algorithm.get("max_no_calls", 0))]
    return _java_cl("bamindexdecoder", config) + _options(opts)
