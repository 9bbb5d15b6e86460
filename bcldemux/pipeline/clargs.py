"""Parse commandline arguments into a run configuration.

Values given on the commandline override those of an optional YAML
configuration file; unset options fall back to program defaults.
"""
import argparse
import os
import re

from bcldemux.pipeline import config_utils, version

def parse_lane_list(lanes):
    """Comma separated list of lanes, ignoring whitespace.
    """
    if not lanes:
        return []
    return [x for x in re.sub(r"\s", "", str(lanes)).split(",") if x]

def setup_parser():
    parser = argparse.ArgumentParser(
        description="Wrapper for performing illumina bcl to bam encoding and demultiplexing.")
    parser.add_argument("-s", "--samplesheet", required=True, help="Samplesheet")
    parser.add_argument("-b", "--basecallsDirectory", required=True, help="Basecalls directory")
    parser.add_argument("-o", "--outputDirectory", required=True,
                        help="Output directory, sub dirs /project/RunID will be created")
    parser.add_argument("-t", "--tempDirectory", required=True,
                        help="Temp directory, sub dirs will be created")
    parser.add_argument("-f", dest="output_format",
                        help="Output format [bam|sam], default to 'bam'")
    parser.add_argument("-m", dest="max_mismatches", type=int,
                        help="Maximum mismatches for a barcode to be considered a match")
    parser.add_argument("-d", dest="min_mismatch_delta", type=int,
                        help=("Minimum difference between number of mismatches in the best and "
                              "second best barcodes for a barcode to be considered a match"))
    parser.add_argument("-n", dest="max_no_calls", type=int,
                        help=("Maximum allowable number of no-calls in a barcode read before "
                              "it is considered unmatchable"))
    parser.add_argument("--im", help="Maximum memory heap size for illumina2bam process, defaults to 2g")
    parser.add_argument("--ib", help="Maximum memory heap size for BamIndexDecoder process, defaults to 1g")
    parser.add_argument("--debug", action="store_true", default=None,
                        help="Parse the first tile in each lane")
    parser.add_argument("--force", action="store_true", default=None,
                        help=("Disables check if library already exists, hence overwrites files "
                              "if they already exist"))
    parser.add_argument("--omitLanes", default="",
                        help="Comma separated list with numbers identifying lanes to omit")
    parser.add_argument("--jardir", help="Directory containing illumina2bam.jar and BamIndexDecoder.jar")
    parser.add_argument("--timeout", type=int,
                        help="Seconds to wait for a lane before killing its processes")
    parser.add_argument("--config", help="YAML configuration file with program resources")
    parser.add_argument("-v", "--verbose", action="store_true", default=None, help="Verbose output")
    parser.add_argument("--version", action="version", version="%(prog)s " + version.__version__)
    return parser

def to_config(args):
    base = config_utils.load_config(args.config) if args.config else {}
    output_format = args.output_format
    if output_format is not None and output_format != "bam":
        output_format = "sam"
    cl_config = {"dirs": {"samplesheet": os.path.abspath(args.samplesheet),
                          "basecalls": os.path.abspath(args.basecallsDirectory),
                          "output": os.path.abspath(args.outputDirectory),
                          "tmp": os.path.abspath(args.tempDirectory),
                          "jar": os.path.abspath(args.jardir) if args.jardir else None},
                 "algorithm": {"output_format": output_format,
                               "max_mismatches": args.max_mismatches,
                               "min_mismatch_delta": args.min_mismatch_delta,
                               "max_no_calls": args.max_no_calls,
                               "debug": args.debug,
                               "force": args.force,
                               "omit_lanes": parse_lane_list(args.omitLanes) or None,
                               "timeout": args.timeout},
                 "resources": {"illumina2bam": {"memory": args.im},
                               "bamindexdecoder": {"memory": args.ib}},
                 "verbose": args.verbose}
    return config_utils.merge_config(base, cl_config)

def parse_cl_args(in_args):
    return to_config(setup_parser().parse_args(in_args))
