#!/usr/bin/env python
"""Wrapper for performing Illumina bcl to bam encoding and demultiplexing.

Splits a samplesheet with multiple lanes into barcode files per lane, checks
each lane for problems in the samplesheet and starts concurrent illumina2bam
and BamIndexDecoder processes for every lane.

Usage:
  bcldemux_wrapper.py -s <samplesheet> -b <basecalls dir> -o <output dir> -t <temp dir>
     -f output format, bam (default) or sam
     -m, -d, -n barcode mismatch, mismatch delta and no-call thresholds
     --im, --ib heap sizes for illumina2bam and BamIndexDecoder
     --omitLanes comma separated lanes to skip
     --force skip the check for already decoded libraries
"""
import sys

from bcldemux.pipeline.main import main

if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
