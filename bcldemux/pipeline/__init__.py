"""High level code for driving demultiplexing of a sequencing run.

This structures processing steps into the following modules:

  - main.py: Validate lanes, run them concurrently and assemble run output.
    - lane.py: Demultiplex a single lane with a piped conversion and decoding.
  - run_info.py: Run scoped directories, output registry and lane outcomes.
  - clargs.py, config_utils.py: Commandline and YAML configuration.
"""
