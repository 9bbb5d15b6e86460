"""Retrieve details about a sequencing run from Illumina run folder metadata.
"""
import os
from xml.etree.ElementTree import ElementTree

def intensities_dir(basecalls_dir):
    return os.path.normpath(os.path.join(basecalls_dir, os.pardir))

def run_info_file(basecalls_dir):
    """RunInfo.xml sits at the top of the run folder, above Data/Intensities/BaseCalls.
    """
    return os.path.normpath(os.path.join(basecalls_dir, os.pardir, os.pardir, os.pardir,
                                         "RunInfo.xml"))

def get_run_id(run_info):
    """Parse the unique run identifier from the Run element of a RunInfo.xml file.
    """
    if not os.path.exists(run_info):
        raise ValueError("Could not find run information file: %s" % run_info)
    tree = ElementTree()
    tree.parse(run_info)
    run_elem = tree.find("Run")
    if run_elem is None or not run_elem.get("Id"):
        raise ValueError("Did not find a run Id in %s" % run_info)
    return run_elem.get("Id")
