"""Pytest fixtures for a minimal Illumina run folder and run context"""

import os

import pytest

from bcldemux import utils
from bcldemux.illumina import samplesheet
from bcldemux.pipeline.run_info import RunContext
from tests.unit.data import RUN_ID, RUN_INFO, SHEET


@pytest.fixture
def run_folder(tmp_path):
    run_dir = tmp_path / RUN_ID
    basecalls = run_dir / "Data" / "Intensities" / "BaseCalls"
    basecalls.mkdir(parents=True)
    (run_dir / "RunInfo.xml").write_text(RUN_INFO % RUN_ID)
    (run_dir / "runParameters.xml").write_text("<RunParameters/>\n")
    (run_dir / "InterOp").mkdir()
    (run_dir / "InterOp" / "QMetricsOut.bin").write_bytes(b"\x00\x01")
    (basecalls / "config.xml").write_text("<BaseCallAnalysis/>\n")
    return str(run_dir)


@pytest.fixture
def basecalls_dir(run_folder):
    return os.path.join(run_folder, "Data", "Intensities", "BaseCalls")


@pytest.fixture
def sheet_file(tmp_path):
    out_file = tmp_path / "samplesheet.txt"
    out_file.write_text(SHEET)
    return str(out_file)


@pytest.fixture
def config(tmp_path, basecalls_dir, sheet_file):
    return {"dirs": {"samplesheet": sheet_file,
                     "basecalls": basecalls_dir,
                     "output": str(tmp_path / "output"),
                     "tmp": str(tmp_path / "tmp"),
                     "jar": "/opt/illumina2bam"},
            "algorithm": {},
            "resources": {}}


@pytest.fixture
def ctx(config, sheet_file):
    run_ctx = RunContext(config, samplesheet.read_samplesheet(sheet_file))
    utils.safe_makedir(run_ctx.tmp_dir)
    return run_ctx
