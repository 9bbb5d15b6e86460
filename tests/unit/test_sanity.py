import os

import pytest

from bcldemux.illumina import samplesheet, sanity
from tests.unit.data import SHEET

SHEET_FILE = "/data/runs/samplesheet.txt"


def _lane(lane="1"):
    sheet = samplesheet.parse(SHEET)
    return sheet.headers, [dict(r) for r in sheet.lanes[lane]]


def _decoded_file(output_dir, project, run_id, fname):
    run_dir = os.path.join(str(output_dir), project, run_id)
    os.makedirs(run_dir, exist_ok=True)
    out_file = os.path.join(run_dir, fname)
    with open(out_file, "w") as out_handle:
        out_handle.write("")
    return out_file


class TestSanityChecks(object):
    """Lane barcode rows rejected with a single actionable message.
    """
    def test_valid_lane(self, tmp_path):
        headers, rows = _lane()
        result = sanity.validate(headers, rows, str(tmp_path), SHEET_FILE)
        assert result.ok
        assert result.message is None

    def test_missing_header(self, tmp_path):
        headers, rows = _lane()
        headers = [h for h in headers if h != "readstring"]
        result = sanity.validate(headers, rows, str(tmp_path), SHEET_FILE)
        assert not result.ok
        assert result.message == ("Header readstring (readstring in samplesheet %s) "
                                  "does not exist." % SHEET_FILE)

    def test_missing_project_header_uses_sheet_name(self, tmp_path):
        headers, rows = _lane()
        headers = [h for h in headers if h != "pr:project"]
        result = sanity.validate(headers, rows, str(tmp_path), SHEET_FILE)
        assert result.message == ("Header pr:project (project (pr) in samplesheet %s) "
                                  "does not exist." % SHEET_FILE)

    def test_empty_value(self, tmp_path):
        headers, rows = _lane()
        rows[1]["sample_name"] = ""
        result = sanity.validate(headers, rows, str(tmp_path), SHEET_FILE)
        assert result.message == "Attribute sample_name on line 3 has no value."

    def test_empty_barcode(self, tmp_path):
        headers, rows = _lane()
        rows[0]["barcode_sequence"] = ""
        result = sanity.validate(headers, rows, str(tmp_path), SHEET_FILE)
        assert not result.ok
        assert result.message == "Attribute barcode_sequence on line 2 has no value."

    def test_duplicate_barcode(self, tmp_path):
        headers, rows = _lane()
        rows[1]["barcode_sequence"] = rows[0]["barcode_sequence"]
        result = sanity.validate(headers, rows, str(tmp_path), SHEET_FILE)
        assert result.message == 'Barcode "ACGTAC" appears more than once.'

    def test_barcode_length(self, tmp_path):
        headers, rows = _lane()
        rows[1]["barcode_sequence"] = "TGCA"
        result = sanity.validate(headers, rows, str(tmp_path), SHEET_FILE)
        assert result.message == ('Barcode "TGCA" differs in length in comparison to '
                                  'first barcode (ACGTAC)')

    def test_read_strings(self, tmp_path):
        headers, rows = _lane()
        rows[1]["readstring"] = "Y51,I6"
        result = sanity.validate(headers, rows, str(tmp_path), SHEET_FILE)
        assert result.message == 'ReadString "Y51,I6" differs from first ReadString (Y101,I6)'

    def test_fcid(self, tmp_path):
        headers, rows = _lane()
        rows[1]["fcid"] = "D00DLEXX"
        result = sanity.validate(headers, rows, str(tmp_path), SHEET_FILE)
        assert result.message == 'FCID "D00DLEXX" differs from first FCID (C0FFEEXX)'

    def test_first_failure_wins(self, tmp_path):
        headers, rows = _lane()
        rows[1]["barcode_sequence"] = rows[0]["barcode_sequence"]
        rows[1]["fcid"] = "D00DLEXX"
        rows[0]["description"] = ""
        result = sanity.validate(headers, rows, str(tmp_path), SHEET_FILE)
        assert "appears more than once" in result.message

    def test_empty_value_before_duplicate(self, tmp_path):
        headers, rows = _lane()
        rows[1]["barcode_sequence"] = rows[0]["barcode_sequence"]
        rows[1]["library_name"] = ""
        result = sanity.validate(headers, rows, str(tmp_path), SHEET_FILE)
        assert result.message == "Attribute library_name on line 3 has no value."

    def test_reordering_rows(self, tmp_path):
        headers, rows = _lane()
        assert sanity.validate(headers, list(reversed(rows)), str(tmp_path), SHEET_FILE).ok
        rows[1]["readstring"] = "Y51,I6"
        assert not sanity.validate(headers, list(reversed(rows)), str(tmp_path), SHEET_FILE).ok


class TestLibraryCollision(object):
    """Libraries already decoded into a project are not decoded twice.
    """
    def test_existing_library(self, tmp_path):
        headers, rows = _lane()
        existing = _decoded_file(tmp_path, "projB", "OLDRUN", "lib2_1.bam")
        result = sanity.validate(headers, rows, str(tmp_path), SHEET_FILE)
        assert not result.ok
        assert result.message == (
            'It appears that the library "lib2" already exists in project "projB" '
            '(Path: %s). Use --force flag if you wish to override this check.' % existing)

    def test_force_skips_check(self, tmp_path):
        headers, rows = _lane()
        _decoded_file(tmp_path, "projB", "OLDRUN", "lib2_1.bam")
        assert sanity.validate(headers, rows, str(tmp_path), SHEET_FILE, force=True).ok

    def test_sam_output(self, tmp_path):
        headers, rows = _lane("2")
        _decoded_file(tmp_path, "projA", "OLDRUN", "lib3_2.sam")
        assert not sanity.validate(headers, rows, str(tmp_path), SHEET_FILE).ok

    @pytest.mark.parametrize("fname", ["lib2.bam", "lib2_1.txt", "lib20_1.bam", "other_lib2.bam"])
    def test_unrelated_files(self, tmp_path, fname):
        headers, rows = _lane()
        _decoded_file(tmp_path, "projB", "OLDRUN", fname)
        assert sanity.validate(headers, rows, str(tmp_path), SHEET_FILE).ok

    def test_other_project(self, tmp_path):
        headers, rows = _lane()
        _decoded_file(tmp_path, "projC", "OLDRUN", "lib2_1.bam")
        assert sanity.validate(headers, rows, str(tmp_path), SHEET_FILE).ok

    def test_project_listed_once(self, tmp_path, mocker):
        headers, rows = _lane()
        rows.append(dict(rows[0], library_name="lib4", barcode_sequence="TTTTTT"))
        _decoded_file(tmp_path, "projA", "OLDRUN", "lib9_1.bam")
        listdir = mocker.spy(sanity.os, "listdir")
        assert sanity.library_not_decoded(str(tmp_path))(headers, rows).ok
        project_dir = os.path.join(str(tmp_path), "projA")
        assert [c for c in listdir.call_args_list if c[0][0] == project_dir] == [mocker.call(project_dir)]
