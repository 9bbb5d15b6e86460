"""Sanity checks on the barcode rows of a lane before it is demultiplexed.

Problems in a barcode file point to problems in the sample sheet. Checks run
in a fixed order and stop at the first failure, so each rejected lane reports
one actionable message.
"""
import collections
import os

from bcldemux.illumina.samplesheet import ALIASES, BARCODE, LIBRARY, PROJECT

REQUIRED_HEADERS = [ALIASES.normalize(x) for x in
                    ["Project (pr)", "Sample", "Library", "Index", "FCID", "ReadString"]]
READSTRING = ALIASES.normalize("ReadString")
FCID = ALIASES.normalize("FCID")
ALIGNMENT_EXTS = (".bam", ".sam")

class SanityResult(collections.namedtuple("SanityResult", ["ok", "message"])):
    __slots__ = ()

    @classmethod
    def success(cls):
        return cls(True, None)

    @classmethod
    def failure(cls, message):
        return cls(False, message)

def validate(headers, rows, output_dir, sheet_file, force=False):
    """Run all checks on a lane, returning the first failure or success.
    """
    checks = [has_required_values(sheet_file), unique_barcodes_in_lane, equal_barcode_length,
              equal_read_strings, equal_fcid]
    if not force:
        checks.append(library_not_decoded(output_dir))
    for check in checks:
        result = check(headers, rows)
        if not result.ok:
            return result
    return SanityResult.success()

# ## Individual checks

def has_required_values(sheet_file):
    """Check required headers exist and hold a value on every row.

    Missing headers are reported by their name in the sample sheet.
    """
    def check(headers, rows):
        for header in REQUIRED_HEADERS:
            if header not in headers:
                return SanityResult.failure("Header %s (%s in samplesheet %s) does not exist." %
                                            (header, ALIASES.original(header), sheet_file))
            for i, row in enumerate(rows):
                if not row.get(header):
                    # line numbers in the barcode file, after its header line
                    return SanityResult.failure("Attribute %s on line %s has no value." %
                                                (header, i + 2))
        return SanityResult.success()
    return check

def unique_barcodes_in_lane(headers, rows):
    seen = set()
    for row in rows:
        barcode = row[BARCODE]
        if barcode in seen:
            return SanityResult.failure("Barcode \"%s\" appears more than once." % barcode)
        seen.add(barcode)
    return SanityResult.success()

def _first_difference(rows, key, differs):
    first = None
    for row in rows:
        if first is None:
            first = row[key]
        elif differs(row[key], first):
            return row[key], first
    return None

def equal_barcode_length(headers, rows):
    diff = _first_difference(rows, BARCODE, lambda x, first: len(x) != len(first))
    if diff:
        return SanityResult.failure("Barcode \"%s\" differs in length in comparison to "
                                    "first barcode (%s)" % diff)
    return SanityResult.success()

def equal_read_strings(headers, rows):
    diff = _first_difference(rows, READSTRING, lambda x, first: x != first)
    if diff:
        return SanityResult.failure("ReadString \"%s\" differs from first ReadString (%s)" % diff)
    return SanityResult.success()

def equal_fcid(headers, rows):
    diff = _first_difference(rows, FCID, lambda x, first: x != first)
    if diff:
        return SanityResult.failure("FCID \"%s\" differs from first FCID (%s)" % diff)
    return SanityResult.success()

def library_not_decoded(output_dir):
    """Check no decoded BAM/SAM file for a library already exists in its project.

    Decoded files are named `<library>_<rest>.bam`; existing run folders of
    each project are listed once per validation.
    """
    def _decoded_files(project):
        project_dir = os.path.join(output_dir, project)
        out = []
        if not os.path.isdir(project_dir):
            return out
        for run_folder in sorted(os.listdir(project_dir)):
            run_dir = os.path.join(project_dir, run_folder)
            if os.path.isdir(run_dir):
                for fname in sorted(os.listdir(run_dir)):
                    if "_" in fname and fname.endswith(ALIGNMENT_EXTS):
                        out.append((fname.split("_")[0], os.path.join(run_dir, fname)))
        return out

    def check(headers, rows):
        by_project = {}
        for row in rows:
            project, library = row[PROJECT], row[LIBRARY]
            if project not in by_project:
                by_project[project] = _decoded_files(project)
            for decoded_library, fname in by_project[project]:
                if decoded_library == library:
                    return SanityResult.failure(
                        "It appears that the library \"%s\" already exists in project \"%s\" "
                        "(Path: %s). Use --force flag if you wish to override this check." %
                        (library, project, fname))
        return SanityResult.success()
    return check
