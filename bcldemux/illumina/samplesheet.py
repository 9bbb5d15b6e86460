"""Parse tab delimited Illumina sample sheets into per lane barcode files.

Headers are lowercased, `Long Name (short)` headers become `short:longname`
(these end up as custom attributes in the @RG header of the decoded output)
and a small set of well known headers are renamed to the names
BamIndexDecoder expects.
"""
import collections
import csv
import io
import os

from bcldemux.log import logger

# ## Header normalization

class HeaderAliases:
    """Bidirectional lookup between sample sheet headers and normalized names.
    """
    def __init__(self, replacements):
        self._forward = collections.OrderedDict(replacements)
        self._reverse = {v: k for k, v in self._forward.items()}

    def normalize(self, header):
        header = header.strip().lower()
        open_i = header.find("(")
        if open_i > 0 and header.find(")") > open_i:
            long_name, rest = header.split("(", 1)
            short_name = rest.split(")", 1)[0]
            header = "%s:%s" % (short_name.strip(), long_name.replace(" ", ""))
        return self._forward.get(header, header)

    def original(self, name):
        """Human readable form of a normalized header, as written in a sample sheet.
        """
        name = self._reverse.get(name, name)
        if ":" in name:
            short_name, long_name = name.split(":", 1)
            name = "%s (%s)" % (long_name, short_name)
        return name

ALIASES = HeaderAliases([("library", "library_name"),
                         ("sample", "sample_name"),
                         ("index", "barcode_sequence")])

LANE = "lane"
PROJECT = ALIASES.normalize("Project (pr)")
LIBRARY = ALIASES.normalize("Library")
BARCODE = ALIASES.normalize("Index")

def normalize_headers(headers):
    headers = list(headers)
    if headers and headers[0].startswith("#"):
        headers[0] = headers[0][1:]
    return [ALIASES.normalize(h) for h in headers]

# ## Parsing

class SampleSheetError(ValueError):
    pass

class TabDialect(csv.excel_tab):
    """Tab separated fields taken literally, no quoting."""
    quoting = csv.QUOTE_NONE
    quotechar = None
    lineterminator = "\n"

class SampleSheet:
    """Normalized sample sheet with rows partitioned by lane.

    headers -- normalized header names, in sheet order
    lanes -- ordered mapping of lane id to the rows of that lane
    rows -- every data row, in sheet order
    raw_headers -- header names as written, without the leading comment marker
    raw_rows -- fields of every data row as written, parallel to rows
    """
    def __init__(self, headers, lanes, rows, raw_headers, raw_rows=None):
        self.headers = headers
        self.lanes = lanes
        self.rows = rows
        self.raw_headers = raw_headers
        self.raw_rows = raw_rows if raw_rows is not None else [list(r.values()) for r in rows]

    def projects(self):
        seen = []
        for row in self.rows:
            if row.get(PROJECT) and row[PROJECT] not in seen:
                seen.append(row[PROJECT])
        return seen

    def raw_rows_for_project(self, project):
        return [raw for row, raw in zip(self.rows, self.raw_rows) if row.get(PROJECT) == project]

    def project_in_lane(self, project, lane):
        return any(r.get(PROJECT) == project for r in self.lanes.get(lane, []))

def _is_data_line(values):
    return any(x.strip() for x in values) and not values[0].startswith("#")

def _to_row(headers, values, line_num):
    if len(values) > len(headers):
        extra = values[len(headers):]
        if any(x.strip() for x in extra):
            logger.warning("Ignoring values beyond the %s sample sheet headers on line %s: %s" %
                           (len(headers), line_num, ", ".join(extra)))
        values = values[:len(headers)]
    values = values + [""] * (len(headers) - len(values))
    return collections.OrderedDict(zip(headers, values))

def parse(raw_text):
    """Parse sample sheet text into a SampleSheet grouped by the `lane` column.
    """
    reader = csv.reader(io.StringIO(raw_text, newline=""), dialect=TabDialect)
    raw_headers = next(reader, None)
    if not raw_headers:
        raise SampleSheetError("Sample sheet is empty")
    headers = normalize_headers(raw_headers)
    if raw_headers[0].startswith("#"):
        raw_headers[0] = raw_headers[0][1:]
    if LANE not in headers:
        raise SampleSheetError("Could not find \"Lane\" header in sample sheet, found: %s" %
                               ", ".join(raw_headers))
    # rows map headers to values, a repeated header would silently lose a column
    dups = sorted(set(h for h in headers if headers.count(h) > 1))
    if dups:
        raise SampleSheetError("Duplicate headers in sample sheet: %s" % ", ".join(dups))
    rows = []
    raw_rows = []
    lanes = collections.OrderedDict()
    for values in reader:
        if _is_data_line(values):
            row = _to_row(headers, values, reader.line_num)
            rows.append(row)
            raw_rows.append(values)
            lanes.setdefault(row[LANE], []).append(row)
    return SampleSheet(headers, lanes, rows, raw_headers, raw_rows)

def read_samplesheet(in_file):
    with io.open(in_file, encoding="utf-8", newline="") as in_handle:
        return parse(in_handle.read())

# ## Writing

def lane_descriptor_file(out_dir, lane):
    return os.path.join(out_dir, "barcodes_%s.txt" % lane)

def write_lane_descriptor(lane, headers, rows, out_dir):
    """Write the barcode file for a lane, read by BamIndexDecoder.
    """
    out_file = lane_descriptor_file(out_dir, lane)
    with io.open(out_file, "w", encoding="utf-8", newline="") as out_handle:
        writer = csv.writer(out_handle, dialect=TabDialect)
        writer.writerow(headers)
        for row in rows:
            writer.writerow([row[h] for h in headers])
    return out_file

def project_samplesheet_file(out_dir, project, run_id):
    return os.path.join(out_dir, "%s_%s_samplesheet.txt" % (project, run_id))

def write_project_samplesheet(sheet, project, run_id, out_dir):
    """Write a sample sheet holding only the rows of a single project, as written.
    """
    out_file = project_samplesheet_file(out_dir, project, run_id)
    with io.open(out_file, "w", encoding="utf-8", newline="") as out_handle:
        writer = csv.writer(out_handle, dialect=TabDialect)
        writer.writerow(["#" + sheet.raw_headers[0]] + sheet.raw_headers[1:])
        for values in sheet.raw_rows_for_project(project):
            writer.writerow(values)
    return out_file
