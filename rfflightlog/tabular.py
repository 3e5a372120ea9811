"""Row-oriented reading and writing of comma separated tables.

Every table starts with a header row naming its columns. Rows are handled as
dicts keyed by column name with string values. Writing quotes a field only
when it contains the delimiter, a quote character or a line break, doubling
any embedded quotes. ``None`` is written as an empty field.
"""

import csv
import io
import os
from typing import Iterator

DELIMITER = ','
QUOTECHAR = '"'
LINE_TERMINATOR = '\n'

# Block size used when scanning backwards for the last row.
_SEEK_BLOCK_SIZE = 1024

_DIALECT = {
    'delimiter': DELIMITER,
    'quotechar': QUOTECHAR,
    'quoting': csv.QUOTE_MINIMAL,
    'lineterminator': LINE_TERMINATOR,
}


def _dict_writer(file, headers: list[str]) -> csv.DictWriter:
    return csv.DictWriter(file, fieldnames=headers, extrasaction='ignore', restval='', **_DIALECT)


def _dict_reader(lines, headers: list[str]) -> csv.DictReader:
    return csv.DictReader(lines, fieldnames=headers, restval='', **_DIALECT)


def escape_csv(value) -> str:
    """
    Convert a single value to its field representation.

    Examples:
        None -> ''
        42 -> '42'
        'a,b' -> '"a,b"'
    """
    if value is None or value == '':
        return ''
    buffer = io.StringIO()
    csv.writer(buffer, **_DIALECT).writerow([value])
    return buffer.getvalue()[:-len(LINE_TERMINATOR)]


def write_csv_headers_to_file(file, headers: list[str]):
    """Write the header row to an open text file."""
    _dict_writer(file, headers).writeheader()


def write_csv_row_to_file(file, headers: list[str], row: dict):
    """
    Write a single row to an open text file.

    The file is expected to be positioned at its end. Values are taken from
    ``row`` in header order; missing keys are written as empty fields.
    """
    _dict_writer(file, headers).writerow(row)


def write_csv(path, headers: list[str], rows: list[dict]):
    """Write a complete table, replacing any existing file."""
    with open(path, 'w', newline='', encoding='utf-8') as f:
        writer = _dict_writer(f, headers)
        writer.writeheader()
        writer.writerows(rows)


def _missing_line_break(path) -> bool:
    """Check whether a non-empty file lacks a line break after its last row."""
    if not os.path.exists(path) or os.path.getsize(path) == 0:
        return False
    with open(path, 'rb') as f:
        f.seek(-1, os.SEEK_END)
        return f.read(1) != b'\n'


def write_csv_row(path, headers: list[str], row: dict):
    """
    Append a single row to a table.

    If the last line of the table is not terminated, a line break is written
    first so the new row does not run into it.
    """
    separator = LINE_TERMINATOR if _missing_line_break(path) else ''
    with open(path, 'a', newline='', encoding='utf-8') as f:
        f.write(separator)
        write_csv_row_to_file(f, headers, row)


def read_csv_headers_from_file(file) -> list[str]:
    """
    Read the header row from an open text file positioned at its start.

    Returns:
        list: Column names, or an empty list if the file is empty
    """
    return next(csv.reader(file, **_DIALECT), [])


def read_csv_rows_from_file(file, headers: list[str]) -> Iterator[dict]:
    """
    Yield the remaining rows of an open text file as dicts.

    Short rows are padded with empty strings; blank lines are skipped.
    """
    yield from _dict_reader(file, headers)


def read_csv_headers(path) -> list[str]:
    """Read only the header row of a table."""
    with open(path, 'r', newline='', encoding='utf-8') as f:
        return read_csv_headers_from_file(f)


def read_csv(path) -> tuple[list[str], list[dict]]:
    """
    Read a complete table.

    Returns:
        tuple: (column names, list of row dicts)
    """
    with open(path, 'r', newline='', encoding='utf-8') as f:
        headers = read_csv_headers_from_file(f)
        rows = list(read_csv_rows_from_file(f, headers))
    return headers, rows


def read_last_csv_row_from_file(file, headers: list[str]) -> dict | None:
    """
    Read the last row of an open binary file without reading the whole file.

    Scans backwards from the end of the file to the last line break. Rows
    containing quoted line breaks are not supported here.

    Returns:
        dict: The last row keyed by ``headers``, or None if the file holds
        no data rows
    """
    file.seek(0, os.SEEK_END)
    end = file.tell()

    # Ignore the line break terminating the last row.
    while end > 0:
        file.seek(end - 1)
        if file.read(1) not in (b'\n', b'\r'):
            break
        end -= 1

    start = end
    while start > 0:
        block_start = max(0, start - _SEEK_BLOCK_SIZE)
        file.seek(block_start)
        block = file.read(start - block_start)
        newline = block.rfind(b'\n')
        if newline != -1:
            start = block_start + newline + 1
            break
        start = block_start

    # A last line starting at offset 0 is the header row.
    if start == 0:
        return None

    file.seek(start)
    line = file.read(end - start).decode('utf-8')
    return next(_dict_reader([line], headers), None)


def read_last_csv_row(path, headers: list[str]) -> dict | None:
    """Read the last row of a table by seeking from the end of the file."""
    with open(path, 'rb') as f:
        return read_last_csv_row_from_file(f, headers)
