"""
Exact-match search over the raw rows of the contacts file.

**Conceptual**: Search returns raw field text, not decoded Records. A row is
searchable only if Load would decode it: malformed rows (wrong field count,
broken quoting, bad or out-of-range id) are skipped. The file has no header:
the first row is data.

**Matching rule**: a row matches when ANY of its fields is exactly equal to
the query (full-field, case-sensitive). No substring matching, no ranking;
matches come back in file order.
"""

import csv
import sys

import pandas as pd

from contact_book.data.codec import (
    FIELD_SEPARATOR,
    MalformedRecordError,
    record_from_fields,
    split_fields,
)
from contact_book.data.schemas import RECORD_FIELDS


def iter_raw_rows(contents: str):
    """
    Yield the raw fields of every decodable row, in file order.

    A row is skipped when it would not decode into a Record: blank, broken
    quoting, not exactly three fields, or an id that is not an in-range
    non-negative integer.
    """
    for line in contents.split("\n"):
        try:
            fields = split_fields(line)
            record_from_fields(fields)
        except MalformedRecordError:
            continue
        yield fields


def rows_to_frame(contents: str) -> pd.DataFrame:
    """Collect the decodable raw rows of `contents` into a string DataFrame."""
    return pd.DataFrame(list(iter_raw_rows(contents)), columns=RECORD_FIELDS, dtype=str)


def search_rows(query: str, contents: str) -> list[list[str]]:
    """
    Find the rows in which some field equals `query` exactly.

    Args:
        query: Text to compare against every field of every row.
        contents: Full text of the contacts file.

    Returns:
        Matching rows as lists of raw field strings, in file order. An empty
        list when nothing matches.

    Example:
        >>> contents = "1,Alice,alice@example.com\\n2,Bob,\\n"
        >>> search_rows("alice@example.com", contents)
        [['1', 'Alice', 'alice@example.com']]
        >>> search_rows("alice", contents)
        []
    """
    frame = rows_to_frame(contents)
    if frame.empty:
        return []

    mask = frame.eq(query).any(axis=1)
    return [[str(value) for value in row] for row in frame.loc[mask].itertuples(index=False)]


def write_matches(rows, out=None) -> int:
    """
    Write matching rows to a text sink, one CSV line per row.

    Args:
        rows: Rows as returned by search_rows.
        out: Writable text stream (default: sys.stdout).

    Returns:
        Number of rows written.
    """
    out = out or sys.stdout
    writer = csv.writer(out, delimiter=FIELD_SEPARATOR, lineterminator="\n")
    count = 0
    for row in rows:
        writer.writerow(row)
        count += 1
    return count
