"""
Line codec for the contacts file: one line <-> one Record.

**Line format**:
    <id>,<name>,<email>

Example:
    1,Alice,alice@x.com
    2,Bob,

Fields follow the standard CSV quoting convention: a field that contains the
separator or a double quote is wrapped in double quotes, with embedded quotes
doubled. Lines without quotes split exactly like a plain split on ",".
Lines are always three fields, even when the email is empty.

**Two decoders**:
  - `parse_line` is strict: it raises MalformedRecordError with the reason.
  - `decode_line` is tolerant: it returns None for a malformed line and never
    raises. Loading and searching use the tolerant behaviour.
"""

import csv
import io
import re

from contact_book.data.schemas import MAX_RECORD_ID, RECORD_FIELDS, Record


FIELD_SEPARATOR = ","

# Records put no cap on name/email length; the csv reader's default cap is
# 131072 characters per field. 2**31 - 1 fits a C long on every platform.
MAX_FIELD_SIZE = 2**31 - 1
csv.field_size_limit(MAX_FIELD_SIZE)

# Plain ASCII digits only: no sign, no spaces, no underscores
_ID_PATTERN = re.compile(r"[0-9]+")


class MalformedRecordError(ValueError):
    """Raised when a line cannot be decoded into a Record."""
    pass


def split_fields(line: str) -> list[str]:
    """
    Split one line into its raw fields, honouring CSV quoting.

    The trailing line terminator, if any, is removed first. A blank line has
    no fields.

    Raises:
        MalformedRecordError: If the quoting is broken (e.g. an unterminated
            quoted field) or the line is blank.
    """
    raw = line.rstrip("\r\n")
    if not raw.strip():
        raise MalformedRecordError("blank line")

    try:
        return next(csv.reader([raw], delimiter=FIELD_SEPARATOR, strict=True))
    except csv.Error as e:
        raise MalformedRecordError(f"broken quoting: {e}") from e


def parse_line(line: str) -> Record:
    """
    Parse one line into a Record.

    Raises:
        MalformedRecordError: If the line does not have exactly three fields,
            or the id is not a non-negative integer within range.
    """
    return record_from_fields(split_fields(line))


def record_from_fields(fields: list[str]) -> Record:
    """
    Build a Record from already-split raw fields.

    Raises:
        MalformedRecordError: Same conditions as parse_line.
    """
    if len(fields) != len(RECORD_FIELDS):
        raise MalformedRecordError(
            f"expected {len(RECORD_FIELDS)} fields separated by "
            f"'{FIELD_SEPARATOR}', got {len(fields)}"
        )

    id_field, name, email = fields

    if not _ID_PATTERN.fullmatch(id_field):
        raise MalformedRecordError(f"id is not a non-negative integer: {id_field!r}")

    rec_id = int(id_field)
    if rec_id > MAX_RECORD_ID:
        raise MalformedRecordError(f"id out of range: {id_field}")

    try:
        return Record(id=rec_id, name=name, email=email)
    except ValueError as e:
        # a quoted field can still carry a bare "\r"
        raise MalformedRecordError(str(e)) from e


def decode_line(line: str) -> Record | None:
    """Decode one line, returning None when the line is malformed."""
    try:
        return parse_line(line)
    except MalformedRecordError:
        return None


def encode_record(record: Record) -> str:
    """
    Render a Record as exactly one line, terminator included.

    Example:
        >>> encode_record(Record(3, "Carol", ""))
        '3,Carol,\\n'
        >>> encode_record(Record(4, "Doe, Jane", "jane@x.com"))
        '4,"Doe, Jane",jane@x.com\\n'
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=FIELD_SEPARATOR, lineterminator="\n")
    writer.writerow([record.id, record.name, record.email])
    return buffer.getvalue()
