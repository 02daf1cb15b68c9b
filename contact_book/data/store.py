"""
File-backed record store for the contacts CSV.

**Conceptual**: This module is the *only* I/O boundary for the contacts file.
Everything that reads or appends rows goes through these functions, so the
tolerance rules (malformed rows are dropped, never fatal) and the append-only
write policy live in one place.

**Functionally**:
  - `read_contacts_text` reads the whole file; a missing or unreadable file is
    a hard failure.
  - `load_records` decodes every line independently and keeps file order.
  - `append_record` writes one encoded line to an already-open handle.
  - `load_contacts` returns a `LoadedContacts` snapshot: the state of the file
    for one pass through the menu loop, passed explicitly to each command.

Existing lines are never rewritten or reordered; new records are appended.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from contact_book.data.codec import MalformedRecordError, encode_record, parse_line
from contact_book.data.schemas import MAX_RECORD_ID, Record, validate_new_contact

logger = logging.getLogger(__name__)

# Left by some editors (e.g. Windows Notepad) at the start of UTF-8 files
_BOM = "\ufeff"


class ContactFileError(OSError):
    """Raised when the contacts file exists but cannot be read."""
    pass


class ContactWriteError(OSError):
    """Raised when a record cannot be appended to the contacts file."""
    pass


def read_contacts_text(path: Path | str, encoding: str = "utf-8") -> str:
    """
    Read the full text of the contacts file.

    Args:
        path: Path to the contacts CSV.
        encoding: Text encoding of the file (default: utf-8).

    Returns:
        The file contents. Newlines are normalised to "\\n" and a leading
        byte-order mark is dropped.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ContactFileError: If the file can't be read or decoded as text.
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(
            f"Contacts file not found: {path}. "
            f"Ensure the file exists and the path is correct."
        )

    try:
        text = path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise ContactFileError(
            f"{path}: Failed to read contacts file. Error: {e}"
        ) from e

    return text.removeprefix(_BOM)


def iter_decoded_lines(contents: str):
    """
    Decode each line of `contents`, yielding one outcome per line.

    Yields:
        (line_number, line, record, reason) tuples. `line_number` starts at 1.
        For a well-formed line `record` is the Record and `reason` is None;
        for a malformed line `record` is None and `reason` says why.
    """
    lines = contents.split("\n")
    # A final terminator ends the last line; it does not start a new one
    if lines and lines[-1] == "":
        lines.pop()

    for line_number, line in enumerate(lines, start=1):
        try:
            yield line_number, line, parse_line(line), None
        except MalformedRecordError as e:
            yield line_number, line, None, str(e)


def load_records(
    contents: str,
    *,
    context: str | None = None,
    warn_malformed: bool = False,
) -> tuple[list[Record], int]:
    """
    Decode all records from the text of a contacts file.

    Malformed lines are dropped. The load as a whole never fails because of
    individual rows.

    Args:
        contents: Full text of the contacts file.
        context: Optional source description (e.g. the path) for log messages.
        warn_malformed: If True, log a WARNING for each dropped non-blank line.
                        Blank lines are always skipped silently.

    Returns:
        (records, count): decoded records in file order and how many there are.

    Example:
        >>> records, count = load_records("1,Alice,alice@x.com\\n\\n2,Bob,\\n")
        >>> count
        2
        >>> records[1]
        Record(id=2, name='Bob', email='')
    """
    ctx = f"{context}: " if context else ""
    records: list[Record] = []

    for line_number, line, record, reason in iter_decoded_lines(contents):
        if record is not None:
            records.append(record)
        elif warn_malformed and line.strip():
            logger.warning(f"{ctx}line {line_number}: skipped malformed row ({reason})")

    return records, len(records)


def next_record_id(records) -> int:
    """
    Compute the identifier for a new record: highest existing id plus one.

    An empty collection starts at 1.

    Raises:
        ValueError: If the next id would exceed MAX_RECORD_ID.
    """
    highest = max((r.id for r in records), default=0)
    candidate = highest + 1
    if candidate > MAX_RECORD_ID:
        raise ValueError(
            f"No identifiers left: highest id is already {highest}."
        )
    return candidate


def append_record(record: Record, fh) -> None:
    """
    Encode `record` and write it to the end of an open, writable text handle.

    The handle is flushed after the write. Opening and closing it is the
    caller's job.

    Raises:
        ContactWriteError: If the write or flush fails (including a closed or
            read-only handle).
    """
    line = encode_record(record)
    try:
        fh.write(line)
        fh.flush()
    except (OSError, ValueError) as e:
        raise ContactWriteError(
            f"Failed to append record {record.id} to contacts file. Error: {e}"
        ) from e
    logger.debug(f"Appended record {record.id}: {line.rstrip()}")


@dataclass
class LoadedContacts:
    """
    The contacts file as loaded for one pass through the menu loop.

    Attributes:
        path: Path of the backing file.
        contents: Raw text of the file (kept for the search filter).
        records: Decoded records in file order.
        encoding: Text encoding used for reads and appends.
    """
    path: Path
    contents: str
    records: list[Record] = field(default_factory=list)
    encoding: str = "utf-8"

    @property
    def count(self) -> int:
        """Number of successfully decoded records."""
        return len(self.records)

    def next_id(self) -> int:
        return next_record_id(self.records)

    def add(self, name: str, email: str = "") -> Record:
        """
        Validate, append and remember a new contact.

        The record gets `next_id()`. If the file does not end with a line
        terminator, one is written first so the new row never merges into the
        last existing row. After a successful append the snapshot's `records`
        and `contents` include the new record.

        Args:
            name: Contact name (required, surrounding whitespace stripped).
            email: Contact email (optional).

        Returns:
            The appended Record.

        Raises:
            ValueError: If the name/email are invalid or no id is left.
            ContactWriteError: If the file can't be opened or written.
        """
        name, email = validate_new_contact(name, email)
        record = Record(id=self.next_id(), name=name, email=email)

        prefix = ""
        if self.contents and not self.contents.endswith(("\n", "\r")):
            prefix = "\n"

        try:
            with open(self.path, "a", encoding=self.encoding) as fh:
                if prefix:
                    fh.write(prefix)
                append_record(record, fh)
        except ContactWriteError:
            raise
        except OSError as e:
            raise ContactWriteError(
                f"{self.path}: Failed to append to contacts file. Error: {e}"
            ) from e

        self.contents = self.contents + prefix + encode_record(record)
        self.records.append(record)
        return record


def load_contacts(
    path: Path | str,
    *,
    encoding: str = "utf-8",
    warn_malformed: bool = False,
) -> LoadedContacts:
    """
    Read and decode the contacts file into a LoadedContacts snapshot.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ContactFileError: If the file can't be read.
    """
    path = Path(path)
    contents = read_contacts_text(path, encoding=encoding)
    records, _ = load_records(contents, context=str(path), warn_malformed=warn_malformed)
    return LoadedContacts(path=path, contents=contents, records=records, encoding=encoding)
