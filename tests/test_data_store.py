"""
Tests for the record store (contact_book/data/store.py).

This module tests:
  - Tolerant loading: malformed and blank lines are dropped, order is kept.
  - Read errors: missing file, unreadable file, undecodable bytes.
  - append_record on open handles, including write failures.
  - LoadedContacts.add: id policy, newline repair, in-memory refresh.

All tests use temporary directories (via tmp_path fixture).
"""

import io
import logging

import pytest

from contact_book.data.codec import encode_record
from contact_book.data.schemas import MAX_RECORD_ID, Record
from contact_book.data.store import (
    ContactFileError,
    ContactWriteError,
    LoadedContacts,
    append_record,
    iter_decoded_lines,
    load_contacts,
    load_records,
    next_record_id,
    read_contacts_text,
)
from contact_book.search.matching import search_rows


MIXED_CONTENTS = (
    "1,Alice,alice@x.com\n"
    "\n"
    "4,Dan Brown\n"
    "five,Eve,eve@x.com\n"
    "2,Bob,\n"
    "6,Frank,frank@x.com,extra\n"
    "\n"
    "3,Carol,carol@x.com\n"
)


# ============================================================================
# load_records
# ============================================================================

def test_load_records_sample_scenario():
    """Test the blank-line scenario: two records, blank line dropped."""
    records, count = load_records("1,Alice,alice@x.com\n\n2,Bob,\n")

    assert count == 2
    assert records == [Record(1, "Alice", "alice@x.com"), Record(2, "Bob", "")]


def test_load_records_mixed_keeps_only_good_rows_in_order():
    """Test N good + M malformed/blank lines gives exactly N records in order."""
    records, count = load_records(MIXED_CONTENTS)

    assert count == 3
    assert [r.id for r in records] == [1, 2, 3]


def test_load_records_empty_contents():
    """Test that an empty file loads as zero records."""
    assert load_records("") == ([], 0)


def test_load_records_only_malformed():
    """Test that a file with nothing decodable still loads."""
    assert load_records("garbage\n\n,,\n") == ([], 0)


def test_load_records_without_final_newline():
    """Test that the last line is decoded even with no terminator."""
    records, count = load_records("1,Alice,alice@x.com\n2,Bob,")
    assert count == 2
    assert records[-1] == Record(2, "Bob", "")


def test_load_records_crlf():
    """Test Windows line endings."""
    records, _ = load_records("1,Alice,alice@x.com\r\n2,Bob,\r\n")
    assert records == [Record(1, "Alice", "alice@x.com"), Record(2, "Bob", "")]


def test_load_records_silent_by_default(caplog):
    """Test that malformed rows are not reported unless asked for."""
    caplog.set_level(logging.WARNING, logger="contact_book.data.store")
    load_records(MIXED_CONTENTS)
    assert caplog.records == []


def test_load_records_warns_for_malformed_non_blank_rows(caplog):
    """Test warning notices name the line and skip blank lines."""
    caplog.set_level(logging.WARNING, logger="contact_book.data.store")

    records, count = load_records(MIXED_CONTENTS, context="contacts.csv", warn_malformed=True)

    assert count == 3
    messages = [r.getMessage() for r in caplog.records]
    assert len(messages) == 3
    assert messages[0].startswith("contacts.csv: line 3:")
    assert any("line 4:" in m for m in messages)
    assert any("line 6:" in m for m in messages)
    assert all(r.levelno == logging.WARNING for r in caplog.records)


def test_iter_decoded_lines_reports_reasons():
    """Test per-line outcomes carry line numbers and reasons."""
    outcomes = list(iter_decoded_lines("1,Alice,\nbad\n"))

    assert len(outcomes) == 2
    assert outcomes[0] == (1, "1,Alice,", Record(1, "Alice", ""), None)
    line_number, line, record, reason = outcomes[1]
    assert (line_number, line, record) == (2, "bad", None)
    assert "expected 3 fields" in reason


# ============================================================================
# read_contacts_text / load_contacts
# ============================================================================

def test_read_contacts_text_missing_file(tmp_path):
    """Test that a missing file is a hard failure."""
    with pytest.raises(FileNotFoundError) as exc_info:
        read_contacts_text(tmp_path / "nope.csv")

    assert "Contacts file not found" in str(exc_info.value)


def test_read_contacts_text_directory(tmp_path):
    """Test that an unreadable path raises ContactFileError."""
    with pytest.raises(ContactFileError):
        read_contacts_text(tmp_path)


def test_read_contacts_text_bad_encoding(tmp_path):
    """Test that bytes that aren't valid text raise ContactFileError."""
    path = tmp_path / "contacts.csv"
    path.write_bytes(b"1,\xff\xfe,\n")

    with pytest.raises(ContactFileError) as exc_info:
        read_contacts_text(path)

    assert "Failed to read contacts file" in str(exc_info.value)


def test_read_contacts_text_drops_byte_order_mark(tmp_path):
    """Test that a UTF-8 BOM does not end up in the first row."""
    path = tmp_path / "contacts.csv"
    path.write_bytes(b"\xef\xbb\xbf1,Alice,alice@x.com\n2,Bob,\n")

    contents = read_contacts_text(path)

    assert contents == "1,Alice,alice@x.com\n2,Bob,\n"
    assert [r.id for r in load_contacts(path).records] == [1, 2]


def test_contact_errors_are_os_errors():
    """Test the exception hierarchy the shell relies on."""
    assert issubclass(ContactFileError, OSError)
    assert issubclass(ContactWriteError, OSError)


def test_load_contacts_snapshot(contacts_file):
    """Test that the snapshot carries path, raw text and decoded records."""
    contacts = load_contacts(contacts_file)

    assert contacts.path == contacts_file
    assert contacts.contents == "1,Alice,alice@x.com\n\n2,Bob,\n"
    assert contacts.count == 2
    assert contacts.records[0].name == "Alice"


# ============================================================================
# append_record
# ============================================================================

def test_append_record_writes_exact_line():
    """Test that appending {3, Carol, ''} writes '3,Carol,\\n' verbatim."""
    buffer = io.StringIO()
    append_record(Record(3, "Carol", ""), buffer)
    assert buffer.getvalue() == "3,Carol,\n"


def test_append_record_then_reload(contacts_file):
    """Test that append + fresh load shows exactly one more record."""
    before = load_contacts(contacts_file)

    with open(contacts_file, "a", encoding="utf-8") as fh:
        append_record(Record(3, "Carol", ""), fh)

    after = load_contacts(contacts_file)
    assert after.count == before.count + 1
    assert after.records[-1] == Record(3, "Carol", "")
    assert contacts_file.read_text(encoding="utf-8").endswith("2,Bob,\n3,Carol,\n")


def test_append_record_to_closed_handle():
    """Test that a closed handle gives ContactWriteError."""
    buffer = io.StringIO()
    buffer.close()

    with pytest.raises(ContactWriteError):
        append_record(Record(3, "Carol", ""), buffer)


def test_append_record_to_read_only_handle(contacts_file):
    """Test that a handle opened for reading gives ContactWriteError."""
    with open(contacts_file, "r", encoding="utf-8") as fh:
        with pytest.raises(ContactWriteError) as exc_info:
            append_record(Record(3, "Carol", ""), fh)

    assert "Failed to append record 3" in str(exc_info.value)
    assert contacts_file.read_text(encoding="utf-8") == "1,Alice,alice@x.com\n\n2,Bob,\n"


# ============================================================================
# next_record_id
# ============================================================================

def test_next_record_id_empty():
    """Test that the first record gets id 1."""
    assert next_record_id([]) == 1


def test_next_record_id_uses_highest_id_not_count():
    """Test max-id + 1, independent of how many records there are."""
    records = [Record(1, "A"), Record(7, "B"), Record(3, "C")]
    assert next_record_id(records) == 8


def test_next_record_id_exhausted():
    """Test that no id past the maximum is handed out."""
    with pytest.raises(ValueError):
        next_record_id([Record(MAX_RECORD_ID, "Max")])


# ============================================================================
# LoadedContacts.add
# ============================================================================

def test_add_appends_and_refreshes_snapshot(contacts_file):
    """Test that add writes one line and updates records and contents."""
    contacts = load_contacts(contacts_file)

    record = contacts.add("Carol")

    assert record == Record(3, "Carol", "")
    assert contacts_file.read_text(encoding="utf-8") == (
        "1,Alice,alice@x.com\n\n2,Bob,\n3,Carol,\n"
    )
    assert contacts.count == 3
    assert contacts.records[-1] == record
    assert search_rows("Carol", contacts.contents) == [["3", "Carol", ""]]


def test_add_strips_whitespace(contacts_file):
    """Test that user input is trimmed before it is stored."""
    contacts = load_contacts(contacts_file)
    record = contacts.add("  Dana  ", " dana@x.com ")
    assert record == Record(3, "Dana", "dana@x.com")


def test_add_skips_used_ids_after_gaps(tmp_path):
    """Test that the new id never collides with an existing one."""
    path = tmp_path / "contacts.csv"
    path.write_text("5,Eve,\n2,Bob,\n", encoding="utf-8")

    record = load_contacts(path).add("Carol")

    assert record.id == 6


def test_add_repairs_missing_final_newline(tmp_path):
    """Test that the new row doesn't merge into an unterminated last row."""
    path = tmp_path / "contacts.csv"
    path.write_text("1,Alice,alice@x.com", encoding="utf-8")

    contacts = load_contacts(path)
    contacts.add("Bob", "bob@x.com")

    assert path.read_text(encoding="utf-8") == "1,Alice,alice@x.com\n2,Bob,bob@x.com\n"
    assert load_contacts(path).count == 2


def test_add_to_empty_file(tmp_path):
    """Test adding the first contact."""
    path = tmp_path / "contacts.csv"
    path.write_text("", encoding="utf-8")

    record = load_contacts(path).add("Alice", "alice@x.com")

    assert record.id == 1
    assert path.read_text(encoding="utf-8") == "1,Alice,alice@x.com\n"


def test_add_long_name_survives_reload(contacts_file):
    """Test that a very long name is still counted after a reload."""
    contacts = load_contacts(contacts_file)
    contacts.add("y" * 200_000)

    reloaded = load_contacts(contacts_file)
    assert reloaded.count == contacts.count == 3
    assert reloaded.records[-1] == Record(3, "y" * 200_000, "")


def test_add_quotes_names_with_separator(contacts_file):
    """Test that a comma in the name survives a reload."""
    contacts = load_contacts(contacts_file)
    contacts.add("Doe, Jane", "jane@x.com")

    reloaded = load_contacts(contacts_file)
    assert reloaded.records[-1] == Record(3, "Doe, Jane", "jane@x.com")
    assert contacts_file.read_text(encoding="utf-8").endswith(
        encode_record(Record(3, "Doe, Jane", "jane@x.com"))
    )


def test_add_rejects_empty_name(contacts_file):
    """Test that an empty name writes nothing."""
    contacts = load_contacts(contacts_file)

    with pytest.raises(ValueError) as exc_info:
        contacts.add("   ", "x@x.com")

    assert "Name is required" in str(exc_info.value)
    assert contacts.count == 2
    assert contacts_file.read_text(encoding="utf-8") == "1,Alice,alice@x.com\n\n2,Bob,\n"


def test_add_write_failure(tmp_path):
    """Test that an unopenable path raises ContactWriteError."""
    contacts = LoadedContacts(path=tmp_path / "missing_dir" / "contacts.csv", contents="")

    with pytest.raises(ContactWriteError):
        contacts.add("Alice")

    assert contacts.records == []
