#!/usr/bin/env python3
"""
Check the contacts file for malformed rows and duplicate identifiers.

**Purpose**: The menu and the other actions skip malformed rows silently.
This script lists them instead (line number and reason), then validates the
decoded records against the contacts schema and reports ids used by more than
one record. Nothing is modified.

**Usage**:
    python actions/check_contacts_file.py
    python actions/check_contacts_file.py --file ~/contacts.csv

**Exit codes**:
  - 0: No malformed rows and no duplicate ids.
  - 1: Problems found, configuration error, or the file is missing/unreadable.
"""

import argparse
import sys
from pathlib import Path

# Ensure project root is on path for imports
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from contact_book.data.loaders import resolve_contact_settings
from contact_book.data.schemas import (
    SchemaValidationError,
    find_duplicate_ids,
    records_to_frame,
    validate_contacts_frame,
)
from contact_book.data.store import iter_decoded_lines, read_contacts_text
from contact_book.utils.log import configure_logging


def parse_args(argv=None):
    """
    Parse command line arguments.

    Returns:
        Namespace with attributes: file, verbose.
    """
    parser = argparse.ArgumentParser(
        description="Report malformed rows and duplicate ids in the contacts CSV file",
    )

    parser.add_argument(
        "--file",
        type=str,
        help="Contacts CSV file (default: CONTACT_BOOK_DATA_FILE or data/contacts.csv)",
        default=None,
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    return parser.parse_args(argv)


def check_contents(contents: str, context: str | None = None) -> dict:
    """
    Inspect the text of a contacts file.

    Args:
        contents: Full text of the contacts file.
        context: Optional source description for schema error messages.

    Returns:
        Dict with keys:
          - records: decoded records in file order
          - malformed: list of (line_number, line, reason) for non-blank bad rows
          - blank_lines: number of blank lines
          - duplicate_ids: ids used by more than one record, ascending

    Raises:
        SchemaValidationError: If the decoded records violate the schema.
    """
    records = []
    malformed = []
    blank_lines = 0

    for line_number, line, record, reason in iter_decoded_lines(contents):
        if record is not None:
            records.append(record)
        elif not line.strip():
            blank_lines += 1
        else:
            malformed.append((line_number, line.rstrip("\r"), reason))

    validate_contacts_frame(records_to_frame(records), context=context)

    return {
        'records': records,
        'malformed': malformed,
        'blank_lines': blank_lines,
        'duplicate_ids': find_duplicate_ids(records),
    }


def main(argv=None) -> int:
    """Check the configured contacts file and print a report."""
    args = parse_args(argv)
    configure_logging(verbose=args.verbose)

    try:
        settings = resolve_contact_settings(data_file=args.file)
        contents = read_contacts_text(settings.data_path, encoding=settings.encoding)
        report = check_contents(contents, context=str(settings.data_path))
    except (OSError, ValueError, SchemaValidationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Checked {settings.data_path}")
    print("-" * 60)

    for line_number, line, reason in report['malformed']:
        print(f"  ✗ line {line_number}: {reason}: {line!r}")

    for rec_id in report['duplicate_ids']:
        print(f"  ✗ id {rec_id} is used by more than one record")

    print("-" * 60)
    print(f"  Records:          {len(report['records']):>6}")
    print(f"  Malformed rows:   {len(report['malformed']):>6}")
    print(f"  Blank lines:      {report['blank_lines']:>6}")
    print(f"  Duplicate ids:    {len(report['duplicate_ids']):>6}")

    if report['malformed'] or report['duplicate_ids']:
        return 1

    print("  ✓ No problems found")
    return 0


if __name__ == "__main__":
    sys.exit(main())
