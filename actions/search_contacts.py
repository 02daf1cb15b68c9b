#!/usr/bin/env python3
"""
Search the contacts file for rows with a field exactly equal to a query.

**Purpose**: Non-interactive version of the menu's "Search contacts" command.
Matching rows are printed as CSV lines in file order.

**Usage**:
    python actions/search_contacts.py alice@example.com
    python actions/search_contacts.py "Bob" --file ~/contacts.csv

**Exit codes**:
  - 0: Search ran (whether or not anything matched).
  - 1: Configuration error, or the file is missing/unreadable.
"""

import argparse
import sys
from pathlib import Path

# Ensure project root is on path for imports
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from contact_book.data.loaders import resolve_contact_settings
from contact_book.data.store import read_contacts_text
from contact_book.search.matching import search_rows, write_matches
from contact_book.utils.log import configure_logging


def parse_args(argv=None):
    """
    Parse command line arguments.

    Returns:
        Namespace with attributes: query, file, verbose.
    """
    parser = argparse.ArgumentParser(
        description="Find contacts with any field exactly equal to QUERY",
    )

    parser.add_argument(
        "query",
        help="Exact text to match against id, name and email (case-sensitive)",
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


def main(argv=None) -> int:
    """Read the raw file and print every row matching the query."""
    args = parse_args(argv)
    configure_logging(verbose=args.verbose)

    try:
        settings = resolve_contact_settings(data_file=args.file)
        contents = read_contacts_text(settings.data_path, encoding=settings.encoding)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    rows = search_rows(args.query, contents)
    if not rows:
        print(f"No contacts matched '{args.query}'.")
        return 0

    write_matches(rows, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
