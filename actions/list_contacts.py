#!/usr/bin/env python3
"""
List every contact in the contacts file.

**Purpose**: Non-interactive version of the menu's "List contacts" command.
Malformed rows are skipped exactly as the interactive shell skips them.

**Usage**:
    python actions/list_contacts.py
    python actions/list_contacts.py --file ~/contacts.csv --warn-malformed

**Exit codes**:
  - 0: Contacts listed (or the file has none).
  - 1: Configuration error, or the file is missing/unreadable.
"""

import argparse
import sys
from pathlib import Path

# Ensure project root is on path for imports
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from contact_book.data.loaders import load_configured_contacts, resolve_contact_settings
from contact_book.shell.render import format_contacts_table
from contact_book.utils.log import configure_logging


def parse_args(argv=None):
    """
    Parse command line arguments.

    Returns:
        Namespace with attributes: file, warn_malformed, verbose.
    """
    parser = argparse.ArgumentParser(
        description="List all contacts in the contacts CSV file",
    )

    parser.add_argument(
        "--file",
        type=str,
        help="Contacts CSV file (default: CONTACT_BOOK_DATA_FILE or data/contacts.csv)",
        default=None,
    )

    parser.add_argument(
        "--warn-malformed",
        action="store_true",
        help="Log a warning for each malformed row skipped while loading",
        default=None,
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Load the contacts file and print it as a table."""
    args = parse_args(argv)
    configure_logging(verbose=args.verbose)

    try:
        settings = resolve_contact_settings(
            data_file=args.file,
            warn_malformed=args.warn_malformed,
        )
        contacts = load_configured_contacts(settings)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not contacts.records:
        print("No contacts found.")
        return 0

    print(format_contacts_table(contacts.records, context=str(contacts.path)))
    print(f"{contacts.count} contact(s).")
    return 0


if __name__ == "__main__":
    sys.exit(main())
