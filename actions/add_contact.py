#!/usr/bin/env python3
"""
Append one contact to the contacts file.

**Purpose**: Non-interactive version of the menu's "Add contact" command.
The new record gets the next identifier (highest existing id + 1) and is
appended as a single line; existing lines are never touched.

**Usage**:
    python actions/add_contact.py "Carol"
    python actions/add_contact.py "Doe, Jane" --email jane@example.com

**Exit codes**:
  - 0: Contact appended.
  - 1: Invalid name/email, configuration error, or file read/write failure.
"""

import argparse
import sys
from pathlib import Path

# Ensure project root is on path for imports
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from contact_book.data.loaders import load_configured_contacts, resolve_contact_settings
from contact_book.utils.log import configure_logging


def parse_args(argv=None):
    """
    Parse command line arguments.

    Returns:
        Namespace with attributes: name, email, file, verbose.
    """
    parser = argparse.ArgumentParser(
        description="Append a contact to the contacts CSV file",
        epilog="""
Examples:
  # Contact without an email
  python actions/add_contact.py "Carol"

  # Names containing commas are quoted on disk automatically
  python actions/add_contact.py "Doe, Jane" --email jane@example.com
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "name",
        help="Contact name (required)",
    )

    parser.add_argument(
        "--email",
        type=str,
        help="Contact email (default: none)",
        default="",
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
    """Load the contacts file, then append the new contact to it."""
    args = parse_args(argv)
    configure_logging(verbose=args.verbose)

    try:
        settings = resolve_contact_settings(data_file=args.file)
        contacts = load_configured_contacts(settings)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        record = contacts.add(args.name, args.email)
    except ValueError as e:
        print(f"Error: Could not add contact: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Added contact {record.id}: {record.name}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
