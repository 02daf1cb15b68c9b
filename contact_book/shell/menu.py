"""
Interactive menu for the contact manager.

**Loop shape** (one pass per menu choice):
  1. Load the contacts file into a fresh LoadedContacts snapshot.
  2. Print the menu and read a numeric choice.
  3. Hand the snapshot to the chosen command.

The snapshot is created at the top of every pass and passed explicitly to the
command handlers; nothing is carried from one pass to the next.

**Error policy**:
  - Missing/unreadable file, failed append, non-numeric or missing menu input:
    fatal. `main` prints the error and returns exit status 1.
  - A numeric choice that is not on the menu: notice, then the loop continues.
  - An invalid new contact (e.g. empty name): notice, nothing is written.
"""

import argparse
import sys

from contact_book.config.settings import ContactFileSettings
from contact_book.data.loaders import load_configured_contacts, resolve_contact_settings
from contact_book.data.store import LoadedContacts
from contact_book.search.matching import search_rows, write_matches
from contact_book.shell.render import format_contacts_table
from contact_book.utils.log import configure_logging


LIST_CHOICE = 1
ADD_CHOICE = 2
SEARCH_CHOICE = 3
QUIT_CHOICE = 4

MENU_OPTIONS = {
    LIST_CHOICE: "List contacts",
    ADD_CHOICE: "Add contact",
    SEARCH_CHOICE: "Search contacts",
    QUIT_CHOICE: "Quit",
}


class InputError(ValueError):
    """Raised when user input can't be read or isn't a valid menu number."""
    pass


class ContactShell:
    """
    Menu-driven front end over the record store and search filter.

    Args:
        settings: Contacts file settings (path, encoding, warning flag).
        input_fn: Callable used to prompt for a line of input (default: input).
        out: Writable text stream for output (default: sys.stdout).
    """

    def __init__(self, settings: ContactFileSettings, input_fn=None, out=None):
        self.settings = settings
        self._input = input_fn or input
        self._out = out or sys.stdout
        self._handlers = {
            LIST_CHOICE: self.list_contacts,
            ADD_CHOICE: self.add_contact,
            SEARCH_CHOICE: self.search_contacts,
        }

    def run(self) -> int:
        """
        Run the menu loop until the user quits.

        Returns:
            0 when the user chooses Quit.

        Raises:
            FileNotFoundError, ContactFileError: If the file can't be loaded.
            ContactWriteError: If an append fails.
            InputError: On non-numeric or missing menu input.
        """
        while True:
            contacts = load_configured_contacts(self.settings)
            self._print_menu()
            choice = self._read_choice()

            if choice == QUIT_CHOICE:
                self._print("Goodbye!")
                return 0

            handler = self._handlers.get(choice)
            if handler is None:
                self._print(f"Invalid option: {choice}. Please choose 1-{QUIT_CHOICE}.")
                continue

            handler(contacts)

    def list_contacts(self, contacts: LoadedContacts) -> None:
        if not contacts.records:
            self._print("No contacts found.")
            return
        self._print(format_contacts_table(contacts.records, context=str(contacts.path)))
        self._print(f"{contacts.count} contact(s).")

    def add_contact(self, contacts: LoadedContacts) -> None:
        name = self._prompt("Name: ")
        email = self._prompt("Email (optional): ")
        try:
            record = contacts.add(name, email)
        except ValueError as e:
            self._print(f"Could not add contact: {e}")
            return
        self._print(f"Added contact {record.id}: {record.name}")

    def search_contacts(self, contacts: LoadedContacts) -> None:
        query = self._prompt("Search for: ").strip()
        rows = search_rows(query, contacts.contents)
        if not rows:
            self._print(f"No contacts matched '{query}'.")
            return
        write_matches(rows, self._out)

    def _print_menu(self) -> None:
        self._print("")
        self._print("Contact Manager")
        for number, label in MENU_OPTIONS.items():
            self._print(f"{number}. {label}")

    def _read_choice(self) -> int:
        raw = self._prompt("Choose an option: ")
        try:
            return int(raw.strip())
        except ValueError as e:
            raise InputError(f"Invalid menu choice: {raw!r}. Expected a number.") from e

    def _prompt(self, message: str) -> str:
        try:
            return self._input(message)
        except EOFError as e:
            raise InputError("No input received (end of input).") from e

    def _print(self, text: str) -> None:
        print(text, file=self._out)


def parse_args(argv=None):
    """
    Parse command line arguments for the interactive shell.

    Returns:
        Namespace with attributes: file (str or None), warn_malformed
        (True or None), verbose (bool).
    """
    parser = argparse.ArgumentParser(
        prog="contact-book",
        description="Interactive contact manager backed by a CSV file",
        epilog="""
Examples:
  # Use the file from CONTACT_BOOK_DATA_FILE (default: data/contacts.csv)
  python main.py

  # Use a specific file and report skipped rows
  python main.py --file ~/contacts.csv --warn-malformed
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
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
    """
    Entry point for the interactive shell.

    **Exit codes**:
      - 0: User chose Quit.
      - 1: Configuration error, file error, failed append or bad menu input.
      - 130: Interrupted with Ctrl+C.
    """
    args = parse_args(argv)
    configure_logging(verbose=args.verbose)

    try:
        settings = resolve_contact_settings(
            data_file=args.file,
            warn_malformed=args.warn_malformed,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    shell = ContactShell(settings)
    try:
        return shell.run()
    except KeyboardInterrupt:
        print("\nInterrupted by user. Exiting...", file=sys.stderr)
        return 130
    except (OSError, InputError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
