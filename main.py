"""
contact_book – Main entry point.

Starts the interactive contact manager menu.

**Usage**:
    python main.py [--file PATH] [--warn-malformed] [--verbose]
"""

import sys

from contact_book.shell.menu import main


if __name__ == "__main__":
    sys.exit(main())
