"""
Pytest configuration file.

Ensures the repo root is on sys.path so that 'import contact_book...' and
'import actions...' work, and provides shared fixtures.
"""
import sys
from pathlib import Path

import pytest

# Add the repo root to sys.path
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from contact_book.config.settings import reset_settings  # noqa: E402


SAMPLE_CONTENTS = "1,Alice,alice@x.com\n\n2,Bob,\n"


@pytest.fixture(autouse=True)
def fresh_settings():
    """Clear the settings singleton around every test."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def contacts_file(tmp_path):
    """A contacts file with two good records and one blank line."""
    path = tmp_path / "contacts.csv"
    path.write_text(SAMPLE_CONTENTS, encoding="utf-8")
    return path


def scripted_input(*answers):
    """
    Build an input() replacement that returns `answers` in order.

    Raises EOFError once the answers run out, like input() at end of stdin.
    """
    remaining = iter(answers)

    def _input(prompt=""):
        try:
            return next(remaining)
        except StopIteration:
            raise EOFError

    return _input
