"""
Configuration settings for the contact manager.

**Conceptual**: This module provides strongly-typed configuration objects that
load from environment variables (via .env files). Settings are validated when
they are built, so a bad value fails at startup with a clear message instead
of in the middle of a menu session.

**Environment variables**:
  - CONTACT_BOOK_DATA_FILE: path of the contacts CSV (default: data/contacts.csv).
    Relative paths are resolved against the project root.
  - CONTACT_BOOK_ENCODING: text encoding of the file (default: utf-8; a leading byte-order mark is ignored).
  - CONTACT_BOOK_WARN_MALFORMED: log a warning for each skipped malformed row
    (1/true/yes/on or 0/false/no/off, default: off).

This module uses python-dotenv to load .env files and dataclasses for type safety.
"""

import codecs
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Project root is 2 levels up from contact_book/config/settings.py
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

DEFAULT_DATA_FILE = Path("data") / "contacts.csv"

# Load .env from project root (existing environment variables win)
load_dotenv(dotenv_path=PROJECT_ROOT / ".env")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def parse_bool(name: str, value: str) -> bool:
    """
    Parse a boolean environment value.

    Raises:
        ValueError: If the value is not one of the accepted spellings.
    """
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(
        f"{name} must be one of {sorted(_TRUE_VALUES | (_FALSE_VALUES - {''}))}, got: {value}"
    )


def resolve_data_path(value: Path | str) -> Path:
    """Resolve a data file path, treating relative paths as project-relative."""
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = PROJECT_ROOT / path
    return path


@dataclass(frozen=True)
class ContactFileSettings:
    """
    Configuration for the contacts data file.

    Attributes:
        data_path: Absolute path of the contacts CSV.
        encoding: Text encoding for reads and appends (default utf-8).
        warn_malformed: If True, skipped malformed rows are logged as warnings.
                        If False (default), they are dropped silently.
    """
    data_path: Path
    encoding: str = "utf-8"
    warn_malformed: bool = False

    def __post_init__(self):
        """Validate settings after initialization."""
        if not str(self.data_path).strip():
            raise ValueError(
                "CONTACT_BOOK_DATA_FILE is empty. "
                "Please set it in your .env file or environment variables."
            )
        try:
            codecs.lookup(self.encoding)
        except LookupError:
            raise ValueError(
                f"CONTACT_BOOK_ENCODING is not a known text encoding, got: {self.encoding}"
            )

    @classmethod
    def from_env(cls) -> "ContactFileSettings":
        """
        Load contacts file settings from environment variables.

        **Environment variables**:
          - CONTACT_BOOK_DATA_FILE (optional): Defaults to data/contacts.csv.
          - CONTACT_BOOK_ENCODING (optional): Defaults to utf-8.
          - CONTACT_BOOK_WARN_MALFORMED (optional): Defaults to off.

        Returns:
            ContactFileSettings object with values loaded from environment.

        Raises:
            ValueError: If the encoding is unknown or the warn flag can't be parsed.

        Usage example:
            >>> # In .env file:
            >>> # CONTACT_BOOK_DATA_FILE=/home/me/contacts.csv
            >>>
            >>> settings = ContactFileSettings.from_env()
            >>> print(settings.data_path)  # /home/me/contacts.csv
        """
        data_file = os.getenv("CONTACT_BOOK_DATA_FILE", "").strip() or str(DEFAULT_DATA_FILE)
        encoding = os.getenv("CONTACT_BOOK_ENCODING", "").strip() or "utf-8"
        warn_str = os.getenv("CONTACT_BOOK_WARN_MALFORMED", "0")

        warn_malformed = parse_bool("CONTACT_BOOK_WARN_MALFORMED", warn_str)

        return cls(
            data_path=resolve_data_path(data_file),
            encoding=encoding,
            warn_malformed=warn_malformed,
        )


@dataclass(frozen=True)
class Settings:
    """
    Global settings for the contact manager.

    **Usage pattern**:
      ```python
      from contact_book.config.settings import get_settings

      settings = get_settings()
      print(settings.contacts.data_path)
      ```

    Attributes:
        contacts: Settings for the contacts data file.
    """
    contacts: ContactFileSettings

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Load global settings from environment variables.

        Raises:
            ValueError: If any subsystem setting is invalid.
        """
        return cls(contacts=ContactFileSettings.from_env())


# Lazily-loaded singleton. Tests can build Settings(...) directly instead.
_default_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the global settings singleton.

    Settings are loaded from environment on first call, then cached for reuse.

    Raises:
        ValueError: If the environment holds an invalid setting.
    """
    global _default_settings

    if _default_settings is None:
        _default_settings = Settings.from_env()

    return _default_settings


def reset_settings():
    """
    Reset the global settings singleton (for testing).

    **Testing pattern**:
      ```python
      def test_something(monkeypatch):
          reset_settings()
          monkeypatch.setenv("CONTACT_BOOK_DATA_FILE", "/tmp/contacts.csv")
          settings = get_settings()
          assert settings.contacts.data_path == Path("/tmp/contacts.csv")
      ```
    """
    global _default_settings
    _default_settings = None
