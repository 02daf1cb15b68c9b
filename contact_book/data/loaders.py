"""
Convenience loaders that resolve the configured contacts file.

**Conceptual**: The shell and the action scripts should not build paths or read
environment variables themselves. These thin wrappers take the configured
`ContactFileSettings`, apply any command-line overrides, and hand back a
`LoadedContacts` snapshot from store.py.
"""

from dataclasses import replace
from pathlib import Path

from contact_book.config.settings import ContactFileSettings, get_settings, resolve_data_path
from contact_book.data.store import LoadedContacts, load_contacts


def resolve_contact_settings(
    data_file: Path | str | None = None,
    warn_malformed: bool | None = None,
    base: ContactFileSettings | None = None,
) -> ContactFileSettings:
    """
    Build contacts file settings from the environment plus optional overrides.

    Args:
        data_file: Overrides CONTACT_BOOK_DATA_FILE when given (e.g. --file).
        warn_malformed: Overrides CONTACT_BOOK_WARN_MALFORMED when not None.
        base: Settings to start from (default: the global settings singleton).

    Returns:
        ContactFileSettings with the overrides applied.

    Example:
        >>> settings = resolve_contact_settings(data_file="/tmp/contacts.csv")
        >>> settings.data_path
        PosixPath('/tmp/contacts.csv')
    """
    settings = base or get_settings().contacts

    overrides = {}
    if data_file is not None:
        overrides['data_path'] = resolve_data_path(data_file)
    if warn_malformed is not None:
        overrides['warn_malformed'] = warn_malformed

    return replace(settings, **overrides) if overrides else settings


def load_configured_contacts(settings: ContactFileSettings | None = None) -> LoadedContacts:
    """
    Load the contacts file named by `settings` (default: from environment).

    Raises:
        FileNotFoundError: If the contacts file doesn't exist.
        ContactFileError: If the contacts file can't be read.
    """
    settings = settings or resolve_contact_settings()
    return load_contacts(
        settings.data_path,
        encoding=settings.encoding,
        warn_malformed=settings.warn_malformed,
    )
