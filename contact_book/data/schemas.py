"""
Contact record type and the tabular schema built on it.

**Conceptual**: This module defines the "data contract" for the contacts file.
Every row that enters the system, whether decoded from disk or typed in by the
user, becomes a `Record`, and every table we print or check is a DataFrame with
the columns in `RECORD_FIELDS`.

**Schema**:
  - `id`: non-negative integer, at most `MAX_RECORD_ID` (unsigned 32-bit).
  - `name`: free text. The codec accepts an empty name; the add-contact flow
    does not (see `validate_new_contact`).
  - `email`: free text, empty string means "no email".
  - No field may contain a line break: one record is always one line.

Uniqueness of `id` is reported (`find_duplicate_ids`) but never enforced.
"""

from dataclasses import dataclass

import pandas as pd


class SchemaValidationError(Exception):
    """
    Raised when a contacts DataFrame does not conform to the expected schema.

    **Usage**: Raised by `validate_contacts_frame`. Messages include the
    optional context (usually the file path) for quick remediation.
    """
    pass


# Column order on disk and in every DataFrame
RECORD_FIELDS = [
    'id',
    'name',
    'email',
]

# Identifiers are unsigned 32-bit integers
MAX_RECORD_ID = 2**32 - 1

_LINE_BREAKS = ("\n", "\r")


@dataclass(frozen=True)
class Record:
    """
    One contact entry: a row of (id, name, email).

    Attributes:
        id: Non-negative integer identifier, at most MAX_RECORD_ID.
        name: Contact name (may be empty when decoded from disk).
        email: Contact email, "" when absent.

    Raises:
        TypeError: If id is not an int or name/email are not strings.
        ValueError: If id is out of range or a field contains a line break.
    """
    id: int
    name: str
    email: str = ""

    def __post_init__(self):
        """Validate the record after initialization."""
        # bool is an int subclass; True is not an identifier
        if isinstance(self.id, bool) or not isinstance(self.id, int):
            raise TypeError(f"Record id must be an int, got: {self.id!r}")
        if not 0 <= self.id <= MAX_RECORD_ID:
            raise ValueError(
                f"Record id must be between 0 and {MAX_RECORD_ID}, got: {self.id}"
            )
        for field_name in ('name', 'email'):
            value = getattr(self, field_name)
            if not isinstance(value, str):
                raise TypeError(f"Record {field_name} must be a string, got: {value!r}")
            if any(ch in value for ch in _LINE_BREAKS):
                raise ValueError(
                    f"Record {field_name} must not contain line breaks, got: {value!r}"
                )


def validate_new_contact(name: str, email: str = "") -> tuple[str, str]:
    """
    Clean and validate user-entered contact fields before a record is built.

    Surrounding whitespace is stripped from both fields. The name is required,
    the email is optional.

    Args:
        name: Name as typed by the user.
        email: Email as typed by the user (may be empty).

    Returns:
        (name, email) with surrounding whitespace removed.

    Raises:
        ValueError: If the name is empty or either field contains a line break.

    Example:
        >>> validate_new_contact("  Carol ", "")
        ('Carol', '')
    """
    name = (name or "").strip()
    email = (email or "").strip()

    if not name:
        raise ValueError("Name is required.")

    for label, value in (("Name", name), ("Email", email)):
        if any(ch in value for ch in _LINE_BREAKS):
            raise ValueError(f"{label} must not contain line breaks.")

    return name, email


def records_to_frame(records) -> pd.DataFrame:
    """
    Build a DataFrame with the canonical contact columns from records.

    Args:
        records: Iterable of Record.

    Returns:
        DataFrame with columns RECORD_FIELDS, in input order. `id` is int64,
        `name` and `email` are strings. An empty input gives an empty frame
        that still has the three columns.

    Example:
        >>> records_to_frame([Record(1, "Alice", "alice@x.com")])
           id   name        email
        0   1  Alice  alice@x.com
    """
    df = pd.DataFrame(
        [(r.id, r.name, r.email) for r in records],
        columns=RECORD_FIELDS,
    )
    return df.astype({'id': 'int64', 'name': str, 'email': str})


def validate_contacts_frame(
    df: pd.DataFrame,
    context: str | None = None,
) -> None:
    """
    Validate that a DataFrame conforms to the contacts schema.

    **Functionally**:
      - Checks that all columns in RECORD_FIELDS are present.
      - Checks that `id` has an integer dtype.
      - Checks that every id is within [0, MAX_RECORD_ID].
      - Checks that `name` and `email` have no missing values.

    Args:
        df: DataFrame to validate (usually from records_to_frame).
        context: Optional source description (e.g. the file path), included
                 in error messages.

    Raises:
        SchemaValidationError: On the first violation found.

    Returns:
        None (raises on error, returns on success).
    """
    ctx = f"{context}: " if context else ""

    missing_cols = set(RECORD_FIELDS) - set(df.columns)
    if missing_cols:
        raise SchemaValidationError(
            f"{ctx}Missing required columns: {sorted(missing_cols)}. "
            f"Expected columns: {RECORD_FIELDS}. "
            f"Found columns: {list(df.columns)}."
        )

    if not pd.api.types.is_integer_dtype(df['id']):
        raise SchemaValidationError(
            f"{ctx}'id' column must have an integer dtype, got: {df['id'].dtype}."
        )

    out_of_range = df.loc[(df['id'] < 0) | (df['id'] > MAX_RECORD_ID), 'id']
    if not out_of_range.empty:
        raise SchemaValidationError(
            f"{ctx}'id' values out of range [0, {MAX_RECORD_ID}]: "
            f"{out_of_range.tolist()[:5]}."
        )

    for col in ('name', 'email'):
        if df[col].isna().any():
            raise SchemaValidationError(
                f"{ctx}'{col}' column has missing values "
                f"(use an empty string for no value)."
            )


def find_duplicate_ids(records) -> list[int]:
    """
    Return the ids that appear on more than one record, ascending.

    Example:
        >>> find_duplicate_ids([Record(1, "A"), Record(2, "B"), Record(1, "C")])
        [1]
    """
    ids = pd.Series([r.id for r in records], dtype='int64')
    duplicated = ids[ids.duplicated()].unique()
    return sorted(int(i) for i in duplicated)
