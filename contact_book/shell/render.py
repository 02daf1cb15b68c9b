"""
Text rendering of contact records for terminal output.
"""

from contact_book.data.schemas import records_to_frame, validate_contacts_frame


def format_contacts_table(records, context: str | None = None) -> str:
    """
    Render records as an aligned text table with id, name and email columns.

    Args:
        records: Records to render, in display order.
        context: Optional source description for schema error messages.

    Returns:
        The table as a string (no trailing newline). An empty input gives
        just the header line.

    Raises:
        SchemaValidationError: If the records don't fit the contacts schema.

    Example:
        >>> print(format_contacts_table([Record(1, "Alice", "alice@x.com")]))
         id  name       email
          1 Alice alice@x.com
    """
    frame = records_to_frame(records)
    validate_contacts_frame(frame, context=context)
    return frame.to_string(index=False)
