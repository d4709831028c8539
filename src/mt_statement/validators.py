"""
Reusable field validators for Pydantic models.

These validators read limits from the statement vocabulary and can be
used with Pydantic @field_validator decorator for automatic input validation.
"""

from typing import List, Optional
from mt_statement.config import get_vocabulary


def validate_ticket(ticket: int) -> int:
    """
    Validate broker ticket number.

    Tickets are broker-assigned identifiers and are never negative.

    Args:
        ticket: Ticket number to validate

    Returns:
        The validated ticket (unchanged if valid)

    Raises:
        ValueError: If ticket is negative

    Example:
        >>> validate_ticket(1001)
        1001
        >>> validate_ticket(-1)  # Raises ValueError
    """
    if ticket < 0:
        raise ValueError(f"Ticket must be a non-negative integer, got: {ticket}")

    return ticket


def validate_label(text: str, max_length: Optional[int] = None) -> str:
    """
    Validate short label cells (trade type, instrument symbol).

    A label longer than the configured limit almost always means the column
    mapping picked the wrong cell, so the value is rejected instead of stored.

    Args:
        text: Label text to validate (e.g., 'buy', 'EURUSD')
        max_length: Character limit (defaults to the cached vocabulary's
            max_label_length)

    Returns:
        The validated label (unchanged if valid)

    Raises:
        ValueError: If text exceeds the limit

    Example:
        >>> validate_label('EURUSD')
        'EURUSD'
        >>> validate_label('EURUSD.micro', max_length=8)  # Raises ValueError
    """
    limit = max_length if max_length is not None else get_vocabulary().max_label_length

    if len(text) > limit:
        raise ValueError(
            f"Label must be at most {limit} characters, got {len(text)}: '{text}'"
        )

    return text


def validate_content_type(content_type: str, allowed: List[str]) -> str:
    """
    Validate MIME type of an uploaded statement.

    Parameters after ';' (e.g., charset) are ignored.

    Args:
        content_type: MIME type reported by the uploader
        allowed: Accepted MIME types

    Returns:
        The bare, lower-cased MIME type

    Raises:
        ValueError: If MIME type is not accepted

    Example:
        >>> validate_content_type('text/html; charset=utf-8', ['text/html'])
        'text/html'
    """
    bare = (content_type or '').split(';')[0].strip().lower()

    if bare not in allowed:
        raise ValueError(
            f"Only HTML statements are accepted, got content type: '{content_type}'\n"
            f"Accepted types: {allowed}"
        )

    return bare
