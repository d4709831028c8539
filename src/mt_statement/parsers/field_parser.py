"""
Cell text extraction and normalization for statement rows.

Three tiers of leniency:
- ticket, type, item: failures raise RowSkipped (the row is dropped)
- numeric fields: failures default to 0.0
- timestamps: failures default to None
"""

import logging
import re
from datetime import datetime
from typing import Any, Dict, List, Optional

from lxml import html

from mt_statement.config import StatementVocabulary, get_vocabulary
from mt_statement.exceptions import RowSkipped

logger = logging.getLogger(__name__)


CELL_TAGS = ('td', 'th')

# Full-width / typographic minus sign used by some localized exports
UNICODE_MINUS = '−'

# ASCII decimal or exponent notation, plus inf / nan
FLOAT_PATTERN = re.compile(
    r'[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)',
    re.ASCII | re.IGNORECASE
)

# Tickets must fit a signed 64-bit integer
MAX_TICKET = 2 ** 63 - 1

# Tried in order, first successful layout wins
DATETIME_FORMATS = [
    '%Y.%m.%d %H:%M:%S',
    '%Y.%m.%d %H:%M',
    '%Y/%m/%d %H:%M:%S',
    '%Y/%m/%d %H:%M',
    '%Y-%m-%d %H:%M:%S',
    '%Y-%m-%d %H:%M',
    '%d.%m.%Y %H:%M:%S',
    '%d.%m.%Y %H:%M',
    '%m/%d/%Y %H:%M:%S',
    '%m/%d/%Y %H:%M',
    '%Y年%m月%d日 %H:%M:%S',
    '%Y年%m月%d日 %H:%M',
    # RFC 3339
    '%Y-%m-%dT%H:%M:%S%z',
    '%Y-%m-%dT%H:%M:%S.%f%z',
]

NUMERIC_FIELDS = (
    'size',
    'open_price',
    'close_price',
    'stop_loss',
    'take_profit',
    'commission',
    'taxes',
    'swap',
    'profit',
)

DATETIME_FIELDS = ('open_time', 'close_time')

LABEL_FIELDS = ('type', 'item')


def text_content(element: html.HtmlElement) -> str:
    """
    Full text content of an element (all descendant text nodes), trimmed.

    Comments are excluded. Non-breaking spaces count as whitespace.
    """
    return str(element.text_content()).strip()


def row_cells(row: html.HtmlElement) -> List[html.HtmlElement]:
    """
    Direct td/th children of a table row, in column order.

    Args:
        row: lxml Element for TR

    Returns:
        List of cell elements (nested tables are not descended into)
    """
    return [child for child in row if child.tag in CELL_TAGS]


def extract_digits(text: str) -> str:
    """
    Keep ASCII digits only.

    Example:
        >>> extract_digits('1001 [sl]')
        '1001'
    """
    return ''.join(c for c in text if '0' <= c <= '9')


def clean_numeric_string(text: str, vocabulary: Optional[StatementVocabulary] = None) -> str:
    """
    Strip formatting noise from a numeric cell.

    Removes spaces and thousands separators, maps the unicode minus sign to
    '-', and drops currency symbols. Applying it twice changes nothing.

    Example:
        >>> clean_numeric_string('$1,234.56')
        '1234.56'
        >>> clean_numeric_string('−5.00')
        '-5.00'
    """
    vocabulary = vocabulary or get_vocabulary()

    text = text.strip()
    text = text.replace(' ', '').replace('\xa0', '')
    text = text.replace(',', '')
    text = text.replace(UNICODE_MINUS, '-')

    for symbol in vocabulary.currency_symbols:
        text = text.replace(symbol, '')

    return text


def parse_float(text: str, vocabulary: Optional[StatementVocabulary] = None) -> float:
    """
    Parse a numeric cell, defaulting to 0.0 when it is not a number.

    Only ASCII notation is accepted: underscores and non-ASCII digits
    (e.g., full-width '１２３') are not numbers here.

    Note: 0.0 is returned both for empty cells and for genuine zeros.
    """
    cleaned = clean_numeric_string(text, vocabulary)
    if not FLOAT_PATTERN.fullmatch(cleaned):
        return 0.0
    return float(cleaned)


def parse_ticket(text: str) -> int:
    """
    Parse a ticket cell, ignoring any non-digit decoration.

    Raises:
        RowSkipped: If the cell holds no digits or the ticket does not fit
            a signed 64-bit integer
    """
    digits = extract_digits(text)
    if not digits:
        raise RowSkipped(f"invalid ticket number: '{text}'", field='ticket', value=text)

    # Length is checked before int() so huge cells never reach the conversion limit
    significant = digits.lstrip('0') or '0'
    if len(significant) > len(str(MAX_TICKET)):
        raise RowSkipped(f"ticket number out of range: '{text[:40]}'", field='ticket', value=text[:40])

    ticket = int(significant)
    if ticket > MAX_TICKET:
        raise RowSkipped(f"ticket number out of range: '{text[:40]}'", field='ticket', value=text[:40])
    return ticket


def parse_label(
    text: str,
    field: str,
    vocabulary: Optional[StatementVocabulary] = None
) -> str:
    """
    Validate a short label cell (type or item).

    Raises:
        RowSkipped: If the text is longer than max_label_length characters
    """
    vocabulary = vocabulary or get_vocabulary()
    text = text.strip()

    if len(text) > vocabulary.max_label_length:
        raise RowSkipped(f"invalid {field} text (too long): '{text}'", field=field, value=text)

    return text


def parse_datetime(
    text: str,
    vocabulary: Optional[StatementVocabulary] = None
) -> Optional[datetime]:
    """
    Parse a timestamp cell against DATETIME_FORMATS.

    Args:
        text: Cell text (e.g., '2023.01.05 10:00:00')
        vocabulary: Supplies the "no value" sentinels

    Returns:
        datetime for the first matching layout, None for sentinels
        or unparsable text
    """
    vocabulary = vocabulary or get_vocabulary()
    text = text.strip()

    if text in vocabulary.empty_datetime_values:
        return None

    for fmt in DATETIME_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    logger.debug(f"Could not parse date time: '{text}'")
    return None


def _cell_text(cells: List[html.HtmlElement], mapping: Dict[str, int], tag: str) -> Optional[str]:
    """Text of the mapped cell, or None when the column is absent or out of range."""
    idx = mapping.get(tag)
    if idx is None or idx >= len(cells):
        return None
    return text_content(cells[idx])


def extract_fields(
    cells: List[html.HtmlElement],
    mapping: Dict[str, int],
    vocabulary: Optional[StatementVocabulary] = None
) -> Dict[str, Any]:
    """
    Extract typed field values from one data row.

    Columns missing from the mapping keep their defaults (0, '', 0.0, None).

    Args:
        cells: Row cells from row_cells()
        mapping: Field tag -> column index from the header classifier
        vocabulary: Statement vocabulary (defaults to the cached one)

    Returns:
        Dictionary of TradeRecord field values (without id)

    Raises:
        RowSkipped: On invalid ticket or oversize type / item text
    """
    vocabulary = vocabulary or get_vocabulary()

    fields: Dict[str, Any] = {'ticket': 0, 'type': '', 'item': ''}

    ticket_text = _cell_text(cells, mapping, 'ticket')
    if ticket_text is not None:
        fields['ticket'] = parse_ticket(ticket_text)

    for field in LABEL_FIELDS:
        label_text = _cell_text(cells, mapping, field)
        if label_text is not None:
            fields[field] = parse_label(label_text, field, vocabulary)

    for field in NUMERIC_FIELDS:
        value_text = _cell_text(cells, mapping, field)
        fields[field] = parse_float(value_text, vocabulary) if value_text is not None else 0.0

    for field in DATETIME_FIELDS:
        value_text = _cell_text(cells, mapping, field)
        fields[field] = parse_datetime(value_text, vocabulary) if value_text is not None else None

    return fields
