"""
Header row detection and column classification.

Statements label columns with free text that varies by language and reuses
labels: MetaTrader prints two columns both called "Price" (open and close).
Classification is a single left-to-right pass over the header cells through
an ordered rule list; the first rule that matches a cell wins.

Design:
- Rules are plain data (HeaderRule), built from the vocabulary
- The only running state is the mapping built so far, passed explicitly
- Tags with no matching header are absent from the mapping
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, NamedTuple, Optional

from lxml import html

from mt_statement.config import StatementVocabulary, get_vocabulary
from mt_statement.exceptions import TableNotFound
from mt_statement.parsers.field_parser import row_cells, text_content

logger = logging.getLogger(__name__)


class HeaderText(NamedTuple):
    """Normalized header cell text."""

    text: str      # lower-cased, trimmed
    compact: str   # text with spaces removed ("s / l" -> "s/l")

    @classmethod
    def from_raw(cls, raw: str) -> 'HeaderText':
        text = raw.strip().lower()
        return cls(text=text, compact=text.replace(' ', ''))


@dataclass(frozen=True)
class HeaderRule:
    """
    One classification rule: a header cell matching it maps to tag.

    A cell matches when any of the criteria holds:
    - labels: exact match on the lower-cased text
    - keywords: every keyword appears in the text
    - compact_contains: any substring appears in the compact text
    - compact_equals: exact match on the compact text

    open_price_assigned, when set, additionally requires that an open price
    column has (True) or has not (False) been assigned yet.
    """

    tag: str
    labels: tuple = ()
    keywords: tuple = ()
    compact_contains: tuple = ()
    compact_equals: tuple = ()
    open_price_assigned: Optional[bool] = None

    def matches(self, header: HeaderText, assigned: Mapping[str, int]) -> bool:
        if self.open_price_assigned is not None:
            if ('open_price' in assigned) != self.open_price_assigned:
                return False

        if header.text in self.labels:
            return True
        if self.keywords and all(k in header.text for k in self.keywords):
            return True
        if any(s in header.compact for s in self.compact_contains):
            return True
        return header.compact in self.compact_equals


def build_rules(vocabulary: Optional[StatementVocabulary] = None) -> List[HeaderRule]:
    """
    Build the ordered rule list from vocabulary header labels.

    Order matters: the first "price" column is the open price, and the
    second "price" column (seen after stop loss / take profit / close time)
    is the close price.
    """
    vocab = vocabulary or get_vocabulary()
    labels = vocab.labels_for

    return [
        HeaderRule('ticket', labels=labels('ticket')),
        HeaderRule('open_time', labels=labels('open_time'), keywords=('open', 'time')),
        HeaderRule('type', labels=labels('type')),
        HeaderRule('size', labels=labels('size')),
        HeaderRule('item', labels=labels('item')),
        HeaderRule('open_price', labels=labels('price'), open_price_assigned=False),
        HeaderRule(
            'stop_loss',
            labels=labels('stop_loss'),
            compact_contains=('s/l',),
            compact_equals=('sl',)
        ),
        HeaderRule(
            'take_profit',
            labels=labels('take_profit'),
            compact_contains=('t/p',),
            compact_equals=('tp',)
        ),
        HeaderRule('close_time', labels=labels('close_time'), keywords=('close', 'time')),
        HeaderRule('close_price', labels=labels('price'), open_price_assigned=True),
        HeaderRule('commission', labels=labels('commission')),
        HeaderRule('taxes', labels=labels('taxes')),
        HeaderRule('swap', labels=labels('swap')),
        HeaderRule('profit', labels=labels('profit')),
    ]


def classify_header(
    header: HeaderText,
    assigned: Mapping[str, int],
    rules: List[HeaderRule]
) -> Optional[str]:
    """First rule tag matching the header, or None."""
    for rule in rules:
        if rule.matches(header, assigned):
            return rule.tag
    return None


def classify_headers(
    header_texts: List[str],
    rules: Optional[List[HeaderRule]] = None
) -> Dict[str, int]:
    """
    Map field tags to column indexes.

    Args:
        header_texts: Raw header cell texts, left to right
        rules: Ordered rules (defaults to build_rules())

    Returns:
        Dictionary mapping field tag -> column index. When two cells map to
        the same tag, the later one wins.

    Example:
        >>> classify_headers(['Ticket', 'Open Time', 'Type', 'Price', 'S / L'])
        {'ticket': 0, 'open_time': 1, 'type': 2, 'open_price': 3, 'stop_loss': 4}
    """
    rules = rules if rules is not None else build_rules()
    mapping: Dict[str, int] = {}

    for i, raw in enumerate(header_texts):
        tag = classify_header(HeaderText.from_raw(raw), mapping, rules)
        if tag is not None:
            mapping[tag] = i

    return mapping


def collect_rows(table: html.HtmlElement) -> List[html.HtmlElement]:
    """All TR descendants of the table in document order."""
    return list(table.iter('tr'))


def find_header_row(
    rows: List[html.HtmlElement],
    bgcolor: str
) -> Optional[html.HtmlElement]:
    """
    First row whose bgcolor attribute equals or contains the marker color.

    Comparison is case-insensitive ('#c0c0c0' matches 'C0C0C0').
    """
    marker = bgcolor.upper()
    for row in rows:
        value = row.get('bgcolor')
        if value is not None and marker in value.upper():
            return row
    return None


def build_column_mapping(
    table: html.HtmlElement,
    vocabulary: Optional[StatementVocabulary] = None
) -> tuple:
    """
    Select the header row of the trade table and classify its cells.

    Args:
        table: lxml Element for TABLE
        vocabulary: Statement vocabulary (defaults to the cached one)

    Returns:
        Tuple of (rows, header row, column mapping)

    Raises:
        TableNotFound: If the table has fewer than two rows
    """
    vocabulary = vocabulary or get_vocabulary()

    rows = collect_rows(table)
    if len(rows) < 2:
        raise TableNotFound("table has too few rows", details={"rows": len(rows)})

    header_row = find_header_row(rows, vocabulary.header_bgcolor)
    if header_row is None:
        logger.debug("No header row with marker color, using first row")
        header_row = rows[0]

    header_texts = [text_content(cell) for cell in row_cells(header_row)]
    mapping = classify_headers(header_texts, build_rules(vocabulary))

    logger.debug(f"Column mapping: {mapping}")
    return rows, header_row, mapping
