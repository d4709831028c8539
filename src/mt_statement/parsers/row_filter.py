"""
Decide which table rows are closed-transaction data rows.

The trade table often continues past the closed transactions section into
"Open Trades:" and summary blocks, and carries decorative rows (titles,
sub-totals, spacers). A row counts only when it looks like a trade: enough
cells, a numeric first cell, and positioned before the open trades marker.
"""

import logging
from itertools import chain
from typing import List, Optional, Set

from lxml import html

from mt_statement.config import StatementVocabulary, get_vocabulary
from mt_statement.parsers.field_parser import extract_digits, row_cells, text_content
from mt_statement.parsers.section_locator import iter_text_nodes

logger = logging.getLogger(__name__)


MIN_DATA_CELLS = 4


def contains_text(node: html.HtmlElement, text: str) -> bool:
    """
    True if a single text node inside the element contains text.

    Text split across inline elements (e.g., "Open <b>Trades:</b>") does
    not match.
    """
    return isinstance(node.tag, str) and any(text in t for t, _ in iter_text_nodes(node))


def rows_after_marker(anchor: html.HtmlElement, marker: str) -> List[html.HtmlElement]:
    """
    Rows positioned after the section boundary marker.

    Scans the anchor row and its following siblings for the first row
    containing marker; every later sibling of that row is out of section.

    Args:
        anchor: Closed transactions anchor row
        marker: Boundary text (e.g., 'Open Trades:')

    Returns:
        Sibling elements after the boundary row (empty if no boundary)
    """
    for node in chain([anchor], anchor.itersiblings()):
        if contains_text(node, marker):
            return list(node.itersiblings())
    return []


class RowFilter:
    """
    Classifies rows of one trade table.

    Args:
        anchor: Closed transactions anchor row
        header_row: Header row selected by the header classifier
        vocabulary: Statement vocabulary (defaults to the cached one)

    Example:
        >>> row_filter = RowFilter(anchor, header_row)
        >>> data_rows = [r for r in rows if row_filter.is_data_row(r)]
    """

    def __init__(
        self,
        anchor: html.HtmlElement,
        header_row: html.HtmlElement,
        vocabulary: Optional[StatementVocabulary] = None
    ):
        self.vocabulary = vocabulary or get_vocabulary()
        self.header_row = header_row
        # Keeps the element proxies alive so identity lookups stay valid
        self._out_of_section: Set[html.HtmlElement] = set(
            rows_after_marker(anchor, self.vocabulary.markers.open_trades)
        )

    def is_out_of_section(self, row: html.HtmlElement) -> bool:
        return row in self._out_of_section

    def is_data_row(self, row: html.HtmlElement) -> bool:
        """
        True if row is a candidate closed-transaction data row.

        Rejects the header row, rows with fewer than four cells, rows after
        the open trades boundary, and rows whose first cell has no digits.
        The first-cell check is only a shape test; the ticket itself is
        re-read through the column mapping.
        """
        if row is self.header_row:
            return False

        cells = row_cells(row)
        if len(cells) < MIN_DATA_CELLS:
            return False

        if self.is_out_of_section(row):
            return False

        return bool(extract_digits(text_content(cells[0])))

    def is_placeholder(self, row: html.HtmlElement) -> bool:
        """True for 'No transactions' placeholder rows."""
        return contains_text(row, self.vocabulary.markers.no_transactions)
