"""
Locate the closed transactions section inside a statement document.

Statements have no schema: the section starts at whichever table row
contains the literal "Closed Transactions:" text, and the trades live in
the table enclosing that row.
"""

import logging
from typing import Iterator, Optional, Tuple

from lxml import etree, html

from mt_statement.config import StatementVocabulary, get_vocabulary
from mt_statement.exceptions import SectionNotFound, TableNotFound

logger = logging.getLogger(__name__)


def find_ancestor(node: Optional[html.HtmlElement], tag: str) -> Optional[html.HtmlElement]:
    """
    Nearest element with the given tag, starting at node itself.

    Args:
        node: Start element
        tag: Tag name to find (e.g., 'tr', 'table')

    Returns:
        Matching element or None when the root is reached
    """
    while node is not None and node.tag != tag:
        node = node.getparent()
    return node


def iter_text_nodes(element: html.HtmlElement) -> Iterator[Tuple[str, html.HtmlElement]]:
    """
    Text nodes of a subtree in document order, with their holder element.

    An element's text is visited on its start event, the tail of a
    descendant on its end event (the tail belongs to the parent). The
    element's own tail lies outside the subtree and is not visited.
    Comment and processing-instruction text is skipped.

    Yields:
        Tuples of (text, element the text node lives in)
    """
    for event, node in etree.iterwalk(element, events=('start', 'end')):
        if event == 'start':
            if isinstance(node.tag, str) and node.text:
                yield node.text, node
        elif node is not element and node.tail:
            yield node.tail, node.getparent()


def find_marker_row(root: html.HtmlElement, marker: str) -> Optional[html.HtmlElement]:
    """
    Find the first table row holding a text node that contains marker.

    A match outside any row is ignored and the search continues.

    Args:
        root: Document root element
        marker: Literal text to search for

    Returns:
        TR element (the anchor row) or None
    """
    for text, holder in iter_text_nodes(root):
        if marker in text:
            row = find_ancestor(holder, 'tr')
            if row is not None:
                return row
            logger.debug(f"Ignoring '{marker}' text outside of a table row")

    return None


def locate_trade_table(
    root: html.HtmlElement,
    vocabulary: Optional[StatementVocabulary] = None
) -> Tuple[html.HtmlElement, html.HtmlElement]:
    """
    Find the closed transactions anchor row and its enclosing table.

    Args:
        root: Document root element
        vocabulary: Statement vocabulary (defaults to the cached one)

    Returns:
        Tuple of (anchor row, trade table)

    Raises:
        SectionNotFound: If no row contains the closed transactions marker
        TableNotFound: If the anchor row is not inside a table
    """
    vocabulary = vocabulary or get_vocabulary()
    marker = vocabulary.markers.closed_transactions

    anchor = find_marker_row(root, marker)
    if anchor is None:
        raise SectionNotFound(
            "closed transactions section not found in HTML",
            marker=marker
        )

    logger.debug(f"Found '{marker}' section row")

    # Start above the anchor row itself
    table = find_ancestor(anchor.getparent(), 'table')
    if table is None:
        raise TableNotFound(
            f"trade table not found after '{marker}' section",
            details={"marker": marker}
        )

    logger.debug("Found trade table enclosing the section row")
    return anchor, table
