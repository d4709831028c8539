"""
Entry point for converting HTML statements into trade records.

Pipeline:
1. load_document: bytes -> lxml tree (encoding detection, UTF-16 BOM)
2. locate_trade_table: find "Closed Transactions:" row and its table
3. build_column_mapping: header row -> field tag / column index
4. assemble_records: filter rows, extract fields, assign ids

The pipeline holds no shared mutable state; concurrent calls on
independent documents are safe.
"""

import codecs
import logging
from pathlib import Path
from typing import List, Optional, Union

from lxml import etree, html

from mt_statement.config import StatementVocabulary, get_vocabulary
from mt_statement.exceptions import DocumentParseError
from mt_statement.models.trade import TradeRecord
from mt_statement.parsers.header_classifier import build_column_mapping
from mt_statement.parsers.record_builder import assemble_records
from mt_statement.parsers.row_filter import RowFilter
from mt_statement.parsers.section_locator import locate_trade_table

logger = logging.getLogger(__name__)


# MetaTrader 5 exports statements as UTF-16 with a byte order mark
_UTF16_BOMS = (codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)


def load_document(content: bytes, encoding: Optional[str] = None) -> html.HtmlElement:
    """
    Parse raw statement bytes into an lxml HTML tree.

    Args:
        content: Raw document bytes
        encoding: Force an encoding; None detects it (BOM, then <meta>)

    Returns:
        Root HtmlElement

    Raises:
        DocumentParseError: If the markup cannot be parsed at all
    """
    try:
        if encoding is None and content.startswith(_UTF16_BOMS):
            return html.document_fromstring(content.decode('utf-16'))

        parser = html.HTMLParser(encoding=encoding)
        return html.document_fromstring(content, parser=parser)
    except (etree.ParserError, etree.XMLSyntaxError, UnicodeDecodeError, LookupError, ValueError) as e:
        raise DocumentParseError(
            f"failed to parse HTML: {e}",
            details={"size": len(content), "encoding": encoding}
        ) from e


def validate_html(content: bytes, encoding: Optional[str] = None) -> bool:
    """
    Quick check that content is parseable HTML containing a table.

    Example:
        >>> validate_html(b'<html><body><table><tr><td>1</td></tr></table></body></html>')
        True
        >>> validate_html(b'not a statement')
        False
    """
    try:
        root = load_document(content, encoding)
    except DocumentParseError:
        return False
    return root.find('.//table') is not None


def parse_statement(
    content: bytes,
    vocabulary: Optional[StatementVocabulary] = None,
    encoding: Optional[str] = None,
    log: Optional[logging.Logger] = None
) -> List[TradeRecord]:
    """
    Extract closed trades from an HTML statement.

    Args:
        content: Raw document bytes (untrusted)
        vocabulary: Statement vocabulary (defaults to the cached one)
        encoding: Force a document encoding
        log: Logger for progress and skipped rows (defaults to module logger)

    Returns:
        Non-empty list of TradeRecord in statement row order

    Raises:
        DocumentParseError: If the markup cannot be parsed
        SectionNotFound: If there is no closed transactions section
        TableNotFound: If the section has no usable table
        EmptyResultError: If no valid trade record was found

    Example:
        >>> with open('Statement.htm', 'rb') as f:
        ...     records = parse_statement(f.read())
        >>> records[0].ticket
        1001
    """
    vocabulary = vocabulary or get_vocabulary()
    log = log or logger

    root = load_document(content, encoding)

    anchor, table = locate_trade_table(root, vocabulary)
    log.info(f"Found '{vocabulary.markers.closed_transactions}' section")

    rows, header_row, mapping = build_column_mapping(table, vocabulary)
    log.debug(f"Column mapping: {mapping}")

    row_filter = RowFilter(anchor, header_row, vocabulary)
    records = assemble_records(rows, row_filter, mapping, vocabulary, log)

    log.info(f"Extracted {len(records)} trade records from {len(rows)} rows")
    return records


def parse_statement_file(
    path: Union[str, Path],
    vocabulary: Optional[StatementVocabulary] = None,
    encoding: Optional[str] = None
) -> List[TradeRecord]:
    """
    Read a statement file and extract its closed trades.

    Raises:
        FileNotFoundError: If path does not exist
        StatementError: Any structural parsing error (see parse_statement)
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Statement file not found: {path}")

    return parse_statement(path.read_bytes(), vocabulary=vocabulary, encoding=encoding)
