"""
mt-statement: MetaTrader-style HTML statement to trade record extraction.

Main package exports for user-facing API.
"""

from mt_statement.exceptions import (
    StatementError,
    DocumentParseError,
    SectionNotFound,
    TableNotFound,
    EmptyResultError,
    RowSkipped,
)
from mt_statement.models import TradeRecord, TradeHistory, TradeSummary, StatementImport, ImportStatus
from mt_statement.parsers import parse_statement, parse_statement_file, validate_html
from mt_statement.services import StatementImportService

__all__ = [
    'parse_statement',
    'parse_statement_file',
    'validate_html',
    'load_history',
    'StatementImportService',
    'TradeRecord',
    'TradeHistory',
    'TradeSummary',
    'StatementImport',
    'ImportStatus',
    'StatementError',
    'DocumentParseError',
    'SectionNotFound',
    'TableNotFound',
    'EmptyResultError',
    'RowSkipped',
]


def load_history(path: str) -> TradeHistory:
    """
    Parse a statement file into a TradeHistory.

    Convenience wrapper for interactive use; upload handlers should use
    StatementImportService instead.

    Returns:
        TradeHistory with records in statement order

    Raises:
        FileNotFoundError: If path does not exist
        StatementError: If the statement has no extractable trades

    Example:
        >>> from mt_statement import load_history
        >>> history = load_history("Statement.htm")
        >>> print(history.summary().net_profit)
        120.5
    """
    records = parse_statement_file(path)
    return TradeHistory(records, source=str(path))
