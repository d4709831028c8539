"""
Pydantic models for extracted trades and import results.

This module contains type-safe models shared by the parser,
the import service and callers that persist the results.
"""

from mt_statement.models.trade import TradeRecord
from mt_statement.models.summary import TradeSummary
from mt_statement.models.history import TradeHistory
from mt_statement.models.upload import StatementImport, ImportStatus

__all__ = [
    'TradeRecord',
    'TradeSummary',
    'TradeHistory',
    'StatementImport',
    'ImportStatus',
]
