"""
Exception hierarchy for statement parsing.

Structural errors abort the whole extraction:
- DocumentParseError: markup could not be parsed at all
- SectionNotFound: no "Closed Transactions:" row in the document
- TableNotFound: the section row has no enclosing table, or too few rows
- EmptyResultError: the table yielded no valid trade records

RowSkipped is recovered inside the parser: the row is logged and dropped.
"""

from typing import Any, Dict, Optional


class StatementError(Exception):
    """Base class for all statement parsing errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "STATEMENT_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class DocumentParseError(StatementError):
    """Raised when the underlying markup cannot be parsed."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "DOCUMENT_PARSE_ERROR", details)


class SectionNotFound(StatementError):
    """Raised when the closed transactions section marker is missing."""

    def __init__(self, message: str, marker: str):
        super().__init__(message, "SECTION_NOT_FOUND", {"marker": marker})
        self.marker = marker


class TableNotFound(StatementError):
    """Raised when no usable trade table encloses the section row."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "TABLE_NOT_FOUND", details)


class EmptyResultError(StatementError):
    """Raised when a table was scanned but no trade record survived."""

    def __init__(self, message: str, rows_scanned: int = 0):
        super().__init__(message, "EMPTY_RESULT", {"rows_scanned": rows_scanned})
        self.rows_scanned = rows_scanned


class RowSkipped(StatementError):
    """Raised for a single row that cannot become a trade record."""

    def __init__(self, reason: str, field: Optional[str] = None, value: Optional[str] = None):
        super().__init__(reason, "ROW_SKIPPED", {"field": field, "value": value})
        self.reason = reason
        self.field = field
        self.value = value


STRUCTURAL_ERRORS = (DocumentParseError, SectionNotFound, TableNotFound, EmptyResultError)
