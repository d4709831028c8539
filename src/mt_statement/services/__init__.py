"""
Business logic layer services for mt-statement.

- StatementImportService: size / content-type checks, parsing and
  failure reporting for uploaded statements
"""

from mt_statement.services.import_service import StatementImportService, ImportOutcome

__all__ = [
    'StatementImportService',
    'ImportOutcome',
]
