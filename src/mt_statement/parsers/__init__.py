"""
HTML parsing modules for MetaTrader-style broker statements.

Statements have no schema:
- The section starts at a row containing "Closed Transactions:"
- Column meaning is inferred from free-text, possibly localized headers
- "Price" appears twice (open price, then close price)
- Decorative and out-of-section rows share the same table
"""

from .html_parser import load_document, validate_html, parse_statement, parse_statement_file
from .section_locator import locate_trade_table, find_marker_row
from .header_classifier import (
    HeaderRule,
    HeaderText,
    build_rules,
    classify_headers,
    build_column_mapping,
)
from .row_filter import RowFilter
from .field_parser import (
    clean_numeric_string,
    parse_float,
    parse_ticket,
    parse_datetime,
    extract_fields,
)
from .record_builder import RecordIdFactory, assemble_records

__all__ = [
    # Entry points
    'load_document',
    'validate_html',
    'parse_statement',
    'parse_statement_file',
    # Section Locator
    'locate_trade_table',
    'find_marker_row',
    # Header Classifier
    'HeaderRule',
    'HeaderText',
    'build_rules',
    'classify_headers',
    'build_column_mapping',
    # Row Filter
    'RowFilter',
    # Field Extractor
    'clean_numeric_string',
    'parse_float',
    'parse_ticket',
    'parse_datetime',
    'extract_fields',
    # Record Assembler
    'RecordIdFactory',
    'assemble_records',
]
