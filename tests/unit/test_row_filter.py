"""
Unit tests for data row selection.
"""

from conftest import TRADE_1001, TRADE_1002

from mt_statement.parsers.field_parser import row_cells, text_content
from mt_statement.parsers.header_classifier import build_column_mapping
from mt_statement.parsers.html_parser import load_document
from mt_statement.parsers.row_filter import RowFilter, contains_text, rows_after_marker
from mt_statement.parsers.section_locator import locate_trade_table


def _prepare(content: bytes):
    root = load_document(content)
    anchor, table = locate_trade_table(root)
    rows, header_row, _ = build_column_mapping(table)
    return anchor, rows, header_row


def _first_cell(row) -> str:
    return text_content(row_cells(row)[0])


class TestRowsAfterMarker:
    """Test suite for rows_after_marker()."""

    def test_no_boundary_means_no_excluded_rows(self, make_statement):
        anchor, _, _ = _prepare(make_statement([TRADE_1001]))

        assert rows_after_marker(anchor, 'Open Trades:') == []

    def test_rows_after_boundary_are_returned(self, make_statement):
        open_trade = ['2001'] + TRADE_1001[1:]
        anchor, _, _ = _prepare(make_statement([TRADE_1001], open_trades=[open_trade]))

        excluded = rows_after_marker(anchor, 'Open Trades:')

        # Header row and the open trade row
        assert len(excluded) == 2
        assert _first_cell(excluded[-1]) == '2001'

    def test_contains_text_matches_single_text_node(self):
        root = load_document(b'<html><body><table><tr><td><b>Open Trades:</b></td></tr></table></body></html>')

        assert contains_text(root.find('.//tr'), 'Open Trades:')

    def test_contains_text_ignores_text_split_across_elements(self):
        """'Open <b>Trades:</b>' is two text nodes and is not a boundary."""
        root = load_document(b'<html><body><table><tr><td>Open <b>Trades:</b></td></tr></table></body></html>')

        assert not contains_text(root.find('.//tr'), 'Open Trades:')

    def test_split_boundary_text_keeps_following_rows(self, make_statement, make_row):
        extra = '<tr><td colspan="13">Open <b>Trades:</b></td></tr>' + make_row(TRADE_1002)
        anchor, rows, header_row = _prepare(make_statement([TRADE_1001], extra_rows=extra))
        row_filter = RowFilter(anchor, header_row)

        data_rows = [r for r in rows if row_filter.is_data_row(r)]

        assert [_first_cell(r) for r in data_rows] == ['1001', '1002']


class TestRowFilter:
    """Test suite for RowFilter."""

    def test_selects_only_closed_trade_rows(self, sample_statement):
        """Should keep trade rows and drop marker, header, subtotal and open trade rows."""
        anchor, rows, header_row = _prepare(sample_statement)
        row_filter = RowFilter(anchor, header_row)

        data_rows = [r for r in rows if row_filter.is_data_row(r)]

        assert [_first_cell(r) for r in data_rows] == ['1001', '1002', '1003']

    def test_rejects_header_row(self, sample_statement):
        anchor, _, header_row = _prepare(sample_statement)
        row_filter = RowFilter(anchor, header_row)

        assert not row_filter.is_data_row(header_row)

    def test_rejects_short_rows(self, make_statement, make_row):
        extra = make_row(['1004', 'buy', 'EURUSD'])
        anchor, rows, header_row = _prepare(make_statement([TRADE_1001], extra_rows=extra))
        row_filter = RowFilter(anchor, header_row)

        assert not any(
            row_filter.is_data_row(r) and _first_cell(r) == '1004' for r in rows
        )

    def test_rejects_rows_without_digits_in_first_cell(self, make_statement, make_row):
        extra = make_row(['Deposit', '', '', '', '', '', '', '', '', '', '', '', '', '1000.00'])
        anchor, rows, header_row = _prepare(make_statement([TRADE_1001], extra_rows=extra))
        row_filter = RowFilter(anchor, header_row)

        data_rows = [r for r in rows if row_filter.is_data_row(r)]

        assert [_first_cell(r) for r in data_rows] == ['1001']

    def test_open_trade_rows_are_out_of_section(self, make_statement):
        open_trade = ['2001'] + TRADE_1002[1:]
        anchor, rows, header_row = _prepare(
            make_statement([TRADE_1001], open_trades=[open_trade])
        )
        row_filter = RowFilter(anchor, header_row)

        open_row = next(r for r in rows if row_cells(r) and _first_cell(r) == '2001')

        assert row_filter.is_out_of_section(open_row)
        assert not row_filter.is_data_row(open_row)

    def test_placeholder_row(self, make_statement, make_row):
        extra = '<tr><td colspan="14">No transactions</td></tr>'
        anchor, rows, header_row = _prepare(make_statement([], extra_rows=extra))
        row_filter = RowFilter(anchor, header_row)

        placeholder = next(r for r in rows if 'No transactions' in r.text_content())

        assert row_filter.is_placeholder(placeholder)
        assert not row_filter.is_data_row(placeholder)
