"""
Unit tests for header row detection and column classification.

The classifier is a single left-to-right pass through an ordered rule
list; the only running state is whether the open price column is taken.
"""

import pytest

from mt_statement.exceptions import TableNotFound
from mt_statement.parsers.header_classifier import (
    HeaderRule,
    HeaderText,
    build_column_mapping,
    build_rules,
    classify_header,
    classify_headers,
    find_header_row,
)
from mt_statement.parsers.html_parser import load_document


MT4_HEADER = [
    'Ticket', 'Open Time', 'Type', 'Size', 'Item', 'Price', 'S/L', 'T/P',
    'Close Time', 'Price', 'Commission', 'Taxes', 'Swap', 'Profit',
]


def _table(rows_markup: str):
    root = load_document(f'<html><body><table>{rows_markup}</table></body></html>'.encode())
    return root.find('.//table')


class TestHeaderText:
    """Test header normalization."""

    def test_lower_cases_and_compacts(self):
        header = HeaderText.from_raw('  S / L ')
        assert header.text == 's / l'
        assert header.compact == 's/l'


class TestHeaderRule:
    """Each rule is independently testable."""

    def test_label_match(self):
        rule = HeaderRule('swap', labels=('swap', 'スワップ'))
        assert rule.matches(HeaderText.from_raw('Swap'), {})
        assert rule.matches(HeaderText.from_raw('スワップ'), {})
        assert not rule.matches(HeaderText.from_raw('Swaps'), {})

    def test_keyword_match_requires_all_keywords(self):
        rule = HeaderRule('open_time', keywords=('open', 'time'))
        assert rule.matches(HeaderText.from_raw('Time of Open'), {})
        assert not rule.matches(HeaderText.from_raw('Open'), {})

    def test_compact_symbol_match(self):
        rule = HeaderRule('stop_loss', compact_contains=('s/l',), compact_equals=('sl',))
        assert rule.matches(HeaderText.from_raw('S / L'), {})
        assert rule.matches(HeaderText.from_raw('SL'), {})
        assert not rule.matches(HeaderText.from_raw('Slippage'), {})

    def test_open_price_state_gates_rule(self):
        first = HeaderRule('open_price', labels=('price',), open_price_assigned=False)
        second = HeaderRule('close_price', labels=('price',), open_price_assigned=True)
        price = HeaderText.from_raw('Price')

        assert first.matches(price, {})
        assert not second.matches(price, {})
        assert not first.matches(price, {'open_price': 5})
        assert second.matches(price, {'open_price': 5})

    def test_classify_header_first_match_wins(self):
        rules = build_rules()
        assert classify_header(HeaderText.from_raw('Open Time'), {}, rules) == 'open_time'
        assert classify_header(HeaderText.from_raw('Balance'), {}, rules) is None


class TestClassifyHeaders:
    """Test whole-row classification."""

    def test_mt4_header_mapping(self):
        """Standard MetaTrader 4 header maps every column."""
        mapping = classify_headers(MT4_HEADER)

        assert mapping == {
            'ticket': 0,
            'open_time': 1,
            'type': 2,
            'size': 3,
            'item': 4,
            'open_price': 5,
            'stop_loss': 6,
            'take_profit': 7,
            'close_time': 8,
            'close_price': 9,
            'commission': 10,
            'taxes': 11,
            'swap': 12,
            'profit': 13,
        }

    def test_first_price_is_open_second_is_close(self):
        mapping = classify_headers(['Price', 'Ticket', 'Price'])
        assert mapping['open_price'] == 0
        assert mapping['close_price'] == 2

    def test_japanese_header_mapping(self):
        """Localized labels from the vocabulary are recognized."""
        mapping = classify_headers([
            'チケット', 'オープン時間', 'タイプ', '数量', 'シンボル', 'Price', 'S / L',
            'T / P', 'クローズ時間', 'Price', '手数料', '税金', 'スワップ', '損益',
        ])

        assert mapping['ticket'] == 0
        assert mapping['open_time'] == 1
        assert mapping['size'] == 3
        assert mapping['item'] == 4
        assert mapping['stop_loss'] == 6
        assert mapping['take_profit'] == 7
        assert mapping['close_time'] == 8
        assert mapping['close_price'] == 9
        assert mapping['profit'] == 13

    @pytest.mark.parametrize('label, tag', [
        ('Stop Loss', 'stop_loss'),
        ('SL', 'stop_loss'),
        ('Take Profit', 'take_profit'),
        ('TP', 'take_profit'),
        ('Symbol', 'item'),
        ('利益', 'profit'),
    ])
    def test_label_variants(self, label, tag):
        assert classify_headers([label]) == {tag: 0}

    def test_unknown_headers_are_absent(self):
        """Tags without a matching header are simply missing."""
        mapping = classify_headers(['Ticket', 'Comment', 'Magic'])
        assert mapping == {'ticket': 0}


class TestHeaderRowSelection:
    """Test header row detection in a table."""

    def test_finds_row_by_bgcolor(self):
        table = _table(
            '<tr><td>Closed Transactions:</td></tr>'
            '<tr bgcolor="#C0C0C0"><td>Ticket</td><td>Profit</td></tr>'
            '<tr><td>1001</td><td>5.00</td></tr>'
        )
        rows = list(table.iter('tr'))
        assert find_header_row(rows, 'C0C0C0') is rows[1]

    def test_bgcolor_match_is_case_insensitive(self):
        table = _table(
            '<tr><td>x</td></tr>'
            '<tr bgcolor="#c0c0c0"><td>Ticket</td></tr>'
        )
        rows = list(table.iter('tr'))
        assert find_header_row(rows, 'C0C0C0') is rows[1]

    def test_falls_back_to_first_row(self):
        """Without a marker color the first row is the header."""
        table = _table(
            '<tr><td>Ticket</td><td>Profit</td></tr>'
            '<tr><td>1001</td><td>5.00</td></tr>'
        )
        rows, header_row, mapping = build_column_mapping(table)

        assert header_row is rows[0]
        assert mapping == {'ticket': 0, 'profit': 1}

    def test_too_few_rows_raises(self):
        table = _table('<tr><td>Closed Transactions:</td></tr>')
        with pytest.raises(TableNotFound, match="too few rows"):
            build_column_mapping(table)
