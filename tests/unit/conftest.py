"""
Pytest configuration for unit tests.

Provides factories that build MetaTrader-style statements in memory, so
tests never depend on real broker exports.
"""

import pytest


HEADER_CELLS = [
    'Ticket', 'Open Time', 'Type', 'Size', 'Item', 'Price', 'S / L', 'T / P',
    'Close Time', 'Price', 'Commission', 'Taxes', 'Swap', 'Profit',
]

TRADE_1001 = [
    '1001', '2023.01.05 10:00:00', 'buy', '1.00', 'EURUSD', '1.1000', '1.0900', '1.1100',
    '2023.01.05 12:00:00', '1.1050', '-2.00', '0.00', '-0.50', '45.00',
]

TRADE_1002 = [
    '1002', '2023.01.06 09:30:00', 'sell', '0.50', 'GBPUSD', '1.2500', '1.2600', '1.2300',
    '2023.01.06 15:45:00', '1.2550', '-1.00', '0.00', '0.00', '-25.00',
]

TRADE_1003 = [
    '1003', '2023.01.09 08:00:00', 'buy', '2.00', 'USDJPY', '130.50', '0.00', '0.00',
    '2023.01.10 08:00:00', '131.00', '-4.00', '0.00', '1.20', '$1,234.56',
]


@pytest.fixture
def make_row():
    """Factory: list of cell texts -> <tr> markup."""
    def _make_row(cells, bgcolor=None, cell_tag='td'):
        attrs = f' bgcolor="{bgcolor}"' if bgcolor else ''
        inner = ''.join(f'<{cell_tag}>{c}</{cell_tag}>' for c in cells)
        return f'<tr align="right"{attrs}>{inner}</tr>'
    return _make_row


@pytest.fixture
def make_statement(make_row):
    """
    Factory: trade rows -> statement bytes.

    Layout follows MetaTrader 4 detailed statements: a title table, then one
    table holding the closed transactions section, an optional open trades
    section and a summary line.
    """
    def _make_statement(
        trades,
        header=None,
        open_trades=None,
        extra_rows='',
        marker='Closed Transactions:',
        header_bgcolor='#C0C0C0'
    ):
        header = HEADER_CELLS if header is None else header
        rows = [
            f'<tr align="left"><td colspan="13"><b>{marker}</b></td></tr>',
            make_row(header, bgcolor=header_bgcolor),
        ]
        rows += [make_row(t, bgcolor='#FFFFFF') for t in trades]
        rows.append(extra_rows)
        rows.append(
            '<tr align="right"><td colspan="10">&nbsp;</td>'
            '<td>-7.00</td><td>0.00</td><td>0.70</td><td>1254.56</td></tr>'
        )
        if open_trades is not None:
            rows.append('<tr align="left"><td colspan="13"><b>Open Trades:</b></td></tr>')
            rows.append(make_row(header, bgcolor=header_bgcolor))
            rows += [make_row(t) for t in open_trades]

        return (
            '<html><head><title>Statement: 12345 - Demo</title></head><body>'
            '<div align="center"><div style="font: 20pt Times New Roman"><b>Demo Broker</b></div>'
            '<table cellspacing="1" cellpadding="3" border="0">'
            '<tr align="left"><td colspan="2"><b>Account: 12345</b></td></tr>'
            '</table>'
            '<table width="820" cellspacing="1" cellpadding="3" border="0">'
            + ''.join(rows) +
            '</table></div></body></html>'
        ).encode('utf-8')
    return _make_statement


@pytest.fixture
def sample_statement(make_statement):
    """Statement with three closed trades and one open trade."""
    open_trade = ['2001'] + TRADE_1001[1:]
    return make_statement([TRADE_1001, TRADE_1002, TRADE_1003], open_trades=[open_trade])
