"""
Trade summary model computed from extracted trade records.

Mirrors the "Summary" block printed at the bottom of MetaTrader statements,
but is recomputed from the closed transactions so it can be trusted even
when the statement's own summary is missing or localized.
"""

from typing import Iterable, TYPE_CHECKING
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from .trade import TradeRecord


class TradeSummary(BaseModel):
    """
    Aggregate statistics over a sequence of closed trades.

    Attributes:
        total_trades: Number of records
        short_positions: Records whose type starts with 'sell'
        long_positions: Records whose type starts with 'buy'
        profit_trades: Records with positive profit
        loss_trades: Records with negative profit
        gross_profit: Sum of positive profits
        gross_loss: Sum of negative profits (zero or negative)
        net_profit: gross_profit + gross_loss
        profit_factor: gross_profit / |gross_loss| (0.0 without losses)
        expected_payoff: net_profit / total_trades
        maximal_drawdown: Largest drop of cumulative profit from its running peak
        relative_drawdown: Largest drop as a percentage of the running peak
    """

    total_trades: int = Field(default=0, ge=0)
    short_positions: int = Field(default=0, ge=0)
    long_positions: int = Field(default=0, ge=0)
    profit_trades: int = Field(default=0, ge=0)
    loss_trades: int = Field(default=0, ge=0)
    gross_profit: float = 0.0
    gross_loss: float = 0.0
    net_profit: float = 0.0
    profit_factor: float = 0.0
    expected_payoff: float = 0.0
    maximal_drawdown: float = Field(default=0.0, ge=0.0)
    relative_drawdown: float = Field(default=0.0, ge=0.0)

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True
    )

    @classmethod
    def from_records(cls, records: Iterable['TradeRecord']) -> 'TradeSummary':
        """
        Compute summary statistics in record order.

        Args:
            records: Trade records (order matters for drawdown)

        Returns:
            TradeSummary instance (all zeros for no records)

        Example:
            >>> summary = TradeSummary.from_records(history)
            >>> summary.profit_factor
            1.85
        """
        records = list(records)
        if not records:
            return cls()

        gross_profit = sum(r.profit for r in records if r.profit > 0)
        gross_loss = sum(r.profit for r in records if r.profit < 0)
        net_profit = gross_profit + gross_loss

        # Drawdown over the cumulative profit curve, starting flat at zero
        equity = 0.0
        peak = 0.0
        max_drawdown = 0.0
        max_relative = 0.0
        for record in records:
            equity += record.profit
            peak = max(peak, equity)
            drawdown = peak - equity
            max_drawdown = max(max_drawdown, drawdown)
            if peak > 0:
                max_relative = max(max_relative, drawdown / peak * 100.0)

        return cls(
            total_trades=len(records),
            short_positions=sum(1 for r in records if r.is_short),
            long_positions=sum(1 for r in records if r.is_long),
            profit_trades=sum(1 for r in records if r.profit > 0),
            loss_trades=sum(1 for r in records if r.profit < 0),
            gross_profit=gross_profit,
            gross_loss=gross_loss,
            net_profit=net_profit,
            profit_factor=gross_profit / abs(gross_loss) if gross_loss else 0.0,
            expected_payoff=net_profit / len(records),
            maximal_drawdown=max_drawdown,
            relative_drawdown=max_relative,
        )
