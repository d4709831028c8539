"""
TradeHistory collection class for ordered TradeRecord objects.

This module defines TradeHistory, a user-facing collection class that groups
the TradeRecord objects extracted from one statement and provides convenient
access patterns including ticket lookup, summary statistics and DataFrame export.
"""

from typing import Iterator, List, Optional, Union, overload

import pandas as pd

from .trade import TradeRecord
from .summary import TradeSummary


class TradeHistory:
    """
    Ordered collection of TradeRecord objects from the same statement.

    Record order is the statement's row order and is never changed.

    Key Features:
    - Supports indexing by position (int) or slice
    - Lookup by broker ticket
    - Summary statistics (profit factor, drawdown, ...)
    - Export to list, dict or pandas DataFrame

    Example:
        >>> history = TradeHistory(records)
        >>> first = history[0]                 # By index -> TradeRecord
        >>> subset = history[1:3]              # By slice -> TradeHistory
        >>> history.get_by_ticket(1001)        # By ticket -> TradeRecord
        >>> 1001 in history
        True
        >>> history.summary().net_profit
        120.5
    """

    def __init__(self, records: List[TradeRecord], source: Optional[str] = None):
        """
        Initialize TradeHistory from list of TradeRecord objects.

        Args:
            records: Trade records in statement order
            source: Optional origin label (e.g., file name)

        Raises:
            ValueError: If records list is empty
        """
        if not records:
            raise ValueError("TradeHistory must contain at least one record")

        self._records = list(records)
        self.source = source

    # === Collection Access ===

    @overload
    def __getitem__(self, key: int) -> TradeRecord: ...

    @overload
    def __getitem__(self, key: slice) -> 'TradeHistory': ...

    def __getitem__(self, key: Union[int, slice]) -> Union[TradeRecord, 'TradeHistory']:
        """
        Access records by index or slice.

        Raises:
            IndexError: If integer index out of range
            ValueError: If slice is empty
        """
        if isinstance(key, int):
            return self._records[key]
        elif isinstance(key, slice):
            sliced = self._records[key]
            if not sliced:
                raise ValueError("Slice resulted in empty history")
            return TradeHistory(sliced, source=self.source)
        else:
            raise TypeError(f"Invalid key type: {type(key).__name__}")

    def __iter__(self) -> Iterator[TradeRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, ticket: int) -> bool:
        return any(r.ticket == ticket for r in self._records)

    def get_by_ticket(self, ticket: int) -> TradeRecord:
        """
        Find the first record with the given ticket.

        Raises:
            KeyError: If ticket not found
        """
        for record in self._records:
            if record.ticket == ticket:
                return record
        raise KeyError(f"No record with ticket {ticket} in history")

    # === Metadata ===

    @property
    def tickets(self) -> List[int]:
        """Tickets in statement order."""
        return [r.ticket for r in self._records]

    @property
    def items(self) -> List[str]:
        """Distinct instrument symbols in order of first appearance."""
        seen = []
        for record in self._records:
            if record.item not in seen:
                seen.append(record.item)
        return seen

    @property
    def total_profit(self) -> float:
        return sum(r.profit for r in self._records)

    def summary(self) -> TradeSummary:
        """Compute summary statistics over all records."""
        return TradeSummary.from_records(self._records)

    # === Export ===

    def to_list(self) -> List[TradeRecord]:
        return list(self._records)

    def to_dict(self, by_alias: bool = False) -> dict:
        """
        Convert to dictionary.

        Args:
            by_alias: Use camelCase keys (upload API wire format)

        Returns:
            Dictionary with source, records and summary
        """
        return {
            "source": self.source,
            "records": [r.model_dump(mode="json", by_alias=by_alias) for r in self._records],
            "summary": self.summary().model_dump(by_alias=by_alias),
        }

    def to_dataframe(self) -> pd.DataFrame:
        """
        Convert to pandas DataFrame, one row per record.

        Columns follow TradeRecord field order; timestamps become
        datetime64 columns with NaT for absent values.
        """
        columns = list(TradeRecord.model_fields.keys())
        df = pd.DataFrame([r.model_dump() for r in self._records], columns=columns)
        for col in ('open_time', 'close_time'):
            # RFC 3339 cells are zone-aware; mixing them with naive values needs UTC
            has_zone = any(v is not None and v.tzinfo is not None for v in df[col])
            df[col] = pd.to_datetime(df[col], utc=has_zone)
        return df

    def __repr__(self) -> str:
        return (
            f"TradeHistory(source={self.source!r}, records={len(self)}, "
            f"profit={self.total_profit:.2f})"
        )

    def __str__(self) -> str:
        tickets_str = ", ".join(str(t) for t in self.tickets[:3])
        if len(self) > 3:
            tickets_str += ", ..."
        return f"TradeHistory[{tickets_str}] ({len(self)} records)"
