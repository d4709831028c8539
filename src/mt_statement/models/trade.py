"""
Pydantic model for one closed trade extracted from a broker statement.

Schema Design:
- One record per closed-transaction row (flat structure)
- Identifier is a ULID: unique and sortable by creation time
- Monetary and quantity fields are floats defaulting to 0.0
- Timestamps are None when the statement carries no value
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from mt_statement.validators import validate_ticket, validate_label


class TradeRecord(BaseModel):
    """
    Closed trade parsed from a MetaTrader-style HTML statement.

    Field names are snake_case in Python and camelCase when serialized
    with ``by_alias=True`` (the wire format used by the upload API).

    Example:
        >>> record = TradeRecord(
        ...     id="01HGW2N7EHJVJ8Q1K5YJ2F3ZC9",
        ...     ticket=1001,
        ...     open_time=datetime(2023, 1, 5, 10, 0),
        ...     type="buy",
        ...     size=1.0,
        ...     item="EURUSD",
        ...     open_price=1.1,
        ...     close_price=1.105,
        ...     profit=45.0
        ... )
        >>> record.model_dump(by_alias=True)["openPrice"]
        1.1
    """

    # === Identity ===
    id: str = Field(
        ...,
        min_length=26,
        max_length=26,
        description="ULID assigned when the record was created",
        examples=["01HGW2N7EHJVJ8Q1K5YJ2F3ZC9"]
    )

    ticket: int = Field(
        ...,
        description="Broker-assigned ticket number",
        examples=[1001]
    )

    # === Trade ===
    open_time: Optional[datetime] = Field(
        default=None,
        description="Open timestamp, None when absent or unparsable"
    )

    type: str = Field(
        default="",
        description="Trade type as printed on the statement",
        examples=["buy", "sell"]
    )

    size: float = Field(default=0.0, description="Position size in lots")

    item: str = Field(
        default="",
        description="Instrument symbol",
        examples=["EURUSD"]
    )

    open_price: float = Field(default=0.0, description="Entry price")
    stop_loss: float = Field(default=0.0, description="Stop-loss price")
    take_profit: float = Field(default=0.0, description="Take-profit price")

    close_time: Optional[datetime] = Field(
        default=None,
        description="Close timestamp, None when absent or unparsable"
    )

    close_price: float = Field(default=0.0, description="Exit price")

    # === Costs and Result ===
    commission: float = Field(default=0.0)
    taxes: float = Field(default=0.0)
    swap: float = Field(default=0.0)
    profit: float = Field(default=0.0)

    _validate_ticket = field_validator('ticket')(validate_ticket)

    @field_validator('type', 'item')
    @classmethod
    def check_label_length(cls, value: str, info: ValidationInfo) -> str:
        """Enforce the label limit, taken from validation context when given."""
        context = info.context or {}
        return validate_label(value, context.get('max_label_length'))

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [{
                "id": "01HGW2N7EHJVJ8Q1K5YJ2F3ZC9",
                "ticket": 1001,
                "openTime": "2023-01-05T10:00:00",
                "type": "buy",
                "size": 1.0,
                "item": "EURUSD",
                "openPrice": 1.1,
                "stopLoss": 1.09,
                "takeProfit": 1.11,
                "closeTime": "2023-01-05T12:00:00",
                "closePrice": 1.105,
                "commission": -2.0,
                "taxes": 0.0,
                "swap": -0.5,
                "profit": 45.0
            }]
        }
    )

    @property
    def net_profit(self) -> float:
        """Profit after commission, taxes and swap."""
        return self.profit + self.commission + self.taxes + self.swap

    @property
    def is_long(self) -> bool:
        return self.type.strip().lower().startswith('buy')

    @property
    def is_short(self) -> bool:
        return self.type.strip().lower().startswith('sell')
