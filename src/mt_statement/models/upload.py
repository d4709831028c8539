"""
Import outcome model for one uploaded statement.

The persistence layer owns file records; this model only reports what
happened to one document so callers can store or render it.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class ImportStatus(str, Enum):
    """Processing status of an uploaded statement."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class StatementImport(BaseModel):
    """
    Result of importing one statement document.

    Attributes:
        file_name: Original file name
        file_size: Size in bytes
        file_type: MIME type reported by the uploader
        status: Processing status
        records_count: Number of trade records extracted
        error_message: Structural error message (failed imports only)
        error_code: Structural error code (failed imports only)
        imported_at: When the import finished

    Example:
        >>> result = StatementImport(
        ...     file_name="Statement.htm",
        ...     file_size=48213,
        ...     status=ImportStatus.COMPLETED,
        ...     records_count=37
        ... )
    """

    file_name: str = Field(..., min_length=1, examples=["Statement.htm"])
    file_size: int = Field(default=0, ge=0)
    file_type: str = Field(default="text/html")
    status: ImportStatus = Field(default=ImportStatus.PENDING)
    records_count: int = Field(default=0, ge=0)
    error_message: Optional[str] = None
    error_code: Optional[str] = None
    imported_at: datetime = Field(default_factory=datetime.now)

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=False
    )

    @model_validator(mode='after')
    def check_status_consistency(self) -> 'StatementImport':
        """Failed imports carry an error message; completed ones carry records."""
        if self.status == ImportStatus.FAILED and not self.error_message:
            raise ValueError("Failed imports must include error_message")
        if self.status == ImportStatus.COMPLETED and self.records_count < 1:
            raise ValueError("Completed imports must have at least one record")
        return self

    @property
    def succeeded(self) -> bool:
        return self.status == ImportStatus.COMPLETED
