"""
Statement Import Service

Wraps the parser for upload handlers:
- Rejects oversized documents and non-HTML content types before parsing
- Converts structural parse errors into a failed StatementImport
- Returns the extracted records as a TradeHistory

Persistence, deduplication and HTTP response shaping stay with the caller.
"""

import logging
import mimetypes
from pathlib import Path
from typing import Optional, Tuple, Union

from mt_statement.config import AppConfig, StatementVocabulary, get_app_config, get_vocabulary
from mt_statement.exceptions import StatementError
from mt_statement.models import ImportStatus, StatementImport, TradeHistory
from mt_statement.parsers import parse_statement
from mt_statement.validators import validate_content_type

logger = logging.getLogger(__name__)


ImportOutcome = Tuple[StatementImport, Optional[TradeHistory]]


class StatementImportService:
    """
    Service for importing uploaded broker statements.

    Usage:
        service = StatementImportService()
        result, history = service.import_bytes(data, "Statement.htm")
        if result.succeeded:
            repository.save_all(history)
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        vocabulary: Optional[StatementVocabulary] = None
    ):
        """
        Initialize import service.

        Args:
            config: Application config (defaults to get_app_config())
            vocabulary: Statement vocabulary (defaults to get_vocabulary())
        """
        self.config = config or get_app_config()
        self.vocabulary = vocabulary or get_vocabulary()

    def _failed(
        self,
        file_name: str,
        file_size: int,
        file_type: str,
        message: str,
        error_code: str
    ) -> ImportOutcome:
        logger.error(f"Failed to import {file_name}: {message}")
        result = StatementImport(
            file_name=file_name,
            file_size=file_size,
            file_type=file_type,
            status=ImportStatus.FAILED,
            error_message=message,
            error_code=error_code
        )
        return result, None

    def import_bytes(
        self,
        content: bytes,
        file_name: str,
        content_type: str = 'text/html'
    ) -> ImportOutcome:
        """
        Import one statement from raw bytes.

        Args:
            content: Raw document bytes
            file_name: Original file name (for reporting)
            content_type: MIME type reported by the uploader

        Returns:
            Tuple of (StatementImport, TradeHistory or None when failed)
        """
        file_size = len(content)
        logger.info(f"Statement upload received: {file_name} ({file_size:,} bytes)")

        if file_size > self.config.max_document_bytes:
            return self._failed(
                file_name, file_size, content_type,
                f"document exceeds {self.config.max_document_bytes:,} bytes",
                "DOCUMENT_TOO_LARGE"
            )

        try:
            content_type = validate_content_type(content_type, self.config.allowed_content_types)
        except ValueError as e:
            return self._failed(file_name, file_size, content_type, str(e), "INVALID_CONTENT_TYPE")

        try:
            records = parse_statement(
                content,
                vocabulary=self.vocabulary,
                encoding=self.config.encoding
            )
        except StatementError as e:
            return self._failed(file_name, file_size, content_type, e.message, e.error_code)

        history = TradeHistory(records, source=file_name)
        result = StatementImport(
            file_name=file_name,
            file_size=file_size,
            file_type=content_type,
            status=ImportStatus.COMPLETED,
            records_count=len(history)
        )

        logger.info(f"✓ Imported {len(history)} trade records from {file_name}")
        return result, history

    def import_file(
        self,
        path: Union[str, Path],
        content_type: Optional[str] = None
    ) -> ImportOutcome:
        """
        Import one statement from a local file.

        Content type is guessed from the file extension when not given
        (.htm / .html -> text/html).

        Raises:
            FileNotFoundError: If path does not exist
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Statement file not found: {path}")

        if content_type is None:
            content_type = mimetypes.guess_type(path.name)[0] or 'application/octet-stream'

        return self.import_bytes(path.read_bytes(), path.name, content_type)
