"""
Unit tests for StatementImportService.

Parsing runs for real on in-memory statements; only the configuration
is replaced per test.
"""

import logging

import pytest
from conftest import TRADE_1001

from mt_statement.config import AppConfig
from mt_statement.models import ImportStatus, TradeHistory
from mt_statement.services import StatementImportService


@pytest.fixture
def service():
    return StatementImportService(config=AppConfig(_env_file=None))


class TestImportBytes:
    """Test suite for StatementImportService.import_bytes()."""

    def test_successful_import(self, service, sample_statement):
        result, history = service.import_bytes(sample_statement, 'Statement.htm')

        assert result.succeeded
        assert result.status == ImportStatus.COMPLETED
        assert result.records_count == 3
        assert result.file_size == len(sample_statement)
        assert isinstance(history, TradeHistory)
        assert history.source == 'Statement.htm'
        assert history.tickets == [1001, 1002, 1003]

    def test_content_type_parameters_are_accepted(self, service, sample_statement):
        result, _ = service.import_bytes(
            sample_statement, 'Statement.htm', content_type='text/html; charset=utf-8'
        )

        assert result.succeeded
        assert result.file_type == 'text/html'

    def test_rejects_oversized_document(self, sample_statement):
        service = StatementImportService(config=AppConfig(_env_file=None, max_document_bytes=100))

        result, history = service.import_bytes(sample_statement, 'Statement.htm')

        assert history is None
        assert result.status == ImportStatus.FAILED
        assert result.error_code == 'DOCUMENT_TOO_LARGE'

    def test_rejects_wrong_content_type(self, service, sample_statement):
        result, history = service.import_bytes(
            sample_statement, 'Statement.pdf', content_type='application/pdf'
        )

        assert history is None
        assert result.error_code == 'INVALID_CONTENT_TYPE'

    def test_structural_error_becomes_failed_import(self, service, make_statement, caplog):
        content = make_statement([TRADE_1001], marker='Deals:')

        with caplog.at_level(logging.ERROR, logger='mt_statement'):
            result, history = service.import_bytes(content, 'Statement.htm')

        assert history is None
        assert not result.succeeded
        assert result.error_code == 'SECTION_NOT_FOUND'
        assert "closed transactions section not found" in result.error_message
        assert "Failed to import Statement.htm" in caplog.text

    def test_empty_statement(self, service, make_statement):
        extra = '<tr><td colspan="14">No transactions</td></tr>'

        result, _ = service.import_bytes(make_statement([], extra_rows=extra), 'Statement.htm')

        assert result.error_code == 'EMPTY_RESULT'


class TestImportFile:
    """Test suite for StatementImportService.import_file()."""

    def test_guesses_content_type_from_extension(self, service, tmp_path, sample_statement):
        path = tmp_path / 'Statement.htm'
        path.write_bytes(sample_statement)

        result, history = service.import_file(path)

        assert result.succeeded
        assert result.file_name == 'Statement.htm'
        assert result.file_type == 'text/html'
        assert len(history) == 3

    def test_unknown_extension_is_rejected(self, service, tmp_path, sample_statement):
        path = tmp_path / 'Statement.bin'
        path.write_bytes(sample_statement)

        result, _ = service.import_file(path)

        assert result.error_code == 'INVALID_CONTENT_TYPE'

    def test_missing_file_raises(self, service, tmp_path):
        with pytest.raises(FileNotFoundError):
            service.import_file(tmp_path / 'missing.htm')
