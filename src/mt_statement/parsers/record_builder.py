"""
Assemble TradeRecord objects from filtered table rows.

Each surviving row gets a ULID from a per-call factory, so identifiers are
unique within one extraction and sort in creation order.
"""

import logging
from typing import Dict, List, Optional

from lxml import html
from pydantic import ValidationError
from ulid import ULID

from mt_statement.config import StatementVocabulary, get_vocabulary
from mt_statement.exceptions import EmptyResultError, RowSkipped
from mt_statement.models.trade import TradeRecord
from mt_statement.parsers.field_parser import extract_fields, row_cells
from mt_statement.parsers.row_filter import RowFilter

logger = logging.getLogger(__name__)


class RecordIdFactory:
    """
    Generates monotonically increasing ULIDs.

    ULIDs created within the same millisecond have random low bits, so a
    fresh ULID can sort before the previous one. The factory then bumps the
    previous value by one instead.
    """

    def __init__(self):
        self._last: Optional[ULID] = None

    def new_id(self) -> str:
        candidate = ULID()
        if self._last is not None and int(candidate) <= int(self._last):
            candidate = ULID.from_int(int(self._last) + 1)
        self._last = candidate
        return str(candidate)


def build_record(
    cells: List[html.HtmlElement],
    mapping: Dict[str, int],
    id_factory: RecordIdFactory,
    vocabulary: Optional[StatementVocabulary] = None
) -> TradeRecord:
    """
    Build one TradeRecord from a data row's cells.

    Raises:
        RowSkipped: If the ticket or a label cell is invalid
    """
    vocabulary = vocabulary or get_vocabulary()
    fields = extract_fields(cells, mapping, vocabulary)

    try:
        return TradeRecord.model_validate(
            {"id": id_factory.new_id(), **fields},
            context={"max_label_length": vocabulary.max_label_length}
        )
    except ValidationError as e:
        raise RowSkipped(f"invalid trade record: {e.error_count()} validation error(s)") from e


def assemble_records(
    rows: List[html.HtmlElement],
    row_filter: RowFilter,
    mapping: Dict[str, int],
    vocabulary: Optional[StatementVocabulary] = None,
    log: Optional[logging.Logger] = None
) -> List[TradeRecord]:
    """
    Turn the rows of a trade table into records, in row order.

    Rows rejected by the filter are ignored silently; rows that fail
    extraction are logged at debug level and skipped.

    Args:
        rows: All rows of the trade table in document order
        row_filter: Row filter for this table
        mapping: Field tag -> column index
        vocabulary: Statement vocabulary (defaults to the cached one)
        log: Logger for skipped rows (defaults to this module's logger)

    Returns:
        Non-empty list of TradeRecord

    Raises:
        EmptyResultError: If no row produced a record
    """
    vocabulary = vocabulary or get_vocabulary()
    log = log or logger
    id_factory = RecordIdFactory()
    records: List[TradeRecord] = []

    for i, row in enumerate(rows):
        if not row_filter.is_data_row(row):
            continue

        if row_filter.is_placeholder(row):
            continue

        try:
            record = build_record(row_cells(row), mapping, id_factory, vocabulary)
        except RowSkipped as e:
            log.debug(f"Failed to create trade record from row {i}: {e.reason}")
            continue

        records.append(record)

    if not records:
        raise EmptyResultError("no valid trade records found in table", rows_scanned=len(rows))

    return records
