"""Spreadsheet ingestion - raw file to validated blocks"""

import logging
import mimetypes
from collections import Counter
from pathlib import Path
from typing import Any, Optional

from core.models import Block, IngestionResult
from core.exceptions import (
    IngestionError, UnsupportedFormat, EmptyDocument, NoValidRows,
    DuplicateMarkError
)
from config import settings
from .parsers import ExcelParser, CSVParser, FileParser


logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": ".xlsx",
    "application/vnd.ms-excel": ".xls",
    "text/csv": ".csv",
    "application/csv": ".csv",
}


def find_header_row(rows: list[list[Any]], sentinel: str = None) -> int:
    """
    Index of the first row whose first cell is the sentinel label.

    Falls back to 0 when no row carries it.
    """
    sentinel = sentinel or settings.SENTINEL_LABEL
    for index, row in enumerate(rows):
        if row and _is_sentinel(row[0], sentinel):
            return index
    return 0


def extract_blocks(
    rows: list[list[Any]],
    sentinel: str = None
) -> IngestionResult:
    """
    Map the rows below the header row onto blocks.

    Rows are mapped positionally, not by header text. Rows with an empty
    mark or a repeated header are dropped; order is preserved.

    Raises:
        EmptyDocument: Fewer than two rows
        NoValidRows: Nothing left after filtering
    """
    sentinel = sentinel or settings.SENTINEL_LABEL

    if len(rows) < 2:
        raise EmptyDocument("Spreadsheet has no data rows")

    header_index = find_header_row(rows, sentinel)
    logger.debug("Header row found at index %d", header_index)

    blocks = []
    dropped = 0
    for row in rows[header_index + 1:]:
        if is_droppable_mark(row[0] if row else None, sentinel):
            dropped += 1
            continue
        blocks.append(Block.from_cells(row))

    if dropped:
        logger.info("Dropped %d rows without a mark", dropped)

    if not blocks:
        raise NoValidRows(f"No rows with a {sentinel} value found")

    return IngestionResult(
        blocks=blocks,
        header_row_index=header_index,
        total_rows=len(blocks),
        dropped_rows=dropped,
    )


def is_droppable_mark(value: Any, sentinel: str = None) -> bool:
    """True for an empty mark or a stray copy of the header label"""
    sentinel = sentinel or settings.SENTINEL_LABEL
    return _is_blank(value) or _is_sentinel(value, sentinel)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _is_sentinel(value: Any, sentinel: str) -> bool:
    return isinstance(value, str) and value.strip() == sentinel


class SpreadsheetIngestor:
    """Reads an uploaded requirements file into blocks"""

    def __init__(self, reject_duplicates: Optional[bool] = None):
        self.parsers: dict[str, FileParser] = {}
        for parser in (ExcelParser(), CSVParser()):
            for ext in parser.supported_extensions:
                self.parsers[ext] = parser
        if reject_duplicates is None:
            reject_duplicates = settings.REJECT_DUPLICATE_MARKS
        self.reject_duplicates = reject_duplicates

    @property
    def supported_extensions(self) -> list[str]:
        return list(self.parsers)

    def resolve_extension(
        self,
        file_name: Optional[str] = None,
        content_type: Optional[str] = None
    ) -> str:
        """
        Pick the parser key from a file name or a MIME type.

        Raises:
            UnsupportedFormat: Neither names a supported format
        """
        if file_name:
            ext = Path(file_name).suffix.lower()
            if ext in self.parsers:
                return ext
        if content_type:
            mime = content_type.split(";")[0].strip().lower()
            ext = CONTENT_TYPES.get(mime) or mimetypes.guess_extension(mime)
            if ext in self.parsers:
                return ext
        raise UnsupportedFormat(
            "Please upload a valid Excel file "
            f"({', '.join(self.supported_extensions)})",
            file_name
        )

    def ingest(
        self,
        content: bytes,
        file_name: Optional[str] = None,
        content_type: Optional[str] = None
    ) -> IngestionResult:
        """
        Parse file content into an ordered set of blocks.

        Raises:
            UnsupportedFormat, EmptyDocument, NoValidRows, DuplicateMarkError
        """
        ext = self.resolve_extension(file_name, content_type)
        parser = self.parsers[ext]

        try:
            rows = parser.read_rows(content)
        except Exception as e:
            raise IngestionError(
                f"Error processing file: {e}",
                file_name
            ) from e

        try:
            result = extract_blocks(rows)
        except IngestionError as e:
            e.file_name = file_name
            raise

        if self.reject_duplicates:
            self.check_duplicates(result.blocks, file_name)

        return result.model_copy(update={"file_name": file_name})

    def ingest_file(self, path: Path) -> IngestionResult:
        """Read and ingest a file from disk"""
        path = Path(path)
        self.resolve_extension(path.name)
        return self.ingest(path.read_bytes(), file_name=path.name)

    @staticmethod
    def check_duplicates(blocks: list[Block], file_name: str = None) -> None:
        """Raise DuplicateMarkError if any mark repeats"""
        counts = Counter(block.mark for block in blocks if block.mark)
        duplicates = [mark for mark, count in counts.items() if count > 1]
        if duplicates:
            raise DuplicateMarkError(duplicates, file_name)
