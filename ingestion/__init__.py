"""Spreadsheet ingestion"""

from .ingestor import (
    SpreadsheetIngestor, extract_blocks, find_header_row, is_droppable_mark
)
from .identity import identity, identities

__all__ = [
    "SpreadsheetIngestor",
    "extract_blocks",
    "find_header_row",
    "is_droppable_mark",
    "identity",
    "identities",
]
