"""File parsers"""

from .base import FileParser
from .excel import ExcelParser
from .csv import CSVParser

__all__ = ["FileParser", "ExcelParser", "CSVParser"]
