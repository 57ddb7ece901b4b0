"""Base file parser"""

import math
from abc import ABC, abstractmethod
from typing import Any

from core.interfaces import FileParser as IFileParser


class FileParser(IFileParser, ABC):
    """Abstract base class for file parsers"""
    
    @abstractmethod
    def read_rows(self, content: bytes) -> list[list[Any]]:
        """Decode file content into rows of cells"""
        pass
    
    @staticmethod
    def clean_cell(value: Any) -> Any:
        """Normalize a decoded cell to str/int/float/None"""
        if value is None:
            return None
        # numpy scalars from pandas
        if hasattr(value, "item") and not isinstance(value, (str, bytes)):
            value = value.item()
        if isinstance(value, bool):
            return str(value).upper()
        if isinstance(value, float) and math.isnan(value):
            return None
        if isinstance(value, (int, float)):
            return value
        if isinstance(value, str):
            return value if value.strip() else None
        return str(value)
