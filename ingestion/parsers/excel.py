"""Excel file parser"""

import io
from typing import Any, List

import pandas as pd

from .base import FileParser


class ExcelParser(FileParser):
    """Parser for Excel files (.xlsx, .xls); only the first sheet is read"""
    
    @property
    def supported_extensions(self) -> List[str]:
        return [".xlsx", ".xls"]
    
    def read_rows(self, content: bytes) -> list[list[Any]]:
        """Read the first sheet as raw rows, no header inference"""
        df = pd.read_excel(
            io.BytesIO(content),
            sheet_name=0,
            header=None,
            dtype=object,
        )
        
        rows = []
        for values in df.itertuples(index=False, name=None):
            cells = [self.clean_cell(value) for value in values]
            # Trailing blanks come from other rows being wider
            while cells and cells[-1] is None:
                cells.pop()
            rows.append(cells)
        return rows
