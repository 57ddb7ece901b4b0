"""CSV file parser"""

import csv
import io
from typing import Any, List

from .base import FileParser
from utils.encoding import detect_encoding


class CSVParser(FileParser):
    """Parser for delimited text files"""
    
    DELIMITERS = [',', '\t', '|', ';', ':']
    
    @property
    def supported_extensions(self) -> List[str]:
        return [".csv"]
    
    def read_rows(self, content: bytes) -> list[list[Any]]:
        """
        Read every line as a row of string cells.
        
        Rows may be ragged (a title line above the header row has fewer
        cells), so lines are split with csv.reader rather than into a
        rectangular frame.
        """
        text = content.decode(detect_encoding(content))
        delimiter = self._detect_delimiter(text)
        
        rows = []
        for cells in csv.reader(io.StringIO(text), delimiter=delimiter):
            if not cells:
                continue
            rows.append([self.clean_cell(cell) for cell in cells])
        return rows
    
    def _detect_delimiter(self, text: str) -> str:
        """Detect CSV delimiter"""
        sample = text[:4096]
        
        scores = {}
        for delim in self.DELIMITERS:
            counts = [line.count(delim) for line in sample.split('\n')[:10] if line.strip()]
            if counts and max(counts) > 0:
                avg = sum(counts) / len(counts)
                variance = sum((c - avg) ** 2 for c in counts) / len(counts)
                scores[delim] = max(counts) if variance < 2 else avg
        
        return max(scores, key=scores.get) if scores else ','
