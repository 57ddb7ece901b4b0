"""Abstract base classes for blockopt components"""

from abc import ABC, abstractmethod
from typing import Any


class FileParser(ABC):
    """Turns raw file bytes into a grid of cells"""
    
    @property
    @abstractmethod
    def supported_extensions(self) -> list[str]:
        """List of supported file extensions"""
        pass
    
    @abstractmethod
    def read_rows(self, content: bytes) -> list[list[Any]]:
        """Decode file content into rows of cells"""
        pass


class KeyValueStore(ABC):
    """Client-local persistence for session fields"""
    
    @abstractmethod
    def load(self) -> dict[str, str]:
        """Return every persisted key"""
        pass
    
    @abstractmethod
    def save(self, data: dict[str, str]) -> None:
        """Replace the persisted keys with ``data`` in one write"""
        pass
