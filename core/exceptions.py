"""Custom exceptions for blockopt"""

from typing import List, Optional


class BlockOptError(Exception):
    """Base exception for all blockopt errors"""
    pass


class ValidationError(BlockOptError):
    """Input the operator can correct"""
    def __init__(self, message: str, row: int = None, column: str = None):
        super().__init__(message)
        self.row = row
        self.column = column


class IngestionError(ValidationError):
    """Error turning an uploaded file into blocks"""
    def __init__(self, message: str, file_name: str = None):
        super().__init__(message)
        self.file_name = file_name


class UnsupportedFormat(IngestionError):
    """File extension or content type is not a spreadsheet"""
    pass


class EmptyDocument(IngestionError):
    """File has no data rows"""
    pass


class NoValidRows(IngestionError):
    """Every row was filtered out"""
    pass


class DuplicateMarkError(IngestionError):
    """The same mark appears on more than one row"""
    def __init__(self, marks: List[str], file_name: str = None):
        super().__init__(
            f"Duplicate marks in file: {', '.join(marks)}",
            file_name
        )
        self.marks = marks


class InvalidStockDescriptor(ValidationError):
    """Stock descriptor is not three positive integers"""
    def __init__(self, descriptor: str, reason: str = "expected W×H×L"):
        super().__init__(f"Invalid stock descriptor {descriptor!r}: {reason}")
        self.descriptor = descriptor


class SelectionError(ValidationError):
    """Selection does not match the ingested blocks"""
    pass


class AuthError(BlockOptError):
    """Authentication error"""
    pass


class RefreshFailure(AuthError):
    """Access token could not be renewed; the session is gone"""
    pass


class SessionEndedError(AuthError):
    """Session was cleared or replaced while a call was outstanding"""
    pass


class NetworkError(BlockOptError):
    """Transport failure talking to the service"""
    def __init__(self, message: str, operation: str = None):
        super().__init__(f"{operation}: {message}" if operation else message)
        self.operation = operation


class UpstreamError(BlockOptError):
    """Non-success response not attributable to auth"""
    def __init__(
        self,
        message: str,
        operation: str = None,
        status_code: Optional[int] = None,
        detail: Optional[str] = None
    ):
        super().__init__(message)
        self.operation = operation
        self.status_code = status_code
        self.detail = detail


class SubmissionInProgress(BlockOptError):
    """An optimization is already running"""
    pass


class SubmissionDiscarded(BlockOptError):
    """Result dropped because the blocks or the session changed meanwhile"""
    pass
