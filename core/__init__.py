"""Core abstractions for blockopt"""

from .models import *
from .enums import *
from .exceptions import *
from .interfaces import *

__all__ = [
    # Models
    "CredentialPair",
    "Block",
    "IngestionResult",
    "StockDimensions",
    "PartSpec",
    "OptimizationRequest",
    "Configuration",
    "OptimizationResult",
    # Enums
    "SessionState",
    "BlockField",
    # Exceptions
    "BlockOptError",
    "ValidationError",
    "IngestionError",
    "UnsupportedFormat",
    "EmptyDocument",
    "NoValidRows",
    "DuplicateMarkError",
    "InvalidStockDescriptor",
    "SelectionError",
    "AuthError",
    "RefreshFailure",
    "SessionEndedError",
    "NetworkError",
    "UpstreamError",
    "SubmissionInProgress",
    "SubmissionDiscarded",
    # Interfaces
    "FileParser",
    "KeyValueStore",
]
