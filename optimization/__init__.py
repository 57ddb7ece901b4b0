"""Optimization requests and the service API"""

from .builder import build_request, parse_stock_descriptor, coerce_number
from .api import OptimizerAPI, visualization_name
from .workspace import Workspace

__all__ = [
    "build_request",
    "parse_stock_descriptor",
    "coerce_number",
    "OptimizerAPI",
    "visualization_name",
    "Workspace",
]
