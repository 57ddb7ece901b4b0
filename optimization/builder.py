"""Build optimization requests from selected blocks"""

import math
import re
from typing import Any, Iterable, Optional, Union

from config import settings
from core.enums import BlockField
from core.exceptions import InvalidStockDescriptor
from core.models import Block, OptimizationRequest, PartSpec, StockDimensions
from ingestion.identity import identity


_DESCRIPTOR = re.compile(r"^\s*(\d+)\s*[×xX*]\s*(\d+)\s*[×xX*]\s*(\d+)\s*$")
_NUMBER = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")

# Request field -> spreadsheet column
PART_FIELDS = {
    "W1": BlockField.W1,
    "W2": BlockField.W2,
    "D": BlockField.LENGTH,
    "thickness": BlockField.THICKNESS,
    "alpha": BlockField.ALPHA,
}


def parse_stock_descriptor(descriptor: str) -> StockDimensions:
    """
    Parse ``"W×H×L"`` into stock dimensions.

    Raises:
        InvalidStockDescriptor: Not three positive integers
    """
    match = _DESCRIPTOR.match(descriptor or "")
    if not match:
        raise InvalidStockDescriptor(descriptor)

    width, height, length = (int(part) for part in match.groups())
    if min(width, height, length) <= 0:
        raise InvalidStockDescriptor(descriptor, "dimensions must be positive")

    return StockDimensions(width=width, height=height, length=length)


def coerce_number(value: Any) -> Union[int, float]:
    """Numeric value of a cell, 0 when it is missing or not a number"""
    if value is None or isinstance(value, bool):
        return 0
    text = str(value).strip()
    if not _NUMBER.match(text):
        return 0
    number = float(text)
    if not math.isfinite(number):
        return 0
    return int(number) if number.is_integer() else number


def build_part(block: Block, index: int) -> PartSpec:
    """Request item for one block, keyed by its identity"""
    values = {name: coerce_number(block.value(field)) for name, field in PART_FIELDS.items()}
    return PartSpec(name=identity(block, index), **values)


def build_request(
    blocks: Iterable[Block],
    stock_descriptor: str,
    indices: Optional[Iterable[int]] = None,
    top_n: Optional[int] = None,
    config_params: Optional[dict[str, Any]] = None
) -> OptimizationRequest:
    """
    Map blocks plus a stock descriptor onto the optimize payload.

    Args:
        blocks: Blocks to submit
        stock_descriptor: ``"W×H×L"``
        indices: Position of each block in its ingested set, so fallback
            names match the ones shown to the operator. Defaults to
            0..n-1.
        top_n: Requested result count (defaults to settings)
        config_params: Fixed submission parameters (defaults to settings)

    Raises:
        InvalidStockDescriptor: Descriptor does not parse
    """
    stock = parse_stock_descriptor(stock_descriptor)

    blocks = list(blocks)
    indices = list(indices) if indices is not None else list(range(len(blocks)))
    if len(indices) != len(blocks):
        raise ValueError("indices must match blocks one to one")

    return OptimizationRequest(
        stock_dimensions=stock,
        parts=[build_part(block, index) for block, index in zip(blocks, indices)],
        config_params=dict(settings.CONFIG_PARAMS if config_params is None else config_params),
        top_n=settings.OPTIMIZE_TOP_N if top_n is None else top_n,
    )
