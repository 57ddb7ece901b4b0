"""Core data models for blockopt"""

import math
from pydantic import BaseModel, Field, PositiveInt, field_validator
from typing import Optional, Any, Union

from .enums import BlockField


CellValue = Optional[Union[str, int, float]]


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value


# ─────────────────────────────────────────────────────────────
# Session
# ─────────────────────────────────────────────────────────────

class CredentialPair(BaseModel):
    """Access/refresh token pair plus the user they belong to"""
    access: str = Field(min_length=1, repr=False)
    refresh: str = Field(min_length=1, repr=False)
    subject: str = Field(min_length=1)

    class Config:
        frozen = True


# ─────────────────────────────────────────────────────────────
# Ingestion
# ─────────────────────────────────────────────────────────────

class Block(BaseModel):
    """
    One row of the requirements spreadsheet.

    Values are kept exactly as the sheet provided them (string or number);
    numeric coercion happens when a request is built.
    """
    mark: Optional[str] = Field(default=None, alias=BlockField.MARK.value)
    w1: CellValue = Field(default=None, alias=BlockField.W1.value)
    w2: CellValue = Field(default=None, alias=BlockField.W2.value)
    angle: CellValue = Field(default=None, alias=BlockField.ANGLE.value)
    length: CellValue = Field(default=None, alias=BlockField.LENGTH.value)
    thickness: CellValue = Field(default=None, alias=BlockField.THICKNESS.value)
    alpha: CellValue = Field(default=None, alias=BlockField.ALPHA.value)
    volume: CellValue = Field(default=None, alias=BlockField.VOLUME.value)
    ad: CellValue = Field(default=None, alias=BlockField.AD.value)
    unit_weight: CellValue = Field(default=None, alias=BlockField.UNIT_WEIGHT.value)
    count: CellValue = Field(default=None, alias=BlockField.COUNT.value)
    total_volume: CellValue = Field(default=None, alias=BlockField.TOTAL_VOLUME.value)
    total_weight: CellValue = Field(default=None, alias=BlockField.TOTAL_WEIGHT.value)

    class Config:
        frozen = True
        populate_by_name = True

    @field_validator("*", mode="before")
    @classmethod
    def _normalize_blank(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("mark", mode="before")
    @classmethod
    def _mark_as_text(cls, value: Any) -> Any:
        value = _blank_to_none(value)
        if value is None:
            return None
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        return str(value).strip()

    @classmethod
    def from_cells(cls, cells: list[Any]) -> "Block":
        """Map a row positionally onto the fixed column order"""
        values = {}
        for position, field in enumerate(BlockField):
            values[field.value] = cells[position] if position < len(cells) else None
        return cls.model_validate(values)

    def value(self, field: BlockField) -> CellValue:
        """Raw value of a column"""
        return getattr(self, _ATTRIBUTES[field])

    def display(self, field: BlockField) -> Any:
        """Value for display, "N/A" when the cell was empty"""
        value = self.value(field)
        return "N/A" if value is None else value


_ATTRIBUTES = dict(zip(BlockField, Block.model_fields))


class IngestionResult(BaseModel):
    """Blocks read from one file"""
    blocks: list[Block]
    header_row_index: int = 0
    total_rows: int = 0
    headers: list[str] = [field.value for field in BlockField]
    dropped_rows: int = 0
    file_name: Optional[str] = None


# ─────────────────────────────────────────────────────────────
# Optimization request / response
# ─────────────────────────────────────────────────────────────

class StockDimensions(BaseModel):
    """Raw-material block the parts are cut from"""
    width: PositiveInt
    height: PositiveInt
    length: PositiveInt

    class Config:
        frozen = True


class PartSpec(BaseModel):
    """One requested part, numeric attributes already coerced"""
    name: str
    W1: Union[int, float] = 0
    W2: Union[int, float] = 0
    D: Union[int, float] = 0
    thickness: Union[int, float] = 0
    alpha: Union[int, float] = 0


class OptimizationRequest(BaseModel):
    """Payload for the top-N configurations endpoint"""
    stock_dimensions: StockDimensions
    parts: list[PartSpec]
    config_params: dict[str, Any] = {}
    top_n: int = 3


class Configuration(BaseModel):
    """One ranked cutting configuration returned by the service"""
    rank: int
    efficiency: Optional[Union[float, str]] = None
    waste: Optional[Union[float, str]] = None
    description: Optional[str] = None
    total_parts: Optional[int] = None
    parts_breakdown: Any = None
    primary_part: Any = None
    merging_plane_order: Any = None
    visualization_file: Optional[str] = None

    class Config:
        extra = "allow"


class OptimizationResult(BaseModel):
    """Response of the top-N configurations endpoint"""
    configurations: list[Configuration] = []
