"""Calls to the optimization service"""

import logging
from pathlib import PurePosixPath
from typing import Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from config import settings
from core.enums import BlockField
from core.exceptions import UpstreamError
from core.models import (
    Block, IngestionResult, OptimizationRequest, OptimizationResult
)
from auth.client import AuthenticatedClient
from ingestion import SpreadsheetIngestor, is_droppable_mark


logger = logging.getLogger(__name__)

UPLOAD_PATH = "/api/upload"
OPTIMIZE_PATH = "/api/configurations/top3/"
VISUALIZATION_PATH = "/api/visualizations/{name}"


class OptimizerAPI:
    """Upload, optimize and visualization endpoints"""

    def __init__(
        self,
        client: AuthenticatedClient,
        ingestor: Optional[SpreadsheetIngestor] = None
    ):
        self.client = client
        self.ingestor = ingestor or SpreadsheetIngestor()

    async def upload(self, file_name: str, content: bytes) -> IngestionResult:
        """
        Have the service parse a spreadsheet

        Raises:
            UnsupportedFormat: Extension is not a spreadsheet
            UpstreamError: Service refused the file
        """
        self.ingestor.resolve_extension(file_name)

        response = await self.client.post(
            UPLOAD_PATH,
            operation="upload",
            files={"file": (file_name, content)},
        )
        body = self._json(response, "upload", expect_ok=False)

        if not response.is_success or not body.get("success"):
            message = body.get("error") or f"Upload failed: HTTP {response.status_code}"
            raise UpstreamError(
                message,
                operation="upload",
                status_code=response.status_code,
                detail=body.get("error")
            )

        try:
            blocks = [Block.model_validate(row) for row in body.get("data") or []]
        except PydanticValidationError as e:
            raise UpstreamError(f"Upload returned malformed rows: {e}", operation="upload") from e

        kept = [block for block in blocks if not is_droppable_mark(block.mark)]
        dropped = len(blocks) - len(kept)
        blocks = kept
        if self.ingestor.reject_duplicates:
            self.ingestor.check_duplicates(blocks, file_name)

        return IngestionResult(
            blocks=blocks,
            total_rows=len(blocks),
            dropped_rows=dropped,
            headers=body.get("headers") or [field.value for field in BlockField],
            file_name=file_name,
        )

    async def optimize(self, request: OptimizationRequest) -> OptimizationResult:
        """Submit blocks and get the top ranked cutting configurations"""
        logger.info(
            "Submitting %d parts against %s stock",
            len(request.parts), request.stock_dimensions
        )
        response = await self.client.post(
            OPTIMIZE_PATH,
            operation="optimize",
            json=request.model_dump(),
            timeout=settings.API_TIMEOUT,
        )
        body = self._json(response, "optimize")

        try:
            return OptimizationResult.model_validate(body)
        except PydanticValidationError as e:
            raise UpstreamError(f"Unexpected optimize response: {e}", operation="optimize") from e

    async def fetch_visualization(self, name: str) -> str:
        """Get the HTML document of a configuration's visualization"""
        clean_name = visualization_name(name)
        response = await self.client.get(
            VISUALIZATION_PATH.format(name=clean_name),
            operation="visualization",
            headers={"Accept": "text/html"},
            timeout=settings.VISUALIZATION_TIMEOUT,
        )

        if response.status_code == httpx.codes.NOT_FOUND:
            raise UpstreamError(
                f"Visualization file not found: {clean_name}",
                operation="visualization",
                status_code=response.status_code,
            )
        if not response.is_success:
            raise UpstreamError(
                f"Failed to load visualization: {response.status_code} {response.reason_phrase}",
                operation="visualization",
                status_code=response.status_code,
                detail=response.text,
            )
        return response.text

    @staticmethod
    def _json(response: httpx.Response, operation: str, expect_ok: bool = True) -> dict:
        if expect_ok and not response.is_success:
            raise UpstreamError(
                f"{operation} failed: {response.status_code} {response.reason_phrase}",
                operation=operation,
                status_code=response.status_code,
                detail=response.text,
            )
        try:
            body = response.json()
        except ValueError as e:
            raise UpstreamError(
                f"{operation} returned invalid JSON",
                operation=operation,
                status_code=response.status_code,
                detail=response.text,
            ) from e
        if not isinstance(body, dict):
            raise UpstreamError(f"{operation} returned unexpected JSON", operation=operation)
        return body


def visualization_name(name: str) -> str:
    """Strip a ``visualizations/`` prefix and any directories from a file name"""
    name = name.strip()
    if name.startswith("visualizations/"):
        name = name[len("visualizations/"):]
    return PurePosixPath(name).name or name
