"""Ingested blocks, the operator's selection, and the run action"""

import logging
from typing import Optional

from core.exceptions import (
    SelectionError, SubmissionDiscarded, SubmissionInProgress
)
from core.models import Block, IngestionResult, OptimizationResult
from ingestion.identity import identities
from .api import OptimizerAPI
from .builder import build_request


logger = logging.getLogger(__name__)


class Workspace:
    """
    One operator's working set.

    Loading a file replaces the blocks wholesale and clears the selection.
    A run that was submitted against an older set is discarded when it
    returns.
    """

    def __init__(self):
        self._result: Optional[IngestionResult] = None
        self._keys: list[str] = []
        self._selected: set[str] = set()
        self._revision = 0
        self._running = False

    @property
    def blocks(self) -> list[Block]:
        return list(self._result.blocks) if self._result else []

    @property
    def result(self) -> Optional[IngestionResult]:
        return self._result

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def running(self) -> bool:
        return self._running

    def load(self, result: IngestionResult) -> None:
        """Replace the blocks and drop the selection"""
        self._result = result
        self._keys = identities(result.blocks)
        self._selected = set()
        self._revision += 1
        logger.info("Loaded %d blocks (revision %d)", len(self._keys), self._revision)

    def identities(self) -> list[str]:
        return list(self._keys)

    @property
    def selected(self) -> list[str]:
        """Selected identities, in ingested order"""
        return [key for key in self._keys if key in self._selected]

    @property
    def all_selected(self) -> bool:
        return bool(self._keys) and self._selected >= set(self._keys)

    def select(self, key: str) -> None:
        if key not in self._keys:
            raise SelectionError(f"Unknown block: {key}")
        self._selected.add(key)

    def deselect(self, key: str) -> None:
        self._selected.discard(key)

    def toggle(self, key: str) -> None:
        if key in self._selected:
            self.deselect(key)
        else:
            self.select(key)

    def select_all(self) -> None:
        """Select every block, or none if every block is already selected"""
        if self.all_selected:
            self._selected = set()
        else:
            self._selected = set(self._keys)

    def clear_selection(self) -> None:
        self._selected = set()

    def search(self, term: str) -> list[str]:
        """Identities containing ``term``, case-insensitive"""
        term = (term or "").lower()
        return [key for key in self._keys if term in key.lower()]

    def selected_blocks(self) -> list[tuple[int, Block]]:
        """(index, block) for every selected block, in ingested order"""
        return [
            (index, block)
            for index, (key, block) in enumerate(zip(self._keys, self.blocks))
            if key in self._selected
        ]

    async def run(self, api: OptimizerAPI, stock_descriptor: str) -> OptimizationResult:
        """
        Submit the selected blocks for optimization.

        Raises:
            SelectionError: Nothing imported or nothing selected
            SubmissionInProgress: A run is already outstanding
            SubmissionDiscarded: New blocks were loaded before it returned
            InvalidStockDescriptor: Descriptor does not parse
        """
        if self._running:
            raise SubmissionInProgress("An optimization is already running")
        if not self._keys:
            raise SelectionError("Please import an Excel file first.")

        chosen = self.selected_blocks()
        if not chosen:
            raise SelectionError("Please select at least one block.")

        request = build_request(
            [block for _, block in chosen],
            stock_descriptor,
            indices=[index for index, _ in chosen],
        )

        revision = self._revision
        self._running = True
        try:
            result = await api.optimize(request)
        finally:
            self._running = False

        if self._revision != revision:
            logger.info("Discarding optimization result for revision %d", revision)
            raise SubmissionDiscarded("Blocks changed while the optimization was running")

        return result
