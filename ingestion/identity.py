"""Display keys for ingested blocks"""

from typing import Iterable

from core.models import Block


def identity(block: Block, index: int) -> str:
    """
    Key a block by its mark, or ``Block-<n>`` (1-based) when it has none.

    Depends only on the block and its position in the ingested set, so the
    same block always yields the same key for the lifetime of that set.
    """
    if block.mark:
        return block.mark
    return f"Block-{index + 1}"


def identities(blocks: Iterable[Block]) -> list[str]:
    """Keys for a whole ingested set, in order"""
    return [identity(block, index) for index, block in enumerate(blocks)]
