from core.models import Block
from ingestion import identities, identity


def test_mark_is_identity():
    assert identity(Block(mark="G14"), 0) == "G14"


def test_positional_fallback_is_one_based():
    block = Block(w1=5)

    assert identity(block, 0) == "Block-1"
    assert identity(block, 4) == "Block-5"


def test_identity_is_stable_and_distinct_for_unmarked_blocks():
    blocks = [Block(w1=1), Block(mark="G2"), Block(w1=1)]

    first = identities(blocks)
    second = identities(blocks)

    assert first == second == ["Block-1", "G2", "Block-3"]


def test_blank_mark_uses_fallback():
    assert identity(Block.model_validate({"MARK": "  "}), 2) == "Block-3"
