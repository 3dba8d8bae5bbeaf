"""Tests for recursive structure pruning and the structure optimizer."""

import copy

import pytest

from lens_mcp.response_optimizer.pruning import (
    PRUNED_FIELD_GROUPS,
    PRUNED_FIELDS,
    is_pruned_field,
)
from lens_mcp.response_optimizer.structure_optimizer import (
    StructureOptimizer,
    prune_structure,
    serialized_size,
)


@pytest.fixture
def large_envelope(raw_post):
    """A page of posts well above a small token target."""
    items = []
    for i in range(20):
        post = copy.deepcopy(raw_post)
        post["id"] = f"{i:064d}"
        items.append(post)
    return {"items": items, "pageInfo": {"prev": None, "next": "cursor-2", "hasNext": True}}


class TestPrunedFields:
    """Test the pruning denylist."""

    def test_union_of_groups(self):
        for fields in PRUNED_FIELD_GROUPS.values():
            assert fields <= PRUNED_FIELDS

    def test_known_fields(self):
        assert is_pruned_field("__typename")
        assert is_pruned_field("pageInfo")
        assert is_pruned_field("coverPicture")
        assert is_pruned_field("txHash")
        assert not is_pruned_field("content")
        assert not is_pruned_field("items")
        assert not is_pruned_field("address")


class TestPruneStructure:
    """Test prune_structure."""

    def test_drops_denylisted_and_empty_values(self):
        value = {"name": "x", "__typename": "Thing", "bio": "", "extra": None, "score": 0}

        assert prune_structure(value) == {"name": "x", "score": 0}

    def test_empty_nested_objects_are_dropped(self):
        value = {"name": "x", "nested": {"__typename": "Empty", "url": "https://x"}}

        assert prune_structure(value) == {"name": "x"}

    def test_empty_arrays_are_kept(self):
        assert prune_structure({"name": "x", "tags": []}) == {"name": "x", "tags": []}

    def test_array_elements_are_never_dropped(self):
        value = [{"__typename": "A"}, None, "", {"name": "b"}]

        assert prune_structure(value) == [{}, None, "", {"name": "b"}]

    def test_entities_inside_arrays_are_reduced(self, raw_post):
        pruned = prune_structure({"items": [raw_post]})

        assert pruned["items"][0]["type"] == "post"
        assert pruned["items"][0]["content"] == "gm Lens"
        assert "slug" not in pruned["items"][0]

    def test_input_not_mutated(self, raw_post):
        value = {"items": [raw_post], "pageInfo": {"next": None}}
        before = copy.deepcopy(value)

        prune_structure(value)

        assert value == before


class TestStructureOptimizer:
    """Test StructureOptimizer.optimize."""

    @pytest.fixture
    def optimizer(self):
        return StructureOptimizer()

    def test_small_payload_returned_unchanged(self, optimizer, raw_post):
        value = {"items": [raw_post]}

        assert optimizer.optimize(value, target_tokens=15000) is value

    def test_scalars_returned_unchanged(self, optimizer):
        assert optimizer.optimize("text", target_tokens=1) == "text"
        assert optimizer.optimize(None, target_tokens=1) is None

    def test_large_payload_is_reduced(self, optimizer, large_envelope):
        optimized = optimizer.optimize(large_envelope, target_tokens=100)

        assert serialized_size(optimized) < serialized_size(large_envelope)
        assert "pageInfo" not in optimized

    def test_no_element_loss(self, optimizer, large_envelope):
        optimized = optimizer.optimize(large_envelope, target_tokens=100)

        assert len(optimized["items"]) == len(large_envelope["items"])
        assert [item["id"] for item in optimized["items"]] == [
            item["id"] for item in large_envelope["items"]
        ]

    def test_idempotent(self, optimizer, large_envelope):
        once = optimizer.optimize(large_envelope, target_tokens=100)

        assert optimizer.optimize(once, target_tokens=100) == once

    def test_never_larger_than_input(self, optimizer):
        # Reducing these posts adds a type tag, so pruning would grow them
        value = [{"id": "p", "content": "c"}] * 50

        optimized = optimizer.optimize(value, target_tokens=1)

        assert serialized_size(optimized) <= serialized_size(value)
