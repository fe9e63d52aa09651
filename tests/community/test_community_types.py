"""Tests for community detection options and result models."""

import pytest
from pydantic import ValidationError

from kgraph.community.types import (
    Community,
    CommunityAssignment,
    CommunityDetectionOptions,
    CommunityDetectionResult,
)


class TestCommunityDetectionOptions:
    """Test option defaults."""

    def test_defaults(self):
        """Every field has a documented default."""
        options = CommunityDetectionOptions.default()
        assert options.resolution == 1.0
        assert options.max_iterations == 10
        assert options.min_modularity_gain == 0.0001
        assert options.use_weights is True
        assert options.default_weight == 1.0
        assert options.random_seed == 42
        assert options.randomize_order is True


class TestCommunityModels:
    """Test result models."""

    def test_size_is_member_count(self):
        """Size is derived from members."""
        community = Community(id=0, members=["a", "b"])
        assert community.size == 2
        assert community.model_dump()["size"] == 2

    def test_empty_community_rejected(self):
        """Communities need at least one member."""
        with pytest.raises(ValidationError):
            Community(id=0, members=[])

    def test_negative_community_id_rejected(self):
        """Community ids are non-negative."""
        with pytest.raises(ValidationError):
            CommunityAssignment(node_id="a", community_id=-1)

    def test_result_lookups(self):
        """community_of and members_of resolve through the result."""
        result = CommunityDetectionResult(
            assignments={
                "a": CommunityAssignment(node_id="a", community_id=0),
                "b": CommunityAssignment(node_id="b", community_id=1),
            },
            communities=[Community(id=0, members=["a"]), Community(id=1, members=["b"])],
        )
        assert result.community_count == 2
        assert result.community_of("b") == 1
        assert result.community_of("zzz") is None
        assert result.members_of(0) == ["a"]
        assert result.members_of(7) == []
