"""Tests for DefaultKeyBuilder."""

from datetime import datetime

import pytest

from cachesql.infrastructure.key_builders.default import DefaultKeyBuilder


class TestDefaultKeyBuilder:
    """Tests for DefaultKeyBuilder."""

    @pytest.fixture
    def key_builder(self) -> DefaultKeyBuilder:
        """Create a key builder for testing."""
        return DefaultKeyBuilder(prefix="test")

    def test_build_basic_key(self, key_builder: DefaultKeyBuilder) -> None:
        """Test building a basic cache key."""
        key = key_builder.build("SELECT * FROM person", ())

        assert key.startswith("test:")
        assert len(key) == len("test:") + 64

    def test_keys_have_fixed_length(self, key_builder: DefaultKeyBuilder) -> None:
        """Test the fingerprint length does not depend on the query."""
        short = key_builder.build("SELECT 1", ())
        sql = "SELECT * FROM person WHERE " + " OR ".join(["id = ?"] * 50)
        long = key_builder.build(sql, tuple(range(50)))

        assert len(short) == len(long)

    def test_same_query_same_key(self, key_builder: DefaultKeyBuilder) -> None:
        """Test that same text and parameters produce same key."""
        key1 = key_builder.build("SELECT * FROM person WHERE id = ?", (1,))
        key2 = key_builder.build("SELECT * FROM person WHERE id = ?", [1])

        assert key1 == key2

    def test_different_parameters_different_key(
        self, key_builder: DefaultKeyBuilder
    ) -> None:
        """Test that different parameter values produce different keys."""
        key1 = key_builder.build("SELECT * FROM person WHERE id = ?", (1,))
        key2 = key_builder.build("SELECT * FROM person WHERE id = ?", (2,))

        assert key1 != key2

    def test_parameter_order_matters(self, key_builder: DefaultKeyBuilder) -> None:
        """Test positional parameters are hashed in order."""
        sql = "SELECT * FROM person WHERE id = ? AND gender = ?"

        assert key_builder.build(sql, (1, "man")) != key_builder.build(sql, ("man", 1))

    def test_parameter_types_matter(self, key_builder: DefaultKeyBuilder) -> None:
        """Test equal text of different types is not confused."""
        sql = "SELECT * FROM person WHERE id = ?"

        assert key_builder.build(sql, (1,)) != key_builder.build(sql, ("1",))

    def test_different_text_different_key(self, key_builder: DefaultKeyBuilder) -> None:
        """Test that different SQL text produces different keys."""
        key1 = key_builder.build("SELECT id FROM person", ())
        key2 = key_builder.build("SELECT gender FROM person", ())

        assert key1 != key2

    def test_variant_is_part_of_key(self, key_builder: DefaultKeyBuilder) -> None:
        """Test result shapes are cached separately."""
        key1 = key_builder.build("SELECT * FROM person", (), "all")
        key2 = key_builder.build("SELECT * FROM person", (), "first")

        assert key1 != key2

    def test_non_json_parameters(self, key_builder: DefaultKeyBuilder) -> None:
        """Test datetime and bytes parameters hash deterministically."""
        params = (datetime(2024, 1, 15, 10, 30), b"\x00\x01")

        key1 = key_builder.build("SELECT ?, ?", params)
        key2 = key_builder.build("SELECT ?, ?", params)

        assert key1 == key2

    def test_prefix_property(self) -> None:
        """Test default prefix."""
        assert DefaultKeyBuilder().prefix == "cachesql"
