"""Tests for the model catalog."""

import pytest

from wordbench.catalog import DEFAULT_MODELS, ModelCatalog, ModelEntry, Provider, UnknownModel


class TestModelCatalog:
    """Tests for ModelCatalog lookups."""

    def test_resolve_default_model(self):
        """Test resolving a built-in identifier."""
        catalog = ModelCatalog()

        entry = catalog.resolve("claude-3-5-haiku")

        assert entry.provider is Provider.ANTHROPIC
        assert entry.model_name == "claude-3-5-haiku-20241022"
        assert entry.full_name == "anthropic/claude-3-5-haiku-20241022"

    def test_resolve_unknown_model(self):
        """Test that a missing identifier raises UnknownModel."""
        catalog = ModelCatalog()

        with pytest.raises(UnknownModel) as exc_info:
            catalog.resolve("gpt-99")

        assert exc_info.value.identifier == "gpt-99"
        assert "gpt-99" in str(exc_info.value)

    def test_unknown_model_is_key_error(self):
        """UnknownModel can be caught as a KeyError."""
        with pytest.raises(KeyError):
            ModelCatalog().resolve("nope")

    def test_custom_entries(self):
        """Test that a custom table replaces the defaults."""
        catalog = ModelCatalog({"local": ModelEntry(Provider.MOCK, "local-1")})

        assert catalog.identifiers() == ["local"]
        assert "local" in catalog
        assert "gpt-4o" not in catalog
        assert len(catalog) == 1

    def test_resolve_all_keeps_order(self):
        """Test resolving several identifiers at once."""
        catalog = ModelCatalog()

        resolved = catalog.resolve_all(["gpt-4o", "mock"])

        assert list(resolved) == ["gpt-4o", "mock"]
        assert resolved["mock"].provider is Provider.MOCK

    def test_resolve_all_fails_on_unknown(self):
        """Test that one unknown identifier fails the whole lookup."""
        with pytest.raises(UnknownModel):
            ModelCatalog().resolve_all(["gpt-4o", "missing"])

    def test_default_table_unchanged_by_instances(self):
        """Catalog instances copy the default table."""
        catalog = ModelCatalog()
        catalog._entries["extra"] = ModelEntry(Provider.MOCK, "extra")

        assert "extra" not in DEFAULT_MODELS
        assert "extra" not in ModelCatalog()
