"""Registry of benchmarkable models and the provider needed to reach each one."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional


class Provider(str, Enum):
    """Provider variants a model can be served by."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"
    MOCK = "mock"


class UnknownModel(KeyError):
    """Raised when a model identifier is not in the catalog."""

    def __init__(self, identifier: str):
        super().__init__(identifier)
        self.identifier = identifier

    def __str__(self) -> str:
        return f"Unknown model: {self.identifier}"


@dataclass(frozen=True)
class ModelEntry:
    """A provider and the model name that provider expects."""

    provider: Provider
    model_name: str

    @property
    def full_name(self) -> str:
        """Get full model name as provider/model."""
        return f"{self.provider.value}/{self.model_name}"


DEFAULT_MODELS: dict[str, ModelEntry] = {
    "gpt-4o": ModelEntry(Provider.OPENAI, "gpt-4o"),
    "gpt-5-nano": ModelEntry(Provider.OPENAI, "gpt-5-nano"),
    "gpt-3.5-turbo": ModelEntry(Provider.OPENAI, "gpt-3.5-turbo"),
    "claude-3-5-sonnet": ModelEntry(Provider.ANTHROPIC, "claude-3-5-sonnet-20241022"),
    "claude-3-5-haiku": ModelEntry(Provider.ANTHROPIC, "claude-3-5-haiku-20241022"),
    "claude-3-opus": ModelEntry(Provider.ANTHROPIC, "claude-3-opus-20240229"),
    "gemini-2.0-flash": ModelEntry(Provider.GOOGLE, "gemini-2.0-flash"),
    "gemini-2.5-pro": ModelEntry(Provider.GOOGLE, "gemini-2.5-pro"),
    "mock": ModelEntry(Provider.MOCK, "mock-words-1"),
}


class ModelCatalog:
    """
    Static lookup from a model identifier to its (provider, provider model name).

    Adding a model means adding an entry to the table; no provider code changes.
    """

    def __init__(self, entries: Optional[dict[str, ModelEntry]] = None):
        self._entries = dict(DEFAULT_MODELS if entries is None else entries)

    def resolve(self, identifier: str) -> ModelEntry:
        """
        Look up a model identifier.

        Args:
            identifier: Catalog key, e.g. "claude-3-5-haiku"

        Returns:
            The ModelEntry for that identifier

        Raises:
            UnknownModel: If the identifier is not in the catalog
        """
        try:
            return self._entries[identifier]
        except KeyError:
            raise UnknownModel(identifier) from None

    def resolve_all(self, identifiers: Iterable[str]) -> dict[str, ModelEntry]:
        """Resolve several identifiers, failing on the first unknown one."""
        return {identifier: self.resolve(identifier) for identifier in identifiers}

    def identifiers(self) -> list[str]:
        """All identifiers in table order."""
        return list(self._entries)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._entries

    def __len__(self) -> int:
        return len(self._entries)
