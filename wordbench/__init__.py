"""Word Count Benchmark - measures how exactly LLMs follow word count instructions."""

from .catalog import ModelCatalog, ModelEntry, Provider, UnknownModel
from .llm_interface import LLMProvider, ProviderError, get_provider
from .metrics import Trial, WordCountResult, ModelResult
from .trial import TrialRunner

__version__ = "0.1.0"

__all__ = [
    "ModelCatalog",
    "ModelEntry",
    "Provider",
    "UnknownModel",
    "LLMProvider",
    "ProviderError",
    "get_provider",
    "Trial",
    "WordCountResult",
    "ModelResult",
    "TrialRunner",
]
