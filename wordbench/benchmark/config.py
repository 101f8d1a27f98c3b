"""Configuration classes for benchmarking."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import json

from ..catalog import ModelCatalog

MIN_WORD_COUNT = 5
MAX_WORD_COUNT = 500
MIN_TRIALS = 1
MAX_TRIALS = 50
MIN_TEMPERATURE = 0.0
MAX_TEMPERATURE = 1.0

WORD_COUNT_PRESETS: dict[str, tuple[int, ...]] = {
    "quick": (10, 25, 50),
    "standard": (10, 25, 50, 100, 200),
    "comprehensive": (10, 25, 50, 75, 100, 150, 200, 300),
}


class InvalidConfiguration(ValueError):
    """The benchmark configuration cannot be run."""


def _is_int(value) -> bool:
    # bool is an int subclass but never a valid count
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_word_counts(value: str) -> tuple[int, ...]:
    """
    Parse a comma-separated list of word counts.

    Args:
        value: String like "10,25,50"

    Returns:
        Tuple of integers in the given order
    """
    counts = []
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            counts.append(int(part))
        except ValueError:
            raise InvalidConfiguration(f"All word counts must be numbers. Got: {part!r}") from None
    return tuple(counts)


@dataclass(frozen=True)
class BenchmarkConfig:
    """Configuration for the entire benchmark suite; fixed for the length of a run."""

    models: tuple[str, ...]
    word_counts: tuple[int, ...]
    trials_per_word_count: int = 10
    temperature: float = 0.7
    seed: Optional[int] = None  # For reproducible topic selection

    def __post_init__(self):
        # Accept lists from callers while keeping the stored sequences immutable
        object.__setattr__(self, "models", tuple(self.models))
        object.__setattr__(self, "word_counts", tuple(self.word_counts))

    @property
    def total_trials(self) -> int:
        return len(self.models) * len(self.word_counts) * self.trials_per_word_count

    def validate(self, catalog: Optional[ModelCatalog] = None) -> None:
        """
        Check the configuration before a run.

        Args:
            catalog: When given, every model must be present in it

        Raises:
            InvalidConfiguration: On empty selections or out-of-range values
            UnknownModel: If a model is missing from the catalog
        """
        if not self.models:
            raise InvalidConfiguration("No models selected")
        if not self.word_counts:
            raise InvalidConfiguration("No word counts selected")
        if not all(isinstance(model, str) for model in self.models):
            raise InvalidConfiguration(f"Model identifiers must be strings. Got: {list(self.models)}")
        if not _is_int(self.trials_per_word_count):
            raise InvalidConfiguration(
                f"Trials per word count must be a whole number. Got: {self.trials_per_word_count!r}"
            )
        if not _is_number(self.temperature):
            raise InvalidConfiguration(f"Temperature must be a number. Got: {self.temperature!r}")
        if self.trials_per_word_count < MIN_TRIALS:
            raise InvalidConfiguration(f"At least {MIN_TRIALS} trial required")
        if self.trials_per_word_count > MAX_TRIALS:
            raise InvalidConfiguration(f"Maximum {MAX_TRIALS} trials allowed")
        if not MIN_TEMPERATURE <= self.temperature <= MAX_TEMPERATURE:
            raise InvalidConfiguration(
                f"Temperature must be between {MIN_TEMPERATURE} and {MAX_TEMPERATURE}. Got: {self.temperature}"
            )

        for count in self.word_counts:
            if not _is_int(count):
                raise InvalidConfiguration(f"Word counts must be whole numbers. Got: {count!r}")
            if count < MIN_WORD_COUNT:
                raise InvalidConfiguration(f"Word counts must be at least {MIN_WORD_COUNT}. Got: {count}")
            if count > MAX_WORD_COUNT:
                raise InvalidConfiguration(f"Maximum {MAX_WORD_COUNT} words allowed. Got: {count}")

        if len(set(self.word_counts)) != len(self.word_counts):
            raise InvalidConfiguration(f"Duplicate word counts: {list(self.word_counts)}")
        if len(set(self.models)) != len(self.models):
            raise InvalidConfiguration(f"Duplicate models: {list(self.models)}")

        if catalog is not None:
            catalog.resolve_all(self.models)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "models": list(self.models),
            "word_counts": list(self.word_counts),
            "trials_per_word_count": self.trials_per_word_count,
            "temperature": self.temperature,
            "seed": self.seed,
        }

    def save(self, path: str | Path) -> None:
        """Save configuration to JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def from_dict(cls, data: dict) -> "BenchmarkConfig":
        """Create from dictionary."""
        word_counts = data.get("word_counts", WORD_COUNT_PRESETS["standard"])
        if isinstance(word_counts, str):
            word_counts = WORD_COUNT_PRESETS.get(word_counts) or parse_word_counts(word_counts)

        return cls(
            models=tuple(data.get("models", [])),
            word_counts=tuple(word_counts),
            trials_per_word_count=data.get("trials_per_word_count", 10),
            temperature=data.get("temperature", 0.7),
            seed=data.get("seed"),
        )

    @classmethod
    def load(cls, path: str | Path) -> "BenchmarkConfig":
        """Load configuration from JSON file."""
        with open(path) as f:
            data = json.load(f)
        return cls.from_dict(data)
