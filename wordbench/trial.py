"""Execution of a single word count trial."""

import logging
import random
from typing import Optional, Protocol, Sequence

from .llm_interface import LLMProvider
from .metrics import Trial
from .prompts import TOPICS, build_prompt, count_words, max_output_tokens_for

logger = logging.getLogger(__name__)


class RandomSource(Protocol):
    def choice(self, seq: Sequence[str]) -> str: ...


class TrialRunner:
    """Builds a prompt, asks the model for it and measures what came back."""

    def __init__(
        self,
        rng: Optional[RandomSource] = None,
        topics: Optional[Sequence[str]] = None,
    ):
        """
        Initialize the trial runner.

        Args:
            rng: Source used to pick topics; pass a seeded random.Random for
                reproducible topic selection
            topics: Topic pool, defaults to the standard benchmark topics
        """
        self.rng = rng if rng is not None else random.Random()
        self.topics = list(topics) if topics is not None else list(TOPICS)
        if not self.topics:
            raise ValueError("Topic pool must not be empty")

    def run(
        self,
        provider: LLMProvider,
        target_words: int,
        trial_number: int,
        temperature: float,
    ) -> Trial:
        """
        Execute one trial.

        Provider failures are recorded on the returned Trial rather than
        raised; the trial is not retried.

        Args:
            provider: Completion backend for the model under test
            target_words: Exact word count requested
            trial_number: 1-based index within the (model, target) group
            temperature: Sampling temperature

        Returns:
            A successful or failed Trial
        """
        topic = self.rng.choice(self.topics)
        prompt = build_prompt(target_words, topic)

        try:
            text = provider.complete(
                prompt,
                max_output_tokens=max_output_tokens_for(target_words),
                temperature=temperature,
            )
        except Exception as e:
            logger.debug(f"Trial {trial_number} for {target_words} words failed: {e}")
            return Trial.failure(target_words, topic, trial_number, str(e) or type(e).__name__)

        return Trial.success(target_words, topic, trial_number, text, count_words(text))
