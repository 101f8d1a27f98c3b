"""Prompt templates and word counting for the word count benchmark."""

import re


TOPICS = [
    "the importance of technology in education",
    "the benefits of regular exercise",
    "the impact of climate change",
    "the future of artificial intelligence",
    "the value of continuous learning",
]

PROMPT_TEMPLATE = (
    "Write exactly {target_words} words about {topic}. "
    "Count carefully and ensure your response contains exactly {target_words} words, "
    "no more and no less."
)

# Output budget per requested word; generous so truncation never shortens a response
TOKENS_PER_TARGET_WORD = 10

# A word is a run of letters, optionally continuing with apostrophes or hyphens
_WORD_PATTERN = re.compile(r"[^\W\d_](?:[^\W\d_]|['\-])*")


def build_prompt(target_words: int, topic: str) -> str:
    """
    Build the instruction sent to the model.

    Args:
        target_words: Exact number of words requested
        topic: Subject the model should write about

    Returns:
        Formatted prompt
    """
    return PROMPT_TEMPLATE.format(target_words=target_words, topic=topic)


def max_output_tokens_for(target_words: int) -> int:
    """Upper bound on generated tokens for a given target."""
    return target_words * TOKENS_PER_TARGET_WORD


def count_words(text: str) -> int:
    """
    Count words in a response.

    Digits and punctuation act as separators, so "well-known" and "don't"
    are one word each while "42" is not a word at all. Every model's output
    is measured with this same function.
    """
    if not text:
        return 0
    return len(_WORD_PATTERN.findall(text))
