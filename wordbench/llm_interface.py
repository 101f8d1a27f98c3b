"""LLM interface for making word count requests."""

import logging
import os
import random
import re
from abc import ABC, abstractmethod
from typing import Optional

from .catalog import Provider

logger = logging.getLogger(__name__)


API_KEY_ENV_VARS = {
    Provider.OPENAI: "OPENAI_API_KEY",
    Provider.ANTHROPIC: "ANTHROPIC_API_KEY",
    Provider.GOOGLE: "GOOGLE_API_KEY",
}


class ProviderError(Exception):
    """A completion request failed (timeout, rate limit, API error, empty response)."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.message = message


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    provider_name: str = "unknown"

    def __init__(self, model: str):
        self.model = model

    @abstractmethod
    def _request(self, prompt: str, max_output_tokens: int, temperature: float) -> Optional[str]:
        """Send the prompt to the provider and return the raw text."""

    def complete(self, prompt: str, max_output_tokens: int, temperature: float) -> str:
        """
        Generate text for a prompt.

        Args:
            prompt: User prompt
            max_output_tokens: Upper bound on generated tokens
            temperature: Sampling temperature

        Returns:
            Generated text

        Raises:
            ProviderError: If the request fails or returns no text
        """
        try:
            text = self._request(prompt, max_output_tokens, temperature)
        except ProviderError:
            raise
        except Exception as e:
            logger.debug(f"{self.provider_name} request for {self.model} failed: {e!r}")
            raise ProviderError(self.provider_name, str(e) or type(e).__name__) from e

        if text is None or not text.strip():
            raise ProviderError(self.provider_name, f"empty response from {self.model}")
        return text


class OpenAIProvider(LLMProvider):
    """OpenAI API provider (GPT-4o, etc.)."""

    provider_name = Provider.OPENAI.value

    # max_completion_tokens also covers their hidden reasoning tokens
    REASONING_MODEL_PREFIXES = ("gpt-5", "o1", "o3", "o4")

    def __init__(self, model: str, api_key: str, base_url: Optional[str] = None):
        super().__init__(model)
        self.api_key = api_key
        self.base_url = base_url
        self._client = None

    def _get_client(self):
        if self._client is None:
            from openai import OpenAI
            self._client = OpenAI(
                api_key=self.api_key,
                base_url=self.base_url
            )
        return self._client

    @property
    def is_reasoning_model(self) -> bool:
        """Reasoning models only accept the default temperature."""
        return self.model.startswith(self.REASONING_MODEL_PREFIXES)

    def _request(self, prompt: str, max_output_tokens: int, temperature: float) -> Optional[str]:
        client = self._get_client()

        kwargs = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "max_completion_tokens": max_output_tokens,
        }
        if self.is_reasoning_model:
            logger.debug(f"{self.model} does not accept temperature; sending the default")
            kwargs["reasoning_effort"] = "low"
        else:
            kwargs["temperature"] = temperature

        response = client.chat.completions.create(**kwargs)

        if not response.choices:
            return None
        return response.choices[0].message.content


class AnthropicProvider(LLMProvider):
    """Anthropic API provider (Claude, etc.)."""

    provider_name = Provider.ANTHROPIC.value

    def __init__(self, model: str, api_key: str):
        super().__init__(model)
        self.api_key = api_key
        self._client = None

    def _get_client(self):
        if self._client is None:
            import anthropic
            self._client = anthropic.Anthropic(api_key=self.api_key)
        return self._client

    def _request(self, prompt: str, max_output_tokens: int, temperature: float) -> Optional[str]:
        client = self._get_client()

        response = client.messages.create(
            model=self.model,
            max_tokens=max_output_tokens,
            temperature=temperature,
            messages=[{"role": "user", "content": prompt}]
        )

        # Concatenate text blocks; other block types carry no words
        parts = [block.text for block in response.content if getattr(block, "type", None) == "text"]
        if not parts:
            return None
        return "".join(parts)


class GoogleProvider(LLMProvider):
    """Google Gemini API provider."""

    provider_name = Provider.GOOGLE.value

    def __init__(self, model: str, api_key: str):
        super().__init__(model)
        self.api_key = api_key
        self._client = None

    def _get_client(self):
        if self._client is None:
            from google import genai
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def _request(self, prompt: str, max_output_tokens: int, temperature: float) -> Optional[str]:
        from google.genai import types

        client = self._get_client()

        response = client.models.generate_content(
            model=self.model,
            contents=prompt,
            config=types.GenerateContentConfig(
                max_output_tokens=max_output_tokens,
                temperature=temperature,
            ),
        )

        return response.text


class MockProvider(LLMProvider):
    """
    Offline provider that answers with filler words.

    It reads the requested word count out of the prompt and misses it by up to
    ``jitter`` words in either direction. With ``jitter=0`` every answer is an
    exact match.
    """

    provider_name = Provider.MOCK.value

    FILLER = ["lorem", "ipsum", "dolor", "sit", "amet", "consectetur", "adipiscing", "elit"]
    _TARGET_PATTERN = re.compile(r"exactly (\d+) words")

    def __init__(self, model: str = "mock-words-1", jitter: int = 2, seed: Optional[int] = None):
        super().__init__(model)
        self.jitter = jitter
        self._rng = random.Random(seed)

    def _request(self, prompt: str, max_output_tokens: int, temperature: float) -> Optional[str]:
        match = self._TARGET_PATTERN.search(prompt)
        if not match:
            raise ProviderError(self.provider_name, "prompt does not request a word count")

        target = int(match.group(1))
        offset = self._rng.randint(-self.jitter, self.jitter) if self.jitter else 0
        length = max(target + offset, 1)
        return " ".join(self.FILLER[i % len(self.FILLER)] for i in range(length))


def get_api_key(provider: Provider | str, api_key: Optional[str] = None) -> str:
    """Get the API key from the argument or the provider's environment variable."""
    if api_key:
        return api_key

    env_var = API_KEY_ENV_VARS.get(Provider(provider))
    if env_var and os.environ.get(env_var):
        return os.environ[env_var]

    raise ValueError(f"No API key for {Provider(provider).value}. Set {env_var} environment variable.")


def get_provider(
    provider: Provider | str,
    model: str,
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
) -> LLMProvider:
    """
    Factory function to get the appropriate provider.

    Args:
        provider: Provider name ('openai', 'anthropic', 'google', 'mock')
        model: Provider-side model name
        api_key: API key; read from the environment when omitted
        base_url: Optional base URL override (for OpenAI-compatible APIs)
    """
    try:
        provider = Provider(provider)
    except ValueError:
        raise ValueError(f"Unknown provider: {provider}") from None

    if provider is Provider.MOCK:
        return MockProvider(model)
    elif provider is Provider.OPENAI:
        return OpenAIProvider(model, get_api_key(provider, api_key), base_url)
    elif provider is Provider.ANTHROPIC:
        return AnthropicProvider(model, get_api_key(provider, api_key))
    else:
        return GoogleProvider(model, get_api_key(provider, api_key))
