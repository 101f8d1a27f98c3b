"""Tests for the provider adapters."""

from unittest.mock import Mock

import pytest

from wordbench.catalog import Provider
from wordbench.llm_interface import (
    AnthropicProvider,
    GoogleProvider,
    MockProvider,
    OpenAIProvider,
    ProviderError,
    get_api_key,
    get_provider,
)
from wordbench.prompts import build_prompt, count_words


class TestOpenAIProvider:
    """Tests for OpenAIProvider with a mocked client."""

    def test_complete(self):
        """Test a chat completion request."""
        provider = OpenAIProvider("gpt-4o", api_key="test-key")
        client = Mock()
        client.chat.completions.create.return_value = Mock(
            choices=[Mock(message=Mock(content="five words right here now"))]
        )
        provider._client = client

        text = provider.complete("prompt", max_output_tokens=100, temperature=0.3)

        assert text == "five words right here now"
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["max_completion_tokens"] == 100
        assert kwargs["temperature"] == 0.3
        assert kwargs["messages"] == [{"role": "user", "content": "prompt"}]

    def test_sdk_error_wrapped(self):
        """Test that SDK exceptions become ProviderError."""
        provider = OpenAIProvider("gpt-4o", api_key="test-key")
        provider._client = Mock()
        provider._client.chat.completions.create.side_effect = RuntimeError("429 Too Many Requests")

        with pytest.raises(ProviderError) as exc_info:
            provider.complete("prompt", 100, 0.7)

        assert exc_info.value.provider == "openai"
        assert "429" in str(exc_info.value)

    def test_empty_content(self):
        """Test that a missing message body is an error."""
        provider = OpenAIProvider("gpt-4o", api_key="test-key")
        provider._client = Mock()
        provider._client.chat.completions.create.return_value = Mock(
            choices=[Mock(message=Mock(content=None))]
        )

        with pytest.raises(ProviderError, match="empty response"):
            provider.complete("prompt", 100, 0.7)

    def test_blank_content(self):
        """Test that a blank body is an error, not a zero-word answer."""
        provider = OpenAIProvider("gpt-5-nano", api_key="test-key")
        provider._client = Mock()
        provider._client.chat.completions.create.return_value = Mock(
            choices=[Mock(message=Mock(content="  \n"))]
        )

        with pytest.raises(ProviderError, match="empty response"):
            provider.complete("prompt", 100, 0.7)

    def test_reasoning_model_omits_temperature(self):
        """Test that gpt-5 and o-series requests leave temperature at the default."""
        provider = OpenAIProvider("gpt-5-nano", api_key="test-key")
        client = Mock()
        client.chat.completions.create.return_value = Mock(
            choices=[Mock(message=Mock(content="one two three four five"))]
        )
        provider._client = client

        assert provider.complete("prompt", max_output_tokens=50, temperature=0.3) == "one two three four five"

        kwargs = client.chat.completions.create.call_args.kwargs
        assert "temperature" not in kwargs
        assert kwargs["reasoning_effort"] == "low"
        assert kwargs["max_completion_tokens"] == 50
        assert OpenAIProvider("o3-mini", api_key="k").is_reasoning_model
        assert not OpenAIProvider("gpt-4o", api_key="k").is_reasoning_model


class TestAnthropicProvider:
    """Tests for AnthropicProvider with a mocked client."""

    def test_complete_joins_text_blocks(self):
        """Test that text blocks are concatenated."""
        provider = AnthropicProvider("claude-3-5-haiku-20241022", api_key="test-key")
        provider._client = Mock()
        provider._client.messages.create.return_value = Mock(
            content=[
                Mock(type="text", text="Hello "),
                Mock(type="tool_use"),
                Mock(type="text", text="world"),
            ]
        )

        text = provider.complete("prompt", max_output_tokens=250, temperature=0.5)

        assert text == "Hello world"
        kwargs = provider._client.messages.create.call_args.kwargs
        assert kwargs["max_tokens"] == 250
        assert kwargs["temperature"] == 0.5

    def test_no_text_blocks(self):
        """Test a response without any text."""
        provider = AnthropicProvider("claude-3-opus-20240229", api_key="test-key")
        provider._client = Mock()
        provider._client.messages.create.return_value = Mock(content=[])

        with pytest.raises(ProviderError):
            provider.complete("prompt", 100, 0.7)


class TestGoogleProvider:
    """Tests for GoogleProvider with a mocked client."""

    def test_complete(self):
        """Test a generate_content request."""
        provider = GoogleProvider("gemini-2.0-flash", api_key="test-key")
        provider._client = Mock()
        provider._client.models.generate_content.return_value = Mock(text="some words")

        text = provider.complete("prompt", max_output_tokens=100, temperature=0.0)

        assert text == "some words"
        kwargs = provider._client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-2.0-flash"
        assert kwargs["contents"] == "prompt"
        assert kwargs["config"].max_output_tokens == 100
        assert kwargs["config"].temperature == 0.0


class TestMockProvider:
    """Tests for the offline mock provider."""

    def test_exact_without_jitter(self):
        """Test that zero jitter always hits the target."""
        provider = MockProvider(jitter=0)

        text = provider.complete(build_prompt(37, "owls"), 370, 0.7)

        assert count_words(text) == 37

    def test_jitter_bounds(self):
        """Test that answers stay within the jitter window."""
        provider = MockProvider(jitter=3, seed=1)

        counts = [count_words(provider.complete(build_prompt(20, "owls"), 200, 0.7)) for _ in range(50)]

        assert all(17 <= c <= 23 for c in counts)

    def test_seeded(self):
        """Test that the same seed gives the same answers."""
        prompt = build_prompt(20, "owls")
        first = MockProvider(seed=5)
        second = MockProvider(seed=5)

        assert [first.complete(prompt, 200, 0.7) for _ in range(5)] == [
            second.complete(prompt, 200, 0.7) for _ in range(5)
        ]

    def test_prompt_without_target(self):
        """Test a prompt the mock cannot answer."""
        with pytest.raises(ProviderError):
            MockProvider().complete("Tell me a story", 100, 0.7)


class TestFactory:
    """Tests for get_provider and get_api_key."""

    def test_get_provider_types(self):
        """Test that each provider name builds the right class."""
        assert isinstance(get_provider("openai", "gpt-4o", api_key="k"), OpenAIProvider)
        assert isinstance(get_provider(Provider.ANTHROPIC, "claude", api_key="k"), AnthropicProvider)
        assert isinstance(get_provider("google", "gemini", api_key="k"), GoogleProvider)
        assert isinstance(get_provider("mock", "mock-words-1"), MockProvider)

    def test_unknown_provider(self):
        """Test an unsupported provider name."""
        with pytest.raises(ValueError, match="Unknown provider"):
            get_provider("cohere", "command")

    def test_api_key_from_environment(self, monkeypatch):
        """Test reading the key from the provider's environment variable."""
        monkeypatch.setenv("ANTHROPIC_API_KEY", "env-key")

        assert get_api_key(Provider.ANTHROPIC) == "env-key"
        assert get_api_key("anthropic", "explicit") == "explicit"

    def test_missing_api_key(self, monkeypatch):
        """Test that a missing key names the environment variable."""
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

        with pytest.raises(ValueError, match="OPENAI_API_KEY"):
            get_provider("openai", "gpt-4o")

    def test_provider_built_lazily(self):
        """Test that no SDK client exists until the first request."""
        provider = get_provider("openai", "gpt-4o", api_key="k")

        assert provider._client is None
