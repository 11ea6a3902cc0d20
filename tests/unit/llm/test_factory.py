"""Tests for LLMProviderFactory."""

import pytest

from sqlscout.config import LLMSettings
from sqlscout.llm.anthropic import AnthropicProvider
from sqlscout.llm.factory import LLMProviderFactory
from sqlscout.llm.google import GoogleProvider
from sqlscout.llm.local import LocalProvider
from sqlscout.llm.openai import OpenAIProvider
from sqlscout.models.api import Credentials


@pytest.fixture
def config():
    return LLMSettings()


@pytest.mark.parametrize(
    "provider_type,expected_class,expected_model",
    [
        ("openai", OpenAIProvider, "gpt-4o-mini"),
        ("anthropic", AnthropicProvider, "claude-sonnet-4-20250514"),
        ("google", GoogleProvider, "gemini-3-pro-preview"),
    ],
)
def test_creates_hosted_provider_with_default_model(
    config, provider_type, expected_class, expected_model
):
    provider = LLMProviderFactory.create_provider(provider_type, config, api_key="key-123")

    assert isinstance(provider, expected_class)
    assert provider.model == expected_model


def test_model_override(config):
    provider = LLMProviderFactory.create_provider(
        "openai", config, api_key="key-123", model="gpt-4o"
    )
    assert provider.model == "gpt-4o"


def test_local_provider_needs_no_key(config):
    provider = LLMProviderFactory.create_provider("local", config)

    assert isinstance(provider, LocalProvider)
    assert provider.base_url == "http://localhost:11434"
    assert provider.model == "llama3.1:8b"


def test_missing_key_rejected(config):
    with pytest.raises(ValueError, match="anthropic API key is required"):
        LLMProviderFactory.create_provider("anthropic", config)


def test_unknown_provider_rejected(config):
    with pytest.raises(ValueError, match="Unknown provider type: mistral"):
        LLMProviderFactory.create_provider("mistral", config, api_key="key")


def test_create_from_credentials(config):
    credentials = Credentials(
        supabase_url="https://demo.supabase.co",
        supabase_anon_key="anon",
        llm_provider="anthropic",
        llm_model="claude-3-5-haiku-latest",
        llm_api_key="sk-ant",
    )

    provider = LLMProviderFactory.create_from_credentials(credentials, config)

    assert isinstance(provider, AnthropicProvider)
    assert provider.model == "claude-3-5-haiku-latest"
