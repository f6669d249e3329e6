"""Closed set of supported AI vendors and their static per-vendor facts."""

from typing import Optional

PROVIDER_NAMES = (
    "openai",
    "google",
    "anthropic",
    "mistral",
    "meta",
    "cohere",
    "huggingface",
    "perplexity",
    "openrouter",
    "xai",
    "groq",
    "codestral",
)

DISPLAY_NAMES = {
    "openai": "OpenAI",
    "google": "Google Gemini",
    "anthropic": "Anthropic",
    "mistral": "Mistral AI",
    "meta": "Meta AI",
    "cohere": "Cohere",
    "huggingface": "Hugging Face",
    "perplexity": "Perplexity AI",
    "openrouter": "OpenRouter",
    "xai": "Grok (xAI)",
    "groq": "Groq",
    "codestral": "Codestral (Mistral)",
}

DEFAULT_BASE_URLS = {
    "openai": "https://api.openai.com/v1",
    "google": "https://generativelanguage.googleapis.com/v1",
    "anthropic": "https://api.anthropic.com",
    "mistral": "https://api.mistral.ai/v1",
    "meta": "https://api.llama-api.com",
    "cohere": "https://api.cohere.ai/v1",
    "huggingface": "https://api-inference.huggingface.co",
    "perplexity": "https://api.perplexity.ai",
    "openrouter": "https://openrouter.ai/api/v1",
    "xai": "https://api.x.ai/v1",
    "groq": "https://api.groq.com/openai/v1",
    "codestral": "https://codestral.mistral.ai/v1",
}

PROVIDER_STATUSES = ("configured", "ready", "error")

CHAT_ROLES = ("user", "assistant", "system")


def display_name_for(provider_name: str) -> str:
    """Human-readable vendor name, falling back to a capitalized identifier."""
    return DISPLAY_NAMES.get(provider_name, provider_name.capitalize())


def resolve_base_url(provider_name: str, override: Optional[str] = None) -> str:
    """Return the override when set, else the vendor default, without a trailing slash."""
    base_url = override or DEFAULT_BASE_URLS.get(provider_name) or ""
    return base_url.rstrip("/")
