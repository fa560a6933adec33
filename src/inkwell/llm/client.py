"""LiteLLM content-generation client.

All model calls route through this module. LiteLLM's built-in retry is used
(num_retries=3, exponential backoff).

``generate_content`` is the boundary the pipeline talks to. It never raises:
it returns either the model's raw text or a JSON error sentinel
``{"error": "..."}``, which callers detect with ``error_payload``.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any

import litellm

# Disable LiteLLM verbose logging unless explicitly enabled
litellm.suppress_debug_info = True
litellm.set_verbose = False  # type: ignore[assignment]

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Provider → env var mapping for API key validation
# ------------------------------------------------------------------

_PROVIDER_ENV: dict[str, str | None] = {
    "gemini": "GEMINI_API_KEY",
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "azure": "AZURE_API_KEY",
    "mistral": "MISTRAL_API_KEY",
    "groq": "GROQ_API_KEY",
    "ollama": None,  # Local, no key required
    "ollama_chat": None,
}


def validate_api_key(model: str) -> None:
    """Check that the required API key env var is set for *model*.

    Args:
        model: LiteLLM model string in 'provider/model' format.

    Raises:
        EnvironmentError: If the required key is missing from environment.
    """
    provider = provider_of(model)
    env_var = _PROVIDER_ENV.get(provider, f"{provider.upper()}_API_KEY")

    if env_var is None:
        return  # No key required (e.g. ollama)

    if not os.getenv(env_var):
        raise EnvironmentError(
            f"API key not found for provider '{provider}'. "
            f"Set the {env_var} environment variable."
        )


def provider_of(model: str) -> str:
    """Return the provider prefix of *model* ('openai' when there is none)."""
    return model.split("/")[0].lower() if "/" in model else "openai"


def complete(
    model: str,
    messages: list[dict],
    max_tokens: int = 8192,
    temperature: float = 0.0,
    num_retries: int = 3,
) -> str:
    """Call litellm.completion() with retry/backoff. Returns content string.

    Raises:
        litellm.exceptions.APIError: On persistent API failure after retries.
    """
    response = litellm.completion(
        model=model,
        messages=messages,
        max_tokens=max_tokens,
        temperature=temperature,
        num_retries=num_retries,
    )
    return response.choices[0].message.content or ""


def generate_content(
    model: str,
    contents: list[dict],
    system_instruction: str | None = None,
    *,
    max_tokens: int = 8192,
    temperature: float = 0.0,
) -> str:
    """Generate text for role-tagged *contents*, or return the error sentinel.

    Args:
        model: LiteLLM model string (provider/model format).
        contents: OpenAI-style message list (``{"role": ..., "content": ...}``).
        system_instruction: Optional system prompt, sent ahead of *contents*.

    Returns:
        The raw model text, or ``{"error": "..."}`` serialized as JSON when
        the key is missing, the call fails, or the model returns nothing.
    """
    messages: list[dict] = []
    if system_instruction:
        messages.append({"role": "system", "content": system_instruction})
    messages.extend(contents)

    try:
        validate_api_key(model)
    except EnvironmentError as exc:
        return error_sentinel(str(exc))

    try:
        text = complete(model, messages, max_tokens=max_tokens, temperature=temperature)
    except Exception as exc:  # LiteLLM surfaces provider errors under many types
        logger.error("Content generation with %s failed: %s", model, exc)
        return error_sentinel(f"Failed to generate content from {model}: {exc}")

    if not text.strip():
        return error_sentinel(f"{model} returned no text output.")

    logger.debug("Received %d chars from %s", len(text), model)
    return text


def error_sentinel(message: str) -> str:
    return json.dumps({"error": message})


def error_payload(text: str) -> dict[str, Any] | None:
    """Return the sentinel object if *text* is an error sentinel, else None."""
    stripped = text.strip()
    if not stripped.startswith("{"):
        return None
    try:
        obj = json.loads(stripped)
    except ValueError:
        return None
    if isinstance(obj, dict) and isinstance(obj.get("error"), str):
        return obj
    return None
