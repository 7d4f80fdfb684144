# link2app/ai/llm.py
from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List, Optional

from link2app.ai.providers import (
    ConnectionStatus,
    GenerationRequest,
    OllamaClient,
    StreamUpdate,
    client_for,
)
from link2app.models import Provider
from link2app.settings import Settings


def build_request(
    prompt: str,
    provider: Provider,
    settings: Settings,
    *,
    system: Optional[str] = None,
    model: Optional[str] = None,
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
) -> GenerationRequest:
    if not prompt or not prompt.strip():
        raise ValueError("prompt must not be empty")
    return GenerationRequest(
        prompt=prompt,
        model=model or settings.model_for(provider),
        temperature=settings.LLM_TEMPERATURE if temperature is None else temperature,
        max_tokens=settings.LLM_MAX_TOKENS if max_tokens is None else max_tokens,
        system=system,
    )


# -----------------------
# Main entry points
# -----------------------
def generate(
    prompt: str,
    provider: Optional[Provider | str],
    settings: Settings,
    *,
    system: Optional[str] = None,
    model: Optional[str] = None,
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
    session: Any = None,
) -> str:
    """
    One blocking, non-streaming completion against the selected provider:
      - openai        (api.openai.com, bearer token)
      - openai_compat (any OpenAI-compatible /v1 host, NVIDIA by default)
      - ollama        (native /api/generate)
    Returns the generated text with surrounding whitespace trimmed.

    Raises MissingCredentialError before any network call when the provider is
    not configured, TransportError when the host cannot be reached,
    ProviderError on a non-2xx answer and InvalidResponseError when the body
    has no text where the provider puts it. Nothing is retried.
    """
    client = client_for(provider or settings.LLM_PROVIDER, settings, session=session)
    req = build_request(
        prompt, client.provider, settings,
        system=system, model=model, temperature=temperature, max_tokens=max_tokens,
    )
    client.require_credentials()
    return client.complete(req)


def generate_stream(
    prompt: str,
    provider: Optional[Provider | str],
    settings: Settings,
    *,
    system: Optional[str] = None,
    model: Optional[str] = None,
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
    session: Any = None,
) -> Iterator[StreamUpdate]:
    """
    Same contract as generate(), as a sequence of partial-text updates.
    Prompt and credentials are validated here, before the iterator is returned.
    """
    client = client_for(provider or settings.LLM_PROVIDER, settings, session=session)
    req = build_request(
        prompt, client.provider, settings,
        system=system, model=model, temperature=temperature, max_tokens=max_tokens,
    )
    client.require_credentials()
    return client.stream(req)


def collect_stream(updates: Iterable[StreamUpdate]) -> str:
    text = ""
    for update in updates:
        text = update.text
    return text.strip()


# -----------------------
# Local model inspection / connection checks
# -----------------------
def list_local_models(settings: Settings, session: Any = None) -> List[Dict[str, Any]]:
    return OllamaClient(settings, session=session).list_models()


def local_model_names(settings: Settings, session: Any = None) -> List[str]:
    return [m["name"] for m in list_local_models(settings, session=session)]


def check_connection(
    provider: Optional[Provider | str], settings: Settings, session: Any = None
) -> ConnectionStatus:
    return client_for(provider or settings.LLM_PROVIDER, settings, session=session).check_connection()


__all__ = [
    "build_request",
    "generate",
    "generate_stream",
    "collect_stream",
    "list_local_models",
    "local_model_names",
    "check_connection",
]
