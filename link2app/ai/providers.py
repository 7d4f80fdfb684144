# link2app/ai/providers.py
"""
Provider clients for the chat/completion endpoints Link2App talks to.

Two wire shapes are supported:
  - OpenAI style  : POST {base}/chat/completions, bearer token, `messages` array,
                    text at choices[0].message.content
  - Ollama style  : POST {host}/api/generate, no auth, single `prompt` string,
                    text at `response` (newline-delimited JSON when streaming)

Clients hold no state between calls beyond the settings they were built with.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, List, Optional

import requests

from link2app.errors import (
    InvalidResponseError,
    MissingCredentialError,
    ProviderError,
    TransportError,
)
from link2app.models import Provider
from link2app.settings import Settings


# -----------------------
# Request model
# -----------------------
@dataclass
class GenerationRequest:
    prompt: str
    model: str
    temperature: float
    max_tokens: int
    system: Optional[str] = None
    stream: bool = False


@dataclass
class HTTPRequest:
    method: str
    url: str
    headers: Dict[str, str]
    payload: Optional[Dict[str, Any]] = None


@dataclass
class StreamUpdate:
    delta: str   # text carried by this fragment
    text: str    # everything received so far
    done: bool = False


@dataclass
class ConnectionStatus:
    provider: Provider
    connected: bool
    message: str
    models: List[str] = field(default_factory=list)


# -----------------------
# Request builders
# -----------------------
def build_chat_request(base_url: str, api_key: str, req: GenerationRequest) -> HTTPRequest:
    messages = []
    if req.system:
        messages.append({"role": "system", "content": req.system})
    messages.append({"role": "user", "content": req.prompt})
    return HTTPRequest(
        method="POST",
        url=f"{base_url.rstrip('/')}/chat/completions",
        headers={
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        },
        payload={
            "model": req.model,
            "messages": messages,
            "temperature": float(req.temperature),
            "max_tokens": int(req.max_tokens),
            "stream": req.stream,
        },
    )


def build_ollama_request(host: str, req: GenerationRequest, top_p: float = 0.9) -> HTTPRequest:
    prompt = req.prompt
    if req.system:
        prompt = f"{req.system}\n\nUser Request: {req.prompt}"
    return HTTPRequest(
        method="POST",
        url=f"{host.rstrip('/')}/api/generate",
        headers={"Content-Type": "application/json"},
        payload={
            "model": req.model,
            "prompt": prompt,
            "stream": req.stream,
            "options": {
                "temperature": float(req.temperature),
                "top_p": float(top_p),
                "num_predict": int(req.max_tokens),
            },
        },
    )


# -----------------------
# Response decoding
# -----------------------
def extract_chat_text(data: Any) -> str:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        raise InvalidResponseError("Response has no choices[0].message.content") from None
    if not isinstance(content, str):
        raise InvalidResponseError("choices[0].message.content is not text")
    return content


def extract_ollama_text(data: Any) -> str:
    content = data.get("response") if isinstance(data, dict) else None
    if not isinstance(content, str):
        raise InvalidResponseError("Response has no `response` text field")
    return content


# -----------------------
# Clients
# -----------------------
class ProviderClient:
    provider: Provider

    def __init__(self, settings: Settings, session: Any = None):
        self.settings = settings
        # anything with requests' get/post signature (a Session, or the module)
        self.http = session or requests

    # -------- per-provider hooks --------
    def require_credentials(self) -> None:
        raise NotImplementedError

    def build_request(self, req: GenerationRequest) -> HTTPRequest:
        raise NotImplementedError

    def extract_text(self, data: Any) -> str:
        raise NotImplementedError

    def connection_probe(self) -> HTTPRequest:
        raise NotImplementedError

    # -------- shared plumbing --------
    def complete(self, req: GenerationRequest) -> str:
        self.require_credentials()
        r = self._send(self.build_request(replace(req, stream=False)))
        self._check_status(r)
        try:
            data = r.json()
        except ValueError:
            raise InvalidResponseError(f"{self.provider.value} returned a non-JSON body") from None
        return self.extract_text(data).strip()

    def stream(self, req: GenerationRequest) -> Iterator[StreamUpdate]:
        # Providers without a line-delimited stream answer in one piece.
        text = self.complete(req)
        yield StreamUpdate(delta=text, text=text, done=True)

    def check_connection(self) -> ConnectionStatus:
        try:
            self.require_credentials()
            r = self._send(self.connection_probe())
        except (MissingCredentialError, TransportError) as e:
            return ConnectionStatus(self.provider, False, str(e))
        if r.status_code == 200:
            return ConnectionStatus(self.provider, True, "Connected successfully")
        return ConnectionStatus(self.provider, False, f"Connection failed: {r.status_code}")

    def _send(self, hreq: HTTPRequest, *, stream: bool = False) -> requests.Response:
        timeout = self.settings.LLM_REQUEST_TIMEOUT
        try:
            if hreq.method == "GET":
                return self.http.get(hreq.url, headers=hreq.headers, timeout=timeout)
            return self.http.post(
                hreq.url,
                headers=hreq.headers,
                data=json.dumps(hreq.payload),
                timeout=timeout,
                stream=stream,
            )
        except requests.RequestException as e:
            raise TransportError(f"Could not reach {self.provider.value} at {hreq.url}: {e}") from e

    def _check_status(self, r: requests.Response) -> None:
        if not 200 <= r.status_code < 300:
            raise ProviderError(r.text, status_code=r.status_code, provider=self.provider.value)


class OpenAIClient(ProviderClient):
    provider = Provider.OPENAI

    def _base_and_key(self) -> tuple[str, str]:
        return self.settings.OPENAI_BASE_URL, self.settings.OPENAI_API_KEY

    def require_credentials(self) -> None:
        base, key = self._base_and_key()
        if not key.strip():
            raise MissingCredentialError(self.provider.value, "OPENAI_API_KEY")
        if not base.strip():
            raise MissingCredentialError(self.provider.value, "OPENAI_BASE_URL")

    def build_request(self, req: GenerationRequest) -> HTTPRequest:
        base, key = self._base_and_key()
        return build_chat_request(base, key, req)

    def extract_text(self, data: Any) -> str:
        return extract_chat_text(data)

    def connection_probe(self) -> HTTPRequest:
        base, key = self._base_and_key()
        return HTTPRequest("GET", f"{base.rstrip('/')}/models", {"Authorization": f"Bearer {key}"})


class OpenAICompatClient(OpenAIClient):
    provider = Provider.OPENAI_COMPAT

    def _base_and_key(self) -> tuple[str, str]:
        return self.settings.OPENAI_COMPAT_BASE_URL, self.settings.OPENAI_COMPAT_API_KEY

    def require_credentials(self) -> None:
        base, key = self._base_and_key()
        if not base.strip():
            raise MissingCredentialError(self.provider.value, "OPENAI_COMPAT_BASE_URL")
        if not key.strip():
            raise MissingCredentialError(self.provider.value, "OPENAI_COMPAT_API_KEY")


class OllamaClient(ProviderClient):
    provider = Provider.OLLAMA

    @property
    def host(self) -> str:
        return self.settings.OLLAMA_HOST.rstrip("/")

    def require_credentials(self) -> None:
        if not self.settings.OLLAMA_HOST.strip():
            raise MissingCredentialError(self.provider.value, "OLLAMA_HOST")

    def build_request(self, req: GenerationRequest) -> HTTPRequest:
        return build_ollama_request(self.host, req, top_p=self.settings.OLLAMA_TOP_P)

    def extract_text(self, data: Any) -> str:
        return extract_ollama_text(data)

    def connection_probe(self) -> HTTPRequest:
        return HTTPRequest("GET", f"{self.host}/api/tags", {})

    def stream(self, req: GenerationRequest) -> Iterator[StreamUpdate]:
        """
        Yield one StreamUpdate per `response` fragment of the NDJSON body.
        Exactly one update has done=True and it is always the last one.
        """
        self.require_credentials()
        r = self._send(self.build_request(replace(req, stream=True)), stream=True)
        try:
            self._check_status(r)
            text = ""
            try:
                for line in r.iter_lines():
                    if not line:
                        continue
                    try:
                        frag = json.loads(line)
                    except ValueError:
                        continue
                    if not isinstance(frag, dict):
                        continue
                    if frag.get("error"):
                        raise ProviderError(str(frag["error"]), provider=self.provider.value)
                    delta = frag.get("response")
                    delta = delta if isinstance(delta, str) else ""
                    text += delta
                    if frag.get("done") is True:
                        yield StreamUpdate(delta=delta, text=text, done=True)
                        return
                    if delta:
                        yield StreamUpdate(delta=delta, text=text)
            except requests.RequestException as e:
                raise TransportError(f"Stream from {self.host} interrupted: {e}") from e
            # connection closed without a done marker
            yield StreamUpdate(delta="", text=text, done=True)
        finally:
            r.close()

    def list_models(self) -> List[Dict[str, Any]]:
        self.require_credentials()
        r = self._send(self.connection_probe())
        self._check_status(r)
        try:
            data = r.json()
        except ValueError:
            raise InvalidResponseError("/api/tags returned a non-JSON body") from None
        models = data.get("models") if isinstance(data, dict) else None
        if not isinstance(models, list):
            raise InvalidResponseError("/api/tags response has no `models` list")
        return [m for m in models if isinstance(m, dict) and isinstance(m.get("name"), str)]

    def check_connection(self) -> ConnectionStatus:
        status = super().check_connection()
        if status.connected:
            try:
                status.models = [m["name"] for m in self.list_models()]
            except (ProviderError, InvalidResponseError, TransportError):
                status.models = []
        return status


_CLIENTS = {
    Provider.OPENAI: OpenAIClient,
    Provider.OPENAI_COMPAT: OpenAICompatClient,
    Provider.OLLAMA: OllamaClient,
}


def client_for(provider: Provider | str, settings: Settings, session: Any = None) -> ProviderClient:
    try:
        cls = _CLIENTS[Provider(provider)]
    except ValueError:
        raise ValueError(
            f"Unknown provider {provider!r}; expected one of {', '.join(p.value for p in Provider)}"
        ) from None
    return cls(settings, session=session)


__all__ = [
    "GenerationRequest",
    "HTTPRequest",
    "StreamUpdate",
    "ConnectionStatus",
    "build_chat_request",
    "build_ollama_request",
    "extract_chat_text",
    "extract_ollama_text",
    "ProviderClient",
    "OpenAIClient",
    "OpenAICompatClient",
    "OllamaClient",
    "client_for",
]
