# tests/conftest.py
from __future__ import annotations

import json
from typing import Any, Iterable, List, Optional

import pytest

from link2app import observability
from link2app.settings import Settings

_MISSING = object()


class FakeResponse:
    def __init__(self, status_code: int = 200, json_data: Any = _MISSING, text: Optional[str] = None,
                 lines: Optional[Iterable[bytes]] = None):
        self.status_code = status_code
        self._json = json_data
        if text is None:
            text = json.dumps(json_data) if json_data is not _MISSING else ""
        self.text = text
        self._lines = list(lines or [])
        self.closed = False
        self.lines_read = 0

    def json(self):
        if self._json is _MISSING:
            raise ValueError("No JSON object could be decoded")
        return self._json

    def iter_lines(self):
        for line in self._lines:
            self.lines_read += 1
            yield line

    def close(self):
        self.closed = True


class FakeHTTP:
    """Stands in for `requests` / a Session: records calls, replays responses in order."""

    def __init__(self, *responses: FakeResponse, error: Optional[Exception] = None):
        self.responses: List[FakeResponse] = list(responses)
        self.error = error
        self.calls: List[dict] = []

    def _next(self, **call):
        self.calls.append(call)
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)

    def post(self, url, headers=None, data=None, timeout=None, stream=False):
        return self._next(method="POST", url=url, headers=headers or {},
                          body=json.loads(data) if data else None, timeout=timeout, stream=stream)

    def get(self, url, headers=None, timeout=None):
        return self._next(method="GET", url=url, headers=headers or {}, timeout=timeout)


def ndjson(*fragments: dict) -> List[bytes]:
    return [json.dumps(f).encode() for f in fragments]


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        OPENAI_API_KEY="sk-test-key-1234567890",
        OPENAI_COMPAT_API_KEY="nvapi-test-key-1234567890",
        OLLAMA_HOST="http://ollama.local:11434",
        LLM_PROVIDER="openai",
        LINK2APP_PROJECTS_FILE=tmp_path / "projects.json",
        LINK2APP_EXPORT_DIR=tmp_path / "exports",
    )


@pytest.fixture(autouse=True)
def audit_file(tmp_path, monkeypatch):
    path = tmp_path / "audit.log.jsonl"
    monkeypatch.setattr(observability, "AUDIT_LOG", str(path))
    return path
