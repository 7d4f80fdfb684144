# tests/test_streaming.py
import pytest
import requests

from link2app.ai import llm
from link2app.errors import MissingCredentialError, ProviderError, TransportError
from link2app.models import Provider

from conftest import FakeHTTP, FakeResponse, ndjson


def _fragments(texts):
    frags = [{"model": "llama2", "response": t, "done": False} for t in texts[:-1]]
    frags.append({"model": "llama2", "response": texts[-1], "done": True, "total_duration": 1})
    return frags


@pytest.mark.parametrize("texts", [
    ["import SwiftUI"],
    ["import ", "Swift", "UI\n", "struct A {}"],
    ["a"] * 25,
])
def test_stream_accumulates_fragments_in_order(settings, texts):
    resp = FakeResponse(200, lines=ndjson(*_fragments(texts)))
    http = FakeHTTP(resp)

    updates = list(llm.generate_stream("prompt", Provider.OLLAMA, settings, session=http))

    assert "".join(u.delta for u in updates) == "".join(texts)
    assert updates[-1].text == "".join(texts)
    assert [u.done for u in updates].count(True) == 1
    assert updates[-1].done is True
    # every update carries the running total
    running = ""
    for u in updates:
        running += u.delta
        assert u.text == running
    assert resp.closed is True
    assert http.calls[0]["stream"] is True
    assert http.calls[0]["body"]["stream"] is True


def test_stream_stops_at_done_marker(settings):
    lines = ndjson(
        {"response": "one ", "done": False},
        {"response": "two", "done": True},
        {"response": " three", "done": False},
    )
    resp = FakeResponse(200, lines=lines)
    updates = list(llm.generate_stream("p", Provider.OLLAMA, settings, session=FakeHTTP(resp)))
    assert updates[-1].text == "one two"
    assert resp.lines_read == 2


def test_stream_ends_once_when_connection_closes_without_marker(settings):
    resp = FakeResponse(200, lines=ndjson({"response": "a", "done": False}, {"response": "b", "done": False}))
    updates = list(llm.generate_stream("p", Provider.OLLAMA, settings, session=FakeHTTP(resp)))
    assert [u.done for u in updates] == [False, False, True]
    assert updates[-1].text == "ab"
    assert updates[-1].delta == ""


def test_stream_skips_blank_and_garbage_lines(settings):
    lines = [b"", b"not json", b"[1, 2]"] + ndjson({"response": "ok", "done": True})
    updates = list(llm.generate_stream("p", Provider.OLLAMA, settings, session=FakeHTTP(FakeResponse(200, lines=lines))))
    assert len(updates) == 1
    assert updates[0].text == "ok"


def test_collect_stream(settings):
    resp = FakeResponse(200, lines=ndjson(*_fragments([" x", "y ", "z\n"])))
    assert llm.collect_stream(llm.generate_stream("p", Provider.OLLAMA, settings, session=FakeHTTP(resp))) == "xy z"


def test_stream_credentials_checked_before_iteration(settings):
    settings.OLLAMA_HOST = ""
    http = FakeHTTP()
    with pytest.raises(MissingCredentialError):
        llm.generate_stream("p", Provider.OLLAMA, settings, session=http)
    assert http.calls == []


def test_stream_non_success_status(settings):
    resp = FakeResponse(500, text="model crashed")
    stream = llm.generate_stream("p", Provider.OLLAMA, settings, session=FakeHTTP(resp))
    with pytest.raises(ProviderError) as ei:
        next(stream)
    assert ei.value.message == "model crashed"
    assert resp.closed is True


def test_stream_error_fragment(settings):
    lines = ndjson({"response": "par", "done": False}, {"error": "out of memory"})
    stream = llm.generate_stream("p", Provider.OLLAMA, settings, session=FakeHTTP(FakeResponse(200, lines=lines)))
    assert next(stream).text == "par"
    with pytest.raises(ProviderError, match="out of memory"):
        next(stream)


def test_stream_interrupted_connection(settings):
    class Broken(FakeResponse):
        def iter_lines(self):
            yield b'{"response": "a", "done": false}'
            raise requests.exceptions.ChunkedEncodingError("connection reset")

    stream = llm.generate_stream("p", Provider.OLLAMA, settings, session=FakeHTTP(Broken(200)))
    assert next(stream).text == "a"
    with pytest.raises(TransportError):
        next(stream)


def test_non_streaming_provider_yields_single_final_update(settings):
    http = FakeHTTP(FakeResponse(200, {"choices": [{"message": {"content": " whole answer "}}]}))
    updates = list(llm.generate_stream("p", Provider.OPENAI, settings, session=http))
    assert len(updates) == 1
    assert updates[0].done is True
    assert updates[0].text == "whole answer"
    assert http.calls[0]["body"]["stream"] is False
