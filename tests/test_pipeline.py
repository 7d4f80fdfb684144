# tests/test_pipeline.py
import pytest

from link2app import observability
from link2app.errors import ProviderError, WebsiteAnalysisError
from link2app.models import ProjectCustomizations, ProjectStatus, WebsiteAnalysis
from link2app.pipeline import convert_website
from link2app.scaffolds.ios_project import EXPORTED_FILES
from link2app.store import ProjectStore

from conftest import FakeHTTP, FakeResponse

SWIFT = "import SwiftUI\n\nstruct ContentView: View {\n    var body: some View { Text(\"Acme\") }\n}"


def _chat(content):
    return FakeResponse(200, {"choices": [{"message": {"content": content}}]})


class FakeAnalyzer:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def __call__(self, url, *, timeout, session=None):
        self.calls.append((url, timeout))
        if self.error:
            raise self.error
        return WebsiteAnalysis(url=url, title="Acme Coffee", content="Best coffee in town.")


@pytest.fixture
def store(settings):
    return ProjectStore(settings.LINK2APP_PROJECTS_FILE)


def test_convert_and_export(settings, store, tmp_path):
    project = store.create(name="Acme", website_url="https://acme.example")
    http = FakeHTTP(_chat(f"```swift\n{SWIFT}\n```"))
    seen = []

    result = convert_website(
        project.id, store, settings, tmp_path / "out",
        analyzer=FakeAnalyzer(), session=http, progress=seen.append,
    )

    assert result.code == SWIFT
    assert result.analysis.title == "Acme Coffee"
    assert result.project.status is ProjectStatus.COMPLETED
    assert store.get(project.id).status is ProjectStatus.COMPLETED
    assert result.export_path == tmp_path / "out" / "Acme"
    assert sorted(p.name for p in result.export_path.iterdir()) == sorted(EXPORTED_FILES)
    assert (result.export_path / "ContentView.swift").read_text(encoding="utf-8") == SWIFT + "\n"
    assert len(seen) == 3

    events = observability.list_run(project.id)
    assert [(e["action"], e["status"]) for e in events] == [
        ("analyze", "start"), ("analyze", "ok"),
        ("generate", "start"), ("generate", "ok"),
        ("export", "start"), ("export", "ok"),
    ]


def test_convert_without_export_uses_app_name(settings, store):
    project = store.create(
        name="acme", website_url="https://acme.example",
        customizations=ProjectCustomizations(app_name="Beans"),
    )
    http = FakeHTTP(_chat(SWIFT))
    result = convert_website(project.id, store, settings, analyzer=FakeAnalyzer(), session=http)
    assert result.export_path is None
    assert "App Name: Beans" in http.calls[0]["body"]["messages"][1]["content"]
    assert [e["action"] for e in observability.list_run(project.id)] == ["analyze"] * 2 + ["generate"] * 2


def test_analysis_failure_marks_project_error(settings, store):
    project = store.create(name="Acme", website_url="https://acme.example")
    analyzer = FakeAnalyzer(error=WebsiteAnalysisError("Failed to load https://acme.example: HTTP 503"))
    http = FakeHTTP()

    with pytest.raises(WebsiteAnalysisError):
        convert_website(project.id, store, settings, analyzer=analyzer, session=http)

    stored = store.get(project.id)
    assert stored.status is ProjectStatus.ERROR
    assert "HTTP 503" in stored.error_message
    assert http.calls == []
    last = observability.list_run(project.id)[-1]
    assert (last["action"], last["status"], last["kind"]) == ("analyze", "error", "analysis_failed")


def test_generation_failure_marks_project_error(settings, store):
    project = store.create(name="Acme", website_url="https://acme.example")
    http = FakeHTTP(FakeResponse(429, text="rate limited"))

    with pytest.raises(ProviderError):
        convert_website(project.id, store, settings, analyzer=FakeAnalyzer(), session=http)

    stored = store.get(project.id)
    assert stored.status is ProjectStatus.ERROR
    assert "rate limited" in stored.error_message


def test_bad_export_name_marks_project_error(settings, store, tmp_path):
    project = store.create(
        name="Acme", website_url="https://acme.example",
        customizations=ProjectCustomizations(app_name="../escape"),
    )
    with pytest.raises(ValueError):
        convert_website(project.id, store, settings, tmp_path, analyzer=FakeAnalyzer(), session=FakeHTTP(_chat(SWIFT)))
    assert store.get(project.id).status is ProjectStatus.ERROR
    assert not (tmp_path.parent / "escape").exists()


def test_unknown_project(settings, store):
    with pytest.raises(KeyError):
        convert_website("missing", store, settings, analyzer=FakeAnalyzer())


def test_project_without_url(settings, store):
    project = store.create(name="Draft")
    with pytest.raises(ValueError):
        convert_website(project.id, store, settings, analyzer=FakeAnalyzer())
    assert store.get(project.id).status is ProjectStatus.DRAFT


class ExplodingGenerator:
    def generate_app_code(self, project, analysis):
        raise RuntimeError("template directory is broken")


def test_unexpected_failure_still_marks_project_error(settings, store):
    project = store.create(name="Acme", website_url="https://acme.example")

    with pytest.raises(RuntimeError):
        convert_website(project.id, store, settings, analyzer=FakeAnalyzer(), generator=ExplodingGenerator())

    stored = store.get(project.id)
    assert stored.status is ProjectStatus.ERROR
    assert stored.error_message == "template directory is broken"
    last = observability.list_run(project.id)[-1]
    assert (last["action"], last["status"], last["kind"]) == ("generate", "error", "internal_error")
