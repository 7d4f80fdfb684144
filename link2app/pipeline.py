# link2app/pipeline.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

from link2app.ai.ai_generator import AIGenerator
from link2app.analysis.website_analyzer import analyze_website
from link2app.errors import Link2AppError
from link2app.models import Project, ProjectStatus, WebsiteAnalysis
from link2app.observability import audit_log
from link2app.scaffolds.ios_project import export_project
from link2app.settings import Settings
from link2app.store import ProjectStore


@dataclass
class ConversionResult:
    project: Project
    analysis: WebsiteAnalysis
    code: str
    export_path: Optional[Path] = None


def _failure_kind(e: Exception) -> str:
    if isinstance(e, Link2AppError):
        return e.kind.value
    return "invalid_input" if isinstance(e, ValueError) else "internal_error"


def _step(store: ProjectStore, project: Project, status: ProjectStatus) -> Project:
    return store.set_status(project.id, status) or project


def convert_website(
    project_id: str,
    store: ProjectStore,
    settings: Settings,
    destination: Optional[str | Path] = None,
    *,
    generator: Optional[AIGenerator] = None,
    analyzer: Callable[..., WebsiteAnalysis] = analyze_website,
    session: Any = None,
    progress: Callable[[str], None] = lambda msg: None,
) -> ConversionResult:
    """
    analyze -> generate -> (export), moving the project through
    analyzing -> generating -> completed. Once the project is loaded, any failure
    marks it `error` with the message and is re-raised for the caller.
    """
    project = store.get(project_id)
    if project is None:
        raise KeyError(f"Project not found: {project_id}")
    if not project.website_url:
        raise ValueError(f"Project {project.name!r} has no website URL")

    generator = generator or AIGenerator(settings, session=session)
    run_id = project.id
    params = {"url": project.website_url, "provider": project.provider.value}
    action = "analyze"

    try:
        project = _step(store, project, ProjectStatus.ANALYZING)
        progress(f"Analyzing {project.website_url}")
        audit_log(run_id=run_id, action=action, status="start", params=params)
        analysis = analyzer(project.website_url, timeout=settings.LLM_REQUEST_TIMEOUT, session=session)
        audit_log(run_id=run_id, action=action, status="ok", message=analysis.title)

        action = "generate"
        project = _step(store, project, ProjectStatus.GENERATING)
        progress(f"Generating SwiftUI code with {project.provider.display_name}")
        audit_log(run_id=run_id, action=action, status="start", params=params)
        code = generator.generate_app_code(project, analysis)
        audit_log(run_id=run_id, action=action, status="ok", extra={"chars": len(code)})

        export_path = None
        if destination is not None:
            action = "export"
            c = project.customizations
            audit_log(run_id=run_id, action=action, status="start", params={"destination": str(destination)})
            export_path = export_project(
                c.app_name or project.name,
                code,
                destination,
                bundle_identifier=c.bundle_identifier,
                minimum_ios_version=c.minimum_ios_version,
                source_url=project.website_url,
            )
            progress(f"Exported to {export_path}")
            audit_log(run_id=run_id, action=action, status="ok", message=str(export_path))
    except Exception as e:
        store.set_status(project.id, ProjectStatus.ERROR, error_message=str(e) or type(e).__name__)
        audit_log(run_id=run_id, action=action, status="error", message=str(e), extra={"kind": _failure_kind(e)})
        raise

    project = _step(store, project, ProjectStatus.COMPLETED)
    return ConversionResult(project=project, analysis=analysis, code=code, export_path=export_path)
