# link2app/ai/ai_generator.py
from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional

from link2app.ai import llm
from link2app.ai.providers import StreamUpdate
from link2app.analysis.website_analyzer import format_extracted_content
from link2app.models import Project, Provider, WebsiteAnalysis
from link2app.prompts.registry import PromptRegistry
from link2app.settings import Settings
from link2app.utils.templating import bundle_identifier


class AIGenerator:
    """
    Renders the website prompt (Jinja) from the analysis and the project's
    customizations, picks the system persona for the project's provider and
    calls the generation façade.

    Usage:
        ai = AIGenerator(settings)
        swift = ai.generate_app_code(project, analysis)
    """

    prompt_id = "ios_app_generation"

    # offered after every generation
    SUGGESTIONS = (
        "Add dark mode support",
        "Implement offline caching",
        "Add pull-to-refresh",
        "Enhance animations",
        "Add haptic feedback",
    )

    def __init__(self, settings: Settings, registry: Optional[PromptRegistry] = None, session: Any = None):
        self.settings = settings
        self.registry = registry or PromptRegistry()
        self.session = session

    # -------- public API --------

    def build_prompt(self, project: Project, analysis: WebsiteAnalysis) -> str:
        tmpl = self.registry.get_prompt(self.prompt_id)
        return self.registry.render_prompt(tmpl, self._template_vars(project, analysis))

    def system_prompt(self, provider: Provider) -> str:
        return self.registry.get_system_message(Provider(provider).value)

    def generate_app_code(self, project: Project, analysis: WebsiteAnalysis) -> str:
        raw = llm.generate(
            self.build_prompt(project, analysis),
            project.provider,
            self.settings,
            system=self.system_prompt(project.provider),
            session=self.session,
        )
        return strip_fences(raw)

    def stream_app_code(self, project: Project, analysis: WebsiteAnalysis) -> Iterator[StreamUpdate]:
        """Partial updates as the model writes; call strip_fences() on the final text."""
        return llm.generate_stream(
            self.build_prompt(project, analysis),
            project.provider,
            self.settings,
            system=self.system_prompt(project.provider),
            session=self.session,
        )

    def describe_website(self, url: str, provider: Optional[Provider] = None) -> str:
        """Free-form answer used by the web demo: no scrape, just the URL."""
        tmpl = self.registry.get_prompt("website_conversion")
        prov = Provider(provider or self.settings.LLM_PROVIDER)
        return llm.generate(
            self.registry.render_prompt(tmpl, {"url": url}),
            prov,
            self.settings,
            system=self.registry.get_system_message("website_assistant"),
            max_tokens=1024,
            session=self.session,
        )

    def suggestions(self) -> List[str]:
        return list(self.SUGGESTIONS)

    def improve_code(self, code: str, suggestion: str, provider: Optional[Provider] = None) -> str:
        """Send `code` back to the model with one suggestion applied; returns the new Swift source."""
        if not code.strip():
            raise ValueError("code must not be empty")
        if not suggestion.strip():
            raise ValueError("suggestion must not be empty")
        prov = Provider(provider or self.settings.LLM_PROVIDER)
        tmpl = self.registry.get_prompt("improve_code")
        raw = llm.generate(
            self.registry.render_prompt(tmpl, {"code": code.strip(), "suggestion": suggestion.strip()}),
            prov,
            self.settings,
            system=self.system_prompt(prov),
            session=self.session,
        )
        return strip_fences(raw)

    # -------- helpers --------

    def _template_vars(self, project: Project, analysis: WebsiteAnalysis) -> Dict[str, Any]:
        c = project.customizations
        app_name = c.app_name or analysis.title or project.name
        return {
            "analysis": analysis.model_dump(),
            "app_name": app_name,
            "bundle_identifier": c.bundle_identifier or bundle_identifier(app_name),
            "target_devices": [d.value for d in c.target_devices],
            "minimum_ios_version": c.minimum_ios_version,
            "features": [f.value for f in c.include_features],
            "page_content": format_extracted_content(analysis) or "(no readable content)",
        }


def strip_fences(text: str) -> str:
    """Keep only the code if the model wrapped it in a markdown fence."""
    lines = text.strip().splitlines()
    if not lines:
        return text.strip()
    start = next((i for i, ln in enumerate(lines) if ln.strip().startswith("```")), None)
    if start is None:
        return text.strip()
    end = next(
        (i for i in range(start + 1, len(lines)) if lines[i].strip().startswith("```")),
        len(lines),
    )
    return "\n".join(lines[start + 1:end]).strip()


__all__ = ["AIGenerator", "strip_fences"]
