# link2app/prompts/registry.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional
import json
import os
from pathlib import Path

import yaml
from link2app.utils.templating import render_template

PACKAGE_PROMPTS_DIR = Path(__file__).resolve().parent

@dataclass
class PromptTemplate:
    id: str
    version: str
    purpose: str
    template: str


def _version_key(version: str) -> tuple:
    parts = []
    for piece in version.split("."):
        parts.append(int(piece) if piece.isdigit() else 0)
    return tuple(parts)


class PromptRegistry:
    """
    System personas (system_messages.yaml) and versioned prompt templates
    (prompt_db.jsonl, one JSON object per line). Defaults to the files shipped
    with the package; LINK2APP_PROMPTS_DIR or `base_dir` point elsewhere.
    """

    def __init__(self, base_dir: str | None = None):
        self.base_dir = Path(base_dir or os.getenv("LINK2APP_PROMPTS_DIR") or PACKAGE_PROMPTS_DIR)
        self._system_map: Optional[Dict[str, str]] = None
        self._prompts: Optional[Dict[tuple, PromptTemplate]] = None

    # --- System messages ---
    def get_system_message(self, agent: str) -> str:
        if self._system_map is None:
            with open(self.base_dir / "system_messages.yaml", "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            self._system_map = {str(k): str(v or "").strip() for k, v in data.items()}
        if agent not in self._system_map:
            agent = "default"
        return self._system_map.get(agent, "")

    # --- Prompt DB ---
    def _load_prompts(self):
        prompts = {}
        with open(self.base_dir / "prompt_db.jsonl", "r", encoding="utf-8") as f:
            for line in f:
                if not line.strip():
                    continue
                obj = json.loads(line)
                key = (obj["id"], str(obj["version"]))
                prompts[key] = PromptTemplate(
                    id=obj["id"],
                    version=str(obj["version"]),
                    purpose=obj.get("purpose", ""),
                    template=obj["template"],
                )
        self._prompts = prompts

    def get_prompt(self, prompt_id: str, version: str = "latest") -> PromptTemplate:
        if self._prompts is None:
            self._load_prompts()
        if version == "latest":
            versions = [v for (pid, v) in self._prompts.keys() if pid == prompt_id]
            if not versions:
                raise KeyError(f"Prompt not found: {prompt_id}")
            version = max(versions, key=_version_key)
        key = (prompt_id, version)
        if key not in self._prompts:
            raise KeyError(f"Prompt not found: {prompt_id}@{version}")
        return self._prompts[key]

    def render_prompt(self, prompt: PromptTemplate, data: Dict[str, Any]) -> str:
        return render_template(prompt.template, data).strip()
