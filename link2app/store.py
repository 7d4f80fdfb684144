# link2app/store.py
from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import TypeAdapter

from link2app.models import Project, ProjectCustomizations, ProjectStatus, Provider

_projects_adapter = TypeAdapter(List[Project])

# one lock per projects file, shared by every ProjectStore in the process
_locks: Dict[str, threading.Lock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    key = os.path.realpath(path)
    with _locks_guard:
        return _locks.setdefault(key, threading.Lock())


class ProjectStore:
    """Projects persisted as one flat JSON list. Every call reads and writes the whole file."""

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()
        self._lock = _lock_for(self.path)

    # ---------- file I/O (callers hold the lock) ----------
    def _load(self) -> List[Project]:
        if not self.path.exists():
            return []
        raw = self.path.read_text(encoding="utf-8")
        if not raw.strip():
            return []
        return _projects_adapter.validate_json(raw)

    def _save(self, projects: List[Project]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = _projects_adapter.dump_python(projects, mode="json")
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=self.path.parent, prefix=self.path.name + ".", suffix=".tmp", delete=False
        ) as tmp:
            json.dump(data, tmp, indent=2)
            tmp.write("\n")
        try:
            os.replace(tmp.name, self.path)
        except OSError:
            os.unlink(tmp.name)
            raise

    def _replace(self, projects: List[Project], project: Project) -> Optional[Project]:
        for i, existing in enumerate(projects):
            if existing.id == project.id:
                updated = project.model_copy(deep=True)
                updated.touch()
                projects[i] = updated
                self._save(projects)
                return updated
        return None

    # ---------- queries ----------
    def list(self) -> List[Project]:
        with self._lock:
            return self._load()

    def get(self, id: str) -> Optional[Project]:
        return next((p for p in self.list() if p.id == id), None)

    def recent(self, limit: Optional[int] = 5) -> List[Project]:
        """Newest `last_modified` first; limit=None returns all."""
        projects = sorted(self.list(), key=lambda p: p.last_modified, reverse=True)
        return projects if limit is None else projects[:limit]

    # ---------- mutations ----------
    def create(
        self,
        name: str = "New Project",
        website_url: str = "",
        provider: Provider = Provider.OPENAI,
        customizations: Optional[ProjectCustomizations] = None,
    ) -> Project:
        project = Project(
            name=name,
            website_url=website_url,
            provider=provider,
            customizations=customizations or ProjectCustomizations(),
        )
        with self._lock:
            projects = self._load()
            projects.append(project)
            self._save(projects)
        return project

    def update(self, project: Project) -> Optional[Project]:
        with self._lock:
            return self._replace(self._load(), project)

    def set_status(self, id: str, status: ProjectStatus, error_message: Optional[str] = None) -> Optional[Project]:
        with self._lock:
            projects = self._load()
            project = next((p for p in projects if p.id == id), None)
            if project is None:
                return None
            project.status = status
            project.error_message = error_message if status is ProjectStatus.ERROR else None
            return self._replace(projects, project)

    def delete(self, id: str) -> bool:
        with self._lock:
            projects = self._load()
            kept = [p for p in projects if p.id != id]
            if len(kept) == len(projects):
                return False
            self._save(kept)
            return True
