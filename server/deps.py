# server/deps.py
from __future__ import annotations

from functools import lru_cache
from typing import Any

from fastapi import Depends

from link2app.settings import Settings, load_settings
from link2app.store import ProjectStore
from server.settings import server_settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Loaded once per process; restart the server after `link2app-config set`."""
    return load_settings(server_settings.LINK2APP_SETTINGS_FILE)


def get_store(settings: Settings = Depends(get_settings)) -> ProjectStore:
    return ProjectStore(settings.LINK2APP_PROJECTS_FILE)


def get_http_session() -> Any:
    """HTTP client handed to provider calls; None means plain `requests`."""
    return None
