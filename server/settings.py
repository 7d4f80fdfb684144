from __future__ import annotations

from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "Link2App API"

    # CORS for the web demo
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Where the generation settings live (None -> link2app default)
    LINK2APP_SETTINGS_FILE: Optional[str] = None


server_settings = ServerSettings()
