# link2app/settings.py
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from link2app.models import Provider

DEFAULT_SETTINGS_FILE = Path.home() / ".link2app" / "settings.json"

# Keys written back to the settings file. Everything else stays env-only.
PERSISTED_KEYS = (
    "OPENAI_API_KEY",
    "OPENAI_MODEL",
    "OPENAI_COMPAT_API_KEY",
    "OPENAI_COMPAT_BASE_URL",
    "OPENAI_COMPAT_MODEL",
    "OLLAMA_HOST",
    "OLLAMA_MODEL",
    "LLM_PROVIDER",
    "LLM_TEMPERATURE",
    "LLM_MAX_TOKENS",
)

SECRET_KEYS = ("OPENAI_API_KEY", "OPENAI_COMPAT_API_KEY")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # OpenAI
    OPENAI_API_KEY: str = ""
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    OPENAI_MODEL: str = "gpt-4"

    # OpenAI-compatible host (NVIDIA integrate API by default)
    OPENAI_COMPAT_API_KEY: str = ""
    OPENAI_COMPAT_BASE_URL: str = "https://integrate.api.nvidia.com/v1"
    OPENAI_COMPAT_MODEL: str = "meta/llama-3.1-405b-instruct"

    # Ollama
    OLLAMA_HOST: str = "http://localhost:11434"
    OLLAMA_MODEL: str = "llama2"
    OLLAMA_TOP_P: float = 0.9

    # Generation defaults
    LLM_PROVIDER: Provider = Provider.OPENAI
    LLM_TEMPERATURE: float = 0.7
    LLM_MAX_TOKENS: int = 4000
    LLM_REQUEST_TIMEOUT: float = 120.0  # seconds

    # Storage
    LINK2APP_PROJECTS_FILE: Path = Path.home() / ".link2app" / "projects.json"
    LINK2APP_EXPORT_DIR: Path = Path("exports")

    def model_for(self, provider: Provider) -> str:
        return {
            Provider.OPENAI: self.OPENAI_MODEL,
            Provider.OPENAI_COMPAT: self.OPENAI_COMPAT_MODEL,
            Provider.OLLAMA: self.OLLAMA_MODEL,
        }[Provider(provider)]

    def masked(self) -> Dict[str, Any]:
        """Settings as plain data with API keys hidden, for display."""
        data = self.model_dump(mode="json")
        for key in SECRET_KEYS:
            value = data.get(key) or ""
            data[key] = f"{value[:4]}…{value[-4:]}" if len(value) > 12 else ("set" if value else "")
        return data


def settings_path(path: Optional[str | Path] = None) -> Path:
    return Path(path or os.getenv("LINK2APP_SETTINGS_FILE") or DEFAULT_SETTINGS_FILE).expanduser()


def read_stored(path: Optional[str | Path] = None) -> Dict[str, Any]:
    """Raw key/value pairs from the settings file ({} if it does not exist)."""
    p = settings_path(path)
    if not p.exists():
        return {}
    with open(p, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Settings file {p} must contain a JSON object")
    return data


def load_settings(path: Optional[str | Path] = None, **overrides: Any) -> Settings:
    """
    Build the settings object handed to the generation layer.
    Precedence: defaults < settings file < env/.env < explicit overrides.
    """
    settings = Settings(**overrides)
    stored = read_stored(path)
    from_file = {
        k: v
        for k, v in stored.items()
        if k in Settings.model_fields and k not in settings.model_fields_set
    }
    if not from_file:
        return settings
    return Settings(**{**from_file, **overrides})


def save_settings(settings: Settings, path: Optional[str | Path] = None) -> Path:
    data = settings.model_dump(mode="json", include=set(PERSISTED_KEYS))
    return _write(settings_path(path), data)


def update_settings(path: Optional[str | Path] = None, **changes: Any) -> Dict[str, Any]:
    """Merge `changes` into the stored key/value pairs. Values are validated first."""
    unknown = [k for k in changes if k not in PERSISTED_KEYS]
    if unknown:
        raise KeyError(f"Unknown setting(s): {', '.join(sorted(unknown))}")
    stored = read_stored(path)
    stored.update(changes)
    validated = Settings(**stored).model_dump(mode="json", include=set(stored))
    _write(settings_path(path), validated)
    return validated


def reset_settings(path: Optional[str | Path] = None) -> bool:
    """Forget every stored value (keys, endpoints, default provider). False if nothing was stored."""
    p = settings_path(path)
    if not p.exists():
        return False
    p.unlink()
    return True


def _write(p: Path, data: Dict[str, Any]) -> Path:
    p.parent.mkdir(parents=True, exist_ok=True)
    with open(p, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, sort_keys=True)
        f.write("\n")
    # API keys live in this file
    os.chmod(p, 0o600)
    return p
