# link2app/models.py
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ---------- Providers ----------
class Provider(str, Enum):
    OPENAI = "openai"                # cloud-hosted, api.openai.com
    OPENAI_COMPAT = "openai_compat"  # cloud-hosted OpenAI-compatible /v1 (NVIDIA by default)
    OLLAMA = "ollama"                # local server

    @property
    def display_name(self) -> str:
        return {
            Provider.OPENAI: "OpenAI",
            Provider.OPENAI_COMPAT: "OpenAI-compatible (NVIDIA)",
            Provider.OLLAMA: "Ollama (Local)",
        }[self]

    @property
    def is_local(self) -> bool:
        return self is Provider.OLLAMA


# ---------- Projects ----------
DEFAULT_MINIMUM_IOS_VERSION = "15.0"


class ProjectStatus(str, Enum):
    DRAFT = "draft"
    ANALYZING = "analyzing"
    GENERATING = "generating"
    COMPLETED = "completed"
    ERROR = "error"

    @property
    def display_name(self) -> str:
        return {
            ProjectStatus.DRAFT: "Draft",
            ProjectStatus.ANALYZING: "Analyzing Website",
            ProjectStatus.GENERATING: "Generating iOS App",
            ProjectStatus.COMPLETED: "Completed",
            ProjectStatus.ERROR: "Error",
        }[self]


class TargetDevice(str, Enum):
    IPHONE = "iphone"
    IPAD = "ipad"


class AppFeature(str, Enum):
    NAVIGATION = "navigation"
    WEBVIEW = "webview"
    NATIVE_COMPONENTS = "native_components"
    PUSH_NOTIFICATIONS = "push_notifications"
    OFFLINE_SUPPORT = "offline_support"
    BIOMETRIC_AUTH = "biometric_auth"
    DEEP_LINKING = "deep_linking"


class CustomStyling(BaseModel):
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    font_family: Optional[str] = None
    corner_radius: Optional[float] = None
    shadow_style: Optional[str] = None


class ProjectCustomizations(BaseModel):
    app_name: Optional[str] = None
    bundle_identifier: Optional[str] = None
    target_devices: List[TargetDevice] = Field(
        default_factory=lambda: [TargetDevice.IPHONE, TargetDevice.IPAD]
    )
    minimum_ios_version: str = DEFAULT_MINIMUM_IOS_VERSION
    include_features: List[AppFeature] = Field(
        default_factory=lambda: [
            AppFeature.NAVIGATION,
            AppFeature.WEBVIEW,
            AppFeature.NATIVE_COMPONENTS,
        ]
    )
    custom_styling: Optional[CustomStyling] = None


class Project(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    name: str
    website_url: str = ""
    created_at: datetime = Field(default_factory=_now)
    last_modified: datetime = Field(default_factory=_now)
    status: ProjectStatus = ProjectStatus.DRAFT
    provider: Provider = Provider.OPENAI
    customizations: ProjectCustomizations = Field(default_factory=ProjectCustomizations)
    error_message: Optional[str] = None

    def touch(self) -> None:
        self.last_modified = _now()


# ---------- Website analysis ----------
class LinkInfo(BaseModel):
    text: str
    href: str


class WebsiteAnalysis(BaseModel):
    url: str
    title: str = ""
    description: Optional[str] = None
    keywords: List[str] = Field(default_factory=list)
    headings: List[str] = Field(default_factory=list)
    content: str = ""
    images: List[str] = Field(default_factory=list)
    links: List[LinkInfo] = Field(default_factory=list)
    forms: int = 0
    viewport: Optional[str] = None
    created_at: datetime = Field(default_factory=_now)

    @property
    def is_responsive(self) -> bool:
        return bool(self.viewport and "width=device-width" in self.viewport)
