from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

from link2app.models import Project, ProjectCustomizations, Provider


# ---------- Generation ----------
class GenerateRequest(BaseModel):
    prompt: str = Field(..., min_length=1)
    provider: Optional[Provider] = None
    model: Optional[str] = None
    system: Optional[str] = None
    temperature: Optional[float] = Field(None, ge=0.0, le=2.0)
    max_tokens: Optional[int] = Field(None, ge=1)


class GenerateOut(BaseModel):
    provider: Provider
    text: str


class ImproveRequest(BaseModel):
    code: str = Field(..., min_length=1)
    suggestion: str = Field(..., min_length=1)
    provider: Optional[Provider] = None


class DemoRequest(BaseModel):
    url: str = Field(..., min_length=1)
    provider: Optional[Provider] = None


class ConnectionOut(BaseModel):
    provider: Provider
    connected: bool
    message: str
    models: List[str] = Field(default_factory=list)


class LocalModelOut(BaseModel):
    name: str
    size: Optional[int] = None
    modified_at: Optional[str] = None


# ---------- Projects ----------
class ProjectBase(BaseModel):
    name: str = "New Project"
    website_url: str = ""
    provider: Provider = Provider.OPENAI
    customizations: ProjectCustomizations = Field(default_factory=ProjectCustomizations)


class ConvertRequest(BaseModel):
    export: bool = True


class ConvertOut(BaseModel):
    project: Project
    code: str
    export_path: Optional[Path] = None
