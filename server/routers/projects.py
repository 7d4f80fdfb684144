from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from link2app.models import Project
from link2app.pipeline import convert_website
from link2app.settings import Settings
from link2app.store import ProjectStore
from server import schemas
from server.deps import get_http_session, get_settings, get_store

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=list[Project])
def get_projects(limit: int = Query(0, ge=0), store: ProjectStore = Depends(get_store)):
    """Most recently modified first; limit=0 returns all."""
    return store.recent(limit=limit or None)


@router.get("/{id}", response_model=Project)
def get_project(id: str, store: ProjectStore = Depends(get_store)):
    project = store.get(id)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.post("", response_model=Project)
def post_project(payload: schemas.ProjectBase, store: ProjectStore = Depends(get_store)):
    return store.create(
        name=payload.name,
        website_url=payload.website_url,
        provider=payload.provider,
        customizations=payload.customizations,
    )


@router.put("/{id}", response_model=Project)
def put_project(id: str, payload: schemas.ProjectBase, store: ProjectStore = Depends(get_store)):
    project = store.get(id)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    project.name = payload.name
    project.website_url = payload.website_url
    project.provider = payload.provider
    project.customizations = payload.customizations
    return store.update(project)


@router.delete("/{id}")
def delete_project(id: str, store: ProjectStore = Depends(get_store)):
    if not store.delete(id):
        raise HTTPException(status_code=404, detail="Project not found")
    return {"ok": True}


@router.post("/{id}/convert", response_model=schemas.ConvertOut)
def convert_project(
    id: str,
    payload: schemas.ConvertRequest = schemas.ConvertRequest(),
    settings: Settings = Depends(get_settings),
    store: ProjectStore = Depends(get_store),
    session: Any = Depends(get_http_session),
):
    if store.get(id) is None:
        raise HTTPException(status_code=404, detail="Project not found")
    destination = settings.LINK2APP_EXPORT_DIR if payload.export else None
    try:
        result = convert_website(id, store, settings, destination, session=session)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return schemas.ConvertOut(project=result.project, code=result.code, export_path=result.export_path)
