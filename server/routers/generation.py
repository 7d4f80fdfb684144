from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from link2app.ai import llm
from link2app.ai.ai_generator import AIGenerator
from link2app.errors import Link2AppError
from link2app.models import Provider
from link2app.settings import Settings
from server import schemas
from server.deps import get_http_session, get_settings

router = APIRouter(tags=["generation"])


@router.post("/generate", response_model=schemas.GenerateOut)
def post_generate(
    payload: schemas.GenerateRequest,
    settings: Settings = Depends(get_settings),
    session: Any = Depends(get_http_session),
):
    provider = Provider(payload.provider or settings.LLM_PROVIDER)
    text = llm.generate(
        payload.prompt,
        provider,
        settings,
        system=payload.system,
        model=payload.model,
        temperature=payload.temperature,
        max_tokens=payload.max_tokens,
        session=session,
    )
    return schemas.GenerateOut(provider=provider, text=text)


@router.get("/stream/generate")
def stream_generate(
    prompt: str = Query(..., min_length=1),
    provider: Optional[Provider] = None,
    model: Optional[str] = None,
    settings: Settings = Depends(get_settings),
    session: Any = Depends(get_http_session),
):
    # Credentials are checked here, so a misconfigured provider is a plain 4xx
    updates = llm.generate_stream(prompt, provider, settings, model=model, session=session)

    def gen():
        try:
            for update in updates:
                if update.delta:
                    yield update.delta.encode()
        except Link2AppError as e:
            yield f"\n[error] {e}\n".encode()

    return StreamingResponse(gen(), media_type="text/plain")


@router.post("/demo", response_model=schemas.GenerateOut)
def post_demo(
    payload: schemas.DemoRequest,
    settings: Settings = Depends(get_settings),
    session: Any = Depends(get_http_session),
):
    """The web demo flow: paste a URL, get the model's take on an iOS version."""
    provider = Provider(payload.provider or settings.LLM_PROVIDER)
    text = AIGenerator(settings, session=session).describe_website(payload.url, provider)
    return schemas.GenerateOut(provider=provider, text=text)


@router.get("/models", response_model=list[schemas.LocalModelOut])
def get_models(settings: Settings = Depends(get_settings), session: Any = Depends(get_http_session)):
    return llm.list_local_models(settings, session=session)


@router.get("/connection", response_model=schemas.ConnectionOut)
def get_connection(
    provider: Optional[Provider] = None,
    settings: Settings = Depends(get_settings),
    session: Any = Depends(get_http_session),
):
    status = llm.check_connection(provider, settings, session=session)
    return schemas.ConnectionOut(
        provider=status.provider,
        connected=status.connected,
        message=status.message,
        models=status.models,
    )


@router.get("/suggestions", response_model=list[str])
def get_suggestions(settings: Settings = Depends(get_settings)):
    return AIGenerator(settings).suggestions()


@router.post("/improve", response_model=schemas.GenerateOut)
def post_improve(
    payload: schemas.ImproveRequest,
    settings: Settings = Depends(get_settings),
    session: Any = Depends(get_http_session),
):
    """Apply one suggestion to previously generated code."""
    provider = Provider(payload.provider or settings.LLM_PROVIDER)
    text = AIGenerator(settings, session=session).improve_code(payload.code, payload.suggestion, provider)
    return schemas.GenerateOut(provider=provider, text=text)
