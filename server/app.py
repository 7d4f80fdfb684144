# server/app.py
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from link2app import __version__
from link2app.errors import FailureKind, Link2AppError
from server.routers import generation, projects
from server.settings import server_settings

# ---------- App ----------
app = FastAPI(title=server_settings.APP_NAME, version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=server_settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(generation.router)
app.include_router(projects.router)

# ---------- errors ----------
STATUS_BY_KIND = {
    FailureKind.MISSING_CREDENTIAL: 400,
    FailureKind.ANALYSIS_FAILED: 422,
    FailureKind.TRANSPORT_ERROR: 502,
    FailureKind.PROVIDER_ERROR: 502,
    FailureKind.INVALID_RESPONSE: 502,
    FailureKind.IO_ERROR: 500,
}

@app.exception_handler(Link2AppError)
def link2app_error(request: Request, exc: Link2AppError):
    return JSONResponse(
        {"error": str(exc), "kind": exc.kind.value},
        status_code=STATUS_BY_KIND.get(exc.kind, 500),
    )

@app.exception_handler(ValueError)
def value_error(request: Request, exc: ValueError):
    return JSONResponse({"error": str(exc), "kind": "invalid_input"}, status_code=400)

# ---------- health ----------
@app.get("/health")
def health():
    return {"ok": True, "version": __version__}
