from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from snapai.api.routes import router
from snapai.core.config import settings
from snapai.core.logging import configure_logging, log
from snapai.core.session import InteractionController

configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the session controller for the lifetime of the app."""
    app.state.controller = InteractionController(settings=settings)
    log.info(f"SNAPAI_STARTUP model={settings.image_model} size={settings.image_size}")

    yield

    log.info("SNAPAI_SHUTDOWN")


app = FastAPI(title="SnapAI", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def security_headers_middleware(request: Request, call_next):
    """Adds security headers to all responses."""
    response: Response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "no-referrer"
    return response


app.include_router(router, prefix="/api")


@app.get("/")
def root() -> dict:
    """Root endpoint."""
    return {
        "name": "SnapAI API",
        "docs": "/docs",
        "health": "/api/healthz",
        "endpoints": {
            "session": "/api/session",
            "prompt": "/api/session/prompt",
            "credential": "/api/session/credential",
            "generate": "/api/generate",
            "download": "/api/images/{index}/download",
        },
    }
