from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..core.config import Settings, load_settings
from ..features.session import SessionManager, create_session_router
from ..features.session.concurrency import shutdown_executor

__all__ = ["build_manager", "create_app", "main"]

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


@asynccontextmanager
async def _lifespan(_: FastAPI) -> AsyncIterator[None]:
    yield
    shutdown_executor(wait=False)


def create_app(manager: SessionManager) -> FastAPI:
    app = FastAPI(
        title="Interview Coach",
        version="1.0.0",
        description="Scripted mock-interview sessions with follow-ups and final feedback.",
        lifespan=_lifespan,
    )

    @app.exception_handler(HTTPException)
    async def _http_exception(_: Request, exc: HTTPException) -> JSONResponse:
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def _validation_exception(_: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        first = errors[0] if errors else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = first.get("msg", "Invalid request.")
        return _error_response(400, f"{location}: {message}" if location else message)

    @app.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(create_session_router(manager))
    return app


def build_manager(settings: Settings) -> SessionManager:
    """Wire a manager with OpenAI-backed oracles."""

    from ..oracles import (
        OpenAIInterviewCoach,
        OpenAISpeechSynthesizer,
        OpenAITranscriber,
        create_openai_client,
        verify_openai_auth,
    )

    client = create_openai_client(settings)
    verify_openai_auth(client)
    return SessionManager(
        OpenAIInterviewCoach(client, settings.chat_model),
        OpenAITranscriber(client, settings.stt_model),
        synthesizer=OpenAISpeechSynthesizer(client, settings.tts_model, settings.tts_voice),
    )


def main() -> None:  # pragma: no cover - runner
    import uvicorn

    settings = load_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app(build_manager(settings))
    logger.info("serving interview coach", extra={"host": settings.host, "port": settings.port})
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":  # pragma: no cover
    main()
