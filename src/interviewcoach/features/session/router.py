from __future__ import annotations

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from ...core.errors import InterviewError, SessionNotFoundError
from .service import AnswerSubmission, SessionConfig, SessionManager, created_payload

__all__ = ["CreateSessionRequest", "SpeechRequest", "SubmitAnswerRequest", "create_session_router"]


class _RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel, extra="forbid")


class CreateSessionRequest(_RequestModel):
    question_count: int | None = None
    allow_follow_ups: bool | None = None

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, data: object) -> object:
        if not isinstance(data, dict):
            return data
        cleaned: dict[str, object] = dict(data)
        # Form-style clients send "" for an untouched count field.
        for field in ("questionCount", "question_count"):
            if cleaned.get(field) == "":
                cleaned[field] = None
        return cleaned


class SubmitAnswerRequest(_RequestModel):
    answer_text: str | None = None
    audio_base64: str | None = None
    mime_type: str | None = None
    response_delay_sec: float | None = None

    def to_submission(self) -> AnswerSubmission:
        return AnswerSubmission(
            answer_text=self.answer_text,
            audio_base64=self.audio_base64,
            mime_type=self.mime_type,
            response_delay_sec=self.response_delay_sec,
        )


class SpeechRequest(_RequestModel):
    text: str = Field(min_length=1, max_length=5000)


def _http_error(exc: InterviewError) -> HTTPException:
    status = 404 if isinstance(exc, SessionNotFoundError) else 400
    return HTTPException(status, str(exc))


class _SessionController:
    def __init__(self, manager: SessionManager) -> None:
        self.manager = manager

    async def create(self, body: CreateSessionRequest) -> Response:
        session = await self.manager.create_session_async(
            SessionConfig(question_count=body.question_count, allow_follow_ups=body.allow_follow_ups)
        )
        return JSONResponse(created_payload(session).to_dict(), status_code=201)

    async def question(self, sid: str) -> Response:
        try:
            payload = await self.manager.current_prompt_async(sid)
        except InterviewError as exc:
            raise _http_error(exc) from exc
        return JSONResponse(payload.to_dict())

    async def answer(self, sid: str, body: SubmitAnswerRequest) -> Response:
        try:
            result = await self.manager.submit_answer_async(sid, body.to_submission())
        except InterviewError as exc:
            raise _http_error(exc) from exc
        return JSONResponse(result.to_dict())

    async def result(self, sid: str) -> Response:
        try:
            payload = await self.manager.session_result_async(sid)
        except InterviewError as exc:
            raise _http_error(exc) from exc
        return JSONResponse(payload.to_dict())

    async def speech(self, body: SpeechRequest) -> Response:
        try:
            audio = await self.manager.synthesize_speech_async(body.text)
        except InterviewError as exc:
            raise _http_error(exc) from exc
        return Response(content=audio, media_type="audio/mpeg")


def create_session_router(manager: SessionManager) -> APIRouter:
    controller = _SessionController(manager)

    router = APIRouter(prefix="/api/v1", tags=["sessions"])

    @router.post("/sessions", status_code=201)
    async def create_session(body: CreateSessionRequest | None = None) -> Response:
        return await controller.create(body or CreateSessionRequest())

    @router.get("/sessions/{sid}/question")
    async def get_question(sid: str) -> Response:
        return await controller.question(sid)

    @router.post("/sessions/{sid}/answer")
    async def post_answer(sid: str, body: SubmitAnswerRequest) -> Response:
        return await controller.answer(sid, body)

    @router.get("/sessions/{sid}/result")
    async def get_result(sid: str) -> Response:
        return await controller.result(sid)

    @router.post("/tts", tags=["speech"])
    async def post_speech(body: SpeechRequest) -> Response:
        return await controller.speech(body)

    return router
