from __future__ import annotations

from typing import Any

from openai import OpenAI

__all__ = ["OpenAISpeechSynthesizer", "OpenAITranscriber", "extension_for_mime_type"]

_EXTENSIONS = {
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/mpeg": "mp3",
    "audio/webm": "webm",
}


def extension_for_mime_type(mime_type: str) -> str:
    return _EXTENSIONS.get((mime_type or "").strip().lower(), "wav")


def _transcript_text(transcript: Any) -> str:
    if isinstance(transcript, str):
        return transcript.strip()

    text = getattr(transcript, "text", None)
    if isinstance(text, str) and text.strip():
        return text.strip()

    segments = getattr(transcript, "segments", None) or []
    parts: list[str] = []
    for segment in segments:
        value = segment.get("text") if isinstance(segment, dict) else getattr(segment, "text", None)
        if isinstance(value, str) and value.strip():
            parts.append(value.strip())
    return " ".join(parts).strip()


class OpenAITranscriber:
    def __init__(self, client: OpenAI, model: str) -> None:
        self._client = client
        self._model = model

    def transcribe(self, audio: bytes, mime_type: str) -> str:
        filename = f"answer.{extension_for_mime_type(mime_type)}"
        transcript = self._client.audio.transcriptions.create(
            model=self._model,
            file=(filename, audio, mime_type),
        )
        return _transcript_text(transcript)


class OpenAISpeechSynthesizer:
    """Render interviewer text to MP3 audio."""

    def __init__(self, client: OpenAI, model: str, voice: str) -> None:
        self._client = client
        self._model = model
        self._voice = voice

    def synthesize(self, text: str) -> bytes:
        response = self._client.audio.speech.create(
            model=self._model,
            voice=self._voice,
            input=text,
            response_format="mp3",
        )
        return response.content
