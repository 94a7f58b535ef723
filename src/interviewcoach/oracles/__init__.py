"""External capabilities: coaching, transcription and speech synthesis."""

from .base import InterviewCoach, SpeechSynthesizer, Transcriber
from .coach import OpenAIInterviewCoach
from .openai_client import create_openai_client, verify_openai_auth
from .speech import OpenAISpeechSynthesizer, OpenAITranscriber

__all__ = [
    "InterviewCoach",
    "OpenAIInterviewCoach",
    "OpenAISpeechSynthesizer",
    "OpenAITranscriber",
    "SpeechSynthesizer",
    "Transcriber",
    "create_openai_client",
    "verify_openai_auth",
]
