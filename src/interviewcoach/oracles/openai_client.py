from __future__ import annotations

import logging

from openai import APIStatusError, OpenAI, OpenAIError

from ..core.config import Settings

logger = logging.getLogger(__name__)


def create_openai_client(settings: Settings) -> OpenAI:
    api_key = settings.openai_api_key.strip()
    if not api_key:
        raise RuntimeError("Missing OPENAI_API_KEY. Add it to the environment or a .env file.")
    return OpenAI(api_key=api_key)


def verify_openai_auth(client: OpenAI) -> None:
    """Fail fast at startup when the key is rejected."""

    try:
        client.models.list()
    except APIStatusError as exc:
        if exc.status_code in (401, 403):
            raise RuntimeError(
                f"OpenAI auth verification failed ({exc.status_code}). Check OPENAI_API_KEY and project permissions."
            ) from exc
        raise RuntimeError(f"OpenAI auth verification request failed: {exc}") from exc
    except OpenAIError as exc:
        raise RuntimeError(f"OpenAI auth verification request failed: {exc}") from exc
    logger.debug("OpenAI credentials verified")
