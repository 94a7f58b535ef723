from __future__ import annotations

import base64

from fastapi.testclient import TestClient

from interviewcoach.core.catalog import QUESTION_BANK
from interviewcoach.features.session import SessionManager
from interviewcoach.web.app import create_app

BASE = "/api/v1/sessions"


def _client(manager: SessionManager) -> TestClient:
    return TestClient(create_app(manager))


def test_healthz(manager: SessionManager):
    response = _client(manager).get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_create_session_returns_first_prompt(manager: SessionManager):
    client = _client(manager)

    response = client.post(BASE, json={"questionCount": 2, "allowFollowUps": False})

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "in_progress"
    assert data["allowFollowUps"] is False
    assert data["questionNumber"] == 1
    assert data["totalQuestions"] == 2
    assert data["promptType"] == "question"
    assert data["prompt"] == QUESTION_BANK[0]
    assert manager.get_session(data["sessionId"]).total_questions == 2


def test_create_session_without_body_uses_defaults(manager: SessionManager):
    response = _client(manager).post(BASE)

    assert response.status_code == 201
    data = response.json()
    assert data["totalQuestions"] == 3
    assert data["allowFollowUps"] is True


def test_create_session_clamps_large_counts(manager: SessionManager):
    response = _client(manager).post(BASE, json={"questionCount": 50})

    assert response.status_code == 201
    assert response.json()["totalQuestions"] == len(QUESTION_BANK)


def test_create_session_rejects_unknown_fields(manager: SessionManager):
    response = _client(manager).post(BASE, json={"questionCount": 2, "bogus": True})

    assert response.status_code == 400
    assert "error" in response.json()


def test_full_flow_with_follow_up(manager: SessionManager, coach):
    coach.follow_ups = ["What would you change next time?"]
    client = _client(manager)
    sid = client.post(BASE, json={"questionCount": 1}).json()["sessionId"]

    first = client.post(f"{BASE}/{sid}/answer", json={"answerText": "We rolled back.", "responseDelaySec": 4.5})
    assert first.status_code == 200
    body = first.json()
    assert body["promptType"] == "follow_up"
    assert body["nextPrompt"] == "What would you change next time?"
    assert body["usedTranscript"] == "We rolled back."
    assert body["result"] is None

    question = client.get(f"{BASE}/{sid}/question").json()
    assert question["promptType"] == "follow_up"
    assert question["questionNumber"] == 1

    pending = client.get(f"{BASE}/{sid}/result").json()
    assert pending == {"sessionId": sid, "status": "in_progress", "result": None}

    second = client.post(f"{BASE}/{sid}/answer", json={"answerText": "Add canaries.", "responseDelaySec": 1.5})
    done = second.json()
    assert done["status"] == "completed"
    assert done["promptType"] == "completed"
    assert done["nextPrompt"] is None
    timing = done["result"]["timingSummary"]
    assert timing == {"avgResponseDelaySec": 3.0, "longPausesCount": 1, "totalTurns": 2}
    assert set(done["result"]) == {"timingSummary", "corrections", "improvedBestAnswer", "interviewTips"}

    result = client.get(f"{BASE}/{sid}/result").json()
    assert result["status"] == "completed"
    assert result["result"] == done["result"]

    closed = client.get(f"{BASE}/{sid}/question").json()
    assert closed["prompt"] is None
    assert closed["promptType"] == "completed"


def test_answer_on_completed_session_is_bad_request(manager: SessionManager):
    client = _client(manager)
    sid = client.post(BASE, json={"questionCount": 1, "allowFollowUps": False}).json()["sessionId"]
    client.post(f"{BASE}/{sid}/answer", json={"answerText": "Done."})

    response = client.post(f"{BASE}/{sid}/answer", json={"answerText": "Again."})

    assert response.status_code == 400
    assert response.json() == {"error": "Session is already completed."}


def test_answer_without_content_is_bad_request(manager: SessionManager):
    client = _client(manager)
    sid = client.post(BASE, json={}).json()["sessionId"]

    response = client.post(f"{BASE}/{sid}/answer", json={})

    assert response.status_code == 400
    assert "answerText" in response.json()["error"]


def test_audio_answer_via_api(manager: SessionManager, transcriber):
    client = _client(manager)
    sid = client.post(BASE, json={"allowFollowUps": False}).json()["sessionId"]
    audio = base64.b64encode(b"fake-webm-bytes").decode("ascii")

    response = client.post(f"{BASE}/{sid}/answer", json={"audioBase64": audio, "mimeType": "audio/webm"})

    assert response.status_code == 200
    assert response.json()["usedTranscript"] == "transcribed answer"
    assert transcriber.calls == [(b"fake-webm-bytes", "audio/webm")]


def test_blank_transcription_is_bad_request(manager: SessionManager, transcriber):
    transcriber.text = "   "
    client = _client(manager)
    sid = client.post(BASE, json={}).json()["sessionId"]
    audio = base64.b64encode(b"silence").decode("ascii")

    response = client.post(f"{BASE}/{sid}/answer", json={"audioBase64": audio})

    assert response.status_code == 400
    assert response.json() == {"error": "Transcription returned empty text."}


def test_unknown_session_is_not_found(manager: SessionManager):
    client = _client(manager)

    for response in (
        client.get(f"{BASE}/nope/question"),
        client.get(f"{BASE}/nope/result"),
        client.post(f"{BASE}/nope/answer", json={"answerText": "hi"}),
    ):
        assert response.status_code == 404
        assert response.json() == {"error": "session 'nope' not found"}


def test_tts_returns_mpeg_audio(manager: SessionManager, synthesizer):
    client = _client(manager)

    response = client.post("/api/v1/tts", json={"text": "Welcome to the interview."})

    assert response.status_code == 200
    assert response.headers["content-type"] == "audio/mpeg"
    assert response.content == b"ID3-fake-mp3"
    assert synthesizer.calls == ["Welcome to the interview."]


def test_tts_rejects_empty_text(manager: SessionManager):
    response = _client(manager).post("/api/v1/tts", json={"text": ""})

    assert response.status_code == 400


def test_app_lifespan_restarts_worker_pool(manager: SessionManager):
    with _client(manager) as client:
        assert client.post(BASE, json={}).status_code == 201

    # Shutdown released the pool; a new client must still be served.
    with _client(manager) as client:
        assert client.post(BASE, json={}).status_code == 201
