"""Tests for the HTTP API routes."""
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

import auth
import llm
from errors import UpstreamError, EmptyResponseError, ConfigurationError
from history import encode_cursor
from routes import router


@pytest.fixture()
def client(history_db):
    app = FastAPI()
    app.include_router(router)
    with TestClient(app) as test_client:
        yield test_client


def test_health_reports_missing_key(client, monkeypatch):
    monkeypatch.setattr(llm, "GEMINI_API_KEY", "")
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "degraded"
    assert resp.json()["gemini"]["configured"] is False


def test_modes(client):
    data = client.get("/api/modes").json()
    assert data["modes"] == ["en-paisa", "en-boricua", "paisa-boricua"]
    assert data["directions"] == ["forward", "reverse"]
    assert data["labels"]["en-paisa"]["reverse"] == "Paisa → English"


def test_user_id_is_issued(client):
    first = client.get("/api/user-id").json()["user_id"]
    second = client.get("/api/user-id").json()["user_id"]
    assert first != second
    assert auth.USER_ID_PATTERN.match(first)


def test_translate_requires_user_id(client, fake_gemini):
    resp = client.post("/api/translate", json={"text": "hi"})
    assert resp.status_code == 400
    resp = client.post("/api/translate", json={"text": "hi"}, headers={"X-User-Id": "bad id!"})
    assert resp.status_code == 400


def test_translate_saves_record(client, fake_gemini, user_headers, user_id):
    resp = client.post("/api/translate", headers=user_headers,
                       json={"text": "  what's up  ", "mode": "en-paisa"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["translation"] == "Qué más pues, parce"
    assert data["record"]["user_id"] == user_id
    assert data["record"]["input_text"] == "what's up"
    assert "Translate this:\nwhat's up" in fake_gemini.calls[0]["prompt"]

    history = client.get("/api/history", headers=user_headers).json()
    assert [r["id"] for r in history["translations"]] == [data["record"]["id"]]
    assert history["has_more"] is False


def test_translate_validation(client, fake_gemini, user_headers):
    assert client.post("/api/translate", headers=user_headers, json={"text": "   "}).status_code == 400
    too_long = "a" * 2001
    assert client.post("/api/translate", headers=user_headers, json={"text": too_long}).status_code == 400
    bad_mode = client.post("/api/translate", headers=user_headers, json={"text": "hi", "mode": "en-chilango"})
    assert bad_mode.status_code == 422
    assert fake_gemini.calls == []


@pytest.mark.parametrize("error, status", [
    (ConfigurationError("GEMINI_API_KEY is not set in environment variables."), 503),
    (UpstreamError("quota exceeded", status=429), 502),
    (EmptyResponseError("Gemini returned an empty response."), 502),
])
def test_translate_errors_map_to_status(client, fake_gemini, user_headers, error, status):
    fake_gemini.translation = error
    resp = client.post("/api/translate", headers=user_headers, json={"text": "hi"})
    assert resp.status_code == status
    assert resp.json()["detail"] == error.message
    assert client.get("/api/history", headers=user_headers).json()["translations"] == []


def test_explain_returns_parsed_explanation(client, fake_gemini):
    resp = client.post("/api/explain", json={
        "input_text": "what's up", "output_text": "Qué más pues, parce", "mode": "en-paisa",
    })
    assert resp.status_code == 200
    explanation = resp.json()["explanation"]
    assert explanation["tone"] == "warm, street-smart"
    assert len(explanation["annotations"]) == 2


def test_explain_failure_returns_null(client, fake_gemini):
    fake_gemini.explanation = UpstreamError("overloaded", status=503)
    resp = client.post("/api/explain", json={"input_text": "a", "output_text": "b"})
    assert resp.status_code == 200
    assert resp.json() == {"explanation": None}


def test_history_pages_through_cursor(client, fake_gemini, user_headers):
    for i in range(12):
        fake_gemini.translation = f"salida {i}"
        assert client.post("/api/translate", headers=user_headers, json={"text": f"input {i}"}).status_code == 200

    first = client.get("/api/history", headers=user_headers).json()
    assert len(first["translations"]) == 10 and first["has_more"] is True
    second = client.get("/api/history", headers=user_headers, params={"cursor": first["next_cursor"]}).json()
    assert len(second["translations"]) == 2 and second["has_more"] is False
    ids = [r["id"] for r in first["translations"] + second["translations"]]
    assert len(set(ids)) == 12


def test_history_rejects_bad_cursor(client, user_headers):
    resp = client.get("/api/history", headers=user_headers, params={"cursor": "garbage"})
    assert resp.status_code == 400
    huge = client.get("/api/history", headers=user_headers, params={"cursor": encode_cursor(1.0, 10 ** 30)})
    assert huge.status_code == 400
    assert huge.json()["detail"] == "Invalid cursor"


def test_rate_limit(client, fake_gemini, user_headers, monkeypatch):
    monkeypatch.setattr(auth, "RATE_LIMIT_REQUESTS", 2)
    codes = [client.get("/api/history", headers=user_headers).status_code for _ in range(3)]
    assert codes == [200, 200, 429]


def test_export_csv(client):
    records = [
        {"id": "r1", "user_id": "user-export", "input_text": 'he said "hey"', "output_text": "dijo",
         "mode": "en-paisa", "created_at": "2026-03-01T12:00:00+00:00"},
        {"id": "r2", "user_id": "user-export", "input_text": "b", "output_text": "c",
         "mode": "en-boricua", "created_at": "2026-03-01T12:00:01+00:00"},
    ]
    resp = client.post("/api/export-csv", json=records)
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert 'filename="translations.csv"' in resp.headers["content-disposition"]
    lines = resp.text.split("\n")
    assert len(lines) == 3
    assert '"he said ""hey"""' in lines[1]


def test_session_flow(client, fake_gemini, user_headers):
    state = client.get("/api/session", headers=user_headers).json()
    assert state["mode"] == "en-paisa" and state["sidebar_open"] is True

    client.post("/api/session/mode", headers=user_headers, json={"mode": "en-boricua"})
    client.post("/api/session/input", headers=user_headers, json={"text": "hey bro"})
    fake_gemini.translation = "Wepa, mano"
    state = client.post("/api/session/translate", headers=user_headers).json()
    assert state["output_text"] == "Wepa, mano"
    assert state["mode"] == "en-boricua"
    assert state["history"][0]["input_text"] == "hey bro"

    state = client.post("/api/session/sidebar", headers=user_headers, json={}).json()
    assert state["sidebar_open"] is False

    record_id = state["history"][0]["id"]
    client.post("/api/session/input", headers=user_headers, json={"text": "changed"})
    state = client.post(f"/api/session/restore/{record_id}", headers=user_headers).json()
    assert state["input_text"] == "hey bro"
    toast_id = state["toasts"][-1]["id"]
    state = client.delete(f"/api/session/toasts/{toast_id}", headers=user_headers).json()
    assert all(t["id"] != toast_id for t in state["toasts"])

    export = client.get("/api/session/export", headers=user_headers)
    assert export.text.split("\n")[0] == "Date,Mode,Input,Output"


def test_session_history_routes(client, fake_gemini, user_headers):
    for i in range(11):
        client.post("/api/translate", headers=user_headers, json={"text": f"t{i}"})
    state = client.post("/api/session/history", headers=user_headers).json()
    assert len(state["history"]) == 10 and state["history_has_more"] is True
    state = client.post("/api/session/history/more", headers=user_headers).json()
    assert len(state["history"]) == 11 and state["history_has_more"] is False


def test_session_routes_share_rate_limit(client, fake_gemini, user_headers, monkeypatch):
    monkeypatch.setattr(auth, "RATE_LIMIT_REQUESTS", 3)
    assert client.post("/api/session/history", headers=user_headers).status_code == 200
    assert client.post("/api/session/history/more", headers=user_headers).status_code == 200
    assert client.post("/api/session/restore/missing-id", headers=user_headers).status_code == 200
    assert client.post("/api/session/history", headers=user_headers).status_code == 429
    assert client.post("/api/session/restore/missing-id", headers=user_headers).status_code == 429


def test_session_translate_rejects_long_input(client, fake_gemini, user_headers):
    client.post("/api/session/input", headers=user_headers, json={"text": "a" * 5000})
    state = client.post("/api/session/translate", headers=user_headers).json()
    assert fake_gemini.calls == []
    assert state["output_text"] == ""
    assert state["toasts"][-1]["message"] == "Input too long (max 2000 characters)"
