"""Shared fixtures for the Cheve test suite."""
import os

import pytest

import auth
import history
import llm
import session


class FakeGemini:
    """Stands in for llm.call_gemini. Set ``translation`` / ``explanation``
    to a string to return it, or to an exception instance to raise it."""

    def __init__(self):
        self.translation = "Qué más pues, parce"
        self.explanation = (
            "CONTEXT: Medellín streets where hustle and loyalty define everything. (warm, street-smart)\n"
            "WORD1: parce - close friend - shorthand for the deep brotherhood of Paisa street culture.\n"
            "WORD2: chimba - excellent or beautiful - the highest Paisa compliment."
        )
        self.calls = []

    async def __call__(self, prompt, max_tokens=llm.TRANSLATE_MAX_TOKENS, client=None):
        self.calls.append({"prompt": prompt, "max_tokens": max_tokens})
        reply = self.explanation if max_tokens == llm.EXPLAIN_MAX_TOKENS else self.translation
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture()
def history_db(tmp_path, monkeypatch):
    monkeypatch.setattr(history, "DB_PATH", tmp_path / "cheve-test.db")
    history.init_history_db()
    return history.DB_PATH


@pytest.fixture()
def fake_gemini(monkeypatch):
    fake = FakeGemini()
    monkeypatch.setattr(llm, "call_gemini", fake)
    monkeypatch.setattr(llm, "GEMINI_API_KEY", "test-key")
    monkeypatch.setattr(llm, "EXPLANATION_DELAY", 0)
    monkeypatch.setattr(session, "RESTORE_DELAY", 0)
    return fake


@pytest.fixture(autouse=True)
def fresh_runtime_state():
    auth._rate_buckets.clear()
    session.clear_sessions()
    yield
    session.clear_sessions()


@pytest.fixture()
def user_id():
    return auth.new_user_id()


@pytest.fixture()
def user_headers(user_id):
    return {"Content-Type": "application/json", "X-User-Id": user_id}


@pytest.fixture(scope="session")
def base_url():
    return os.environ.get("CHEVE_URL", "http://localhost:8848")
