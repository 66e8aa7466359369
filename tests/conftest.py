import pytest
from fastapi.testclient import TestClient

import main
from genai_service import AssistantSession, DraftBoard, GenerativeService
from store import AppState


class FakeResponse:
    def __init__(self, payload=None, status_code=200):
        self.payload = payload or {}
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise RuntimeError(f"HTTP {self.status_code}")

    def json(self):
        return self.payload


class FakeTransport:
    """Stands in for requests.Session; records every POST."""

    def __init__(self, payload=None, error=None, status_code=200):
        self.payload = payload
        self.error = error
        self.status_code = status_code
        self.calls = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return FakeResponse(self.payload, self.status_code)


def text_payload(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


@pytest.fixture
def store():
    return AppState()


@pytest.fixture
def transport():
    return FakeTransport(payload=text_payload("Generated text"))


@pytest.fixture
def client(transport):
    main.app.state.store = AppState()
    main.app.state.genai = GenerativeService(api_key="", transport=transport)
    main.app.state.drafts = DraftBoard()
    main.app.state.assistant = AssistantSession()
    return TestClient(main.app)
