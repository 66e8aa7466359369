import requests

from conftest import FakeTransport, text_payload
from genai_service import FALLBACKS, AssistantSession, DraftBoard, GenerativeService


def test_unconfigured_service_never_calls_transport():
    transport = FakeTransport(payload=text_payload("should not be used"))
    genai = GenerativeService(api_key="", transport=transport)

    assert genai.is_configured is False
    assert genai.generate_car_description("Toyota", "Land Cruiser", 2022, "Excellent") == \
        "API Key missing. Please configure your API key."
    assert genai.generate_lead_email("Michael Chen", "2022 Toyota Land Cruiser", "New") == "API Key missing."
    assert genai.generate_image("2022 Toyota Land Cruiser") is None
    assert genai.chat([], "hello") == FALLBACKS["assistant"][0]
    assert len(transport.calls) == 0


def test_text_generation_posts_prompt_with_key():
    transport = FakeTransport(payload=text_payload("A pristine VXR."))
    genai = GenerativeService(api_key="secret", transport=transport, api_base="https://api.test/v1beta",
                              text_model="text-model")

    text = genai.generate_car_description("Toyota", "Land Cruiser", 2022, "Excellent condition, 15000 miles")

    assert text == "A pristine VXR."
    assert len(transport.calls) == 1
    call = transport.calls[0]
    assert call["url"] == "https://api.test/v1beta/models/text-model:generateContent"
    assert call["headers"]["x-goog-api-key"] == "secret"
    prompt = call["json"]["contents"][0]["parts"][0]["text"]
    assert "2022 Toyota Land Cruiser" in prompt
    assert "Excellent condition, 15000 miles" in prompt


def test_transport_error_becomes_fallback_string():
    transport = FakeTransport(error=requests.ConnectionError("boom"))
    genai = GenerativeService(api_key="secret", transport=transport)

    assert genai.generate_car_description("BMW", "X5", 2023, "") == "Failed to generate description. Please try again."
    assert genai.generate_lead_email("Sarah", "2023 BMW X5 M50i", "Contacted") == "Failed to generate email."
    assert genai.generate_image("BMW X5") is None


def test_http_error_status_becomes_fallback_string():
    genai = GenerativeService(api_key="secret", transport=FakeTransport(payload={}, status_code=500))
    assert genai.generate_lead_email("Sarah", "2023 BMW X5 M50i", "Contacted") == "Failed to generate email."


def test_empty_response_uses_empty_fallback():
    genai = GenerativeService(api_key="secret", transport=FakeTransport(payload={"candidates": []}))
    assert genai.generate_lead_email("Sarah", "2023 BMW X5 M50i", "Contacted") == "No email generated."


def test_image_returns_data_uri():
    payload = {"candidates": [{"content": {"parts": [
        {"text": "Here is your car"},
        {"inlineData": {"mimeType": "image/png", "data": "iVBORw0KGgo="}},
    ]}}]}
    genai = GenerativeService(api_key="secret", transport=FakeTransport(payload=payload))

    assert genai.generate_image("2024 Nissan Patrol") == "data:image/png;base64,iVBORw0KGgo="


def test_image_without_inline_data_is_none():
    genai = GenerativeService(api_key="secret", transport=FakeTransport(payload=text_payload("no image")))
    assert genai.generate_image("2024 Nissan Patrol") is None


def test_draft_board_discards_stale_response():
    board = DraftBoard()
    first = board.begin("lead:lead1")
    second = board.begin("lead:lead1")

    assert board.apply("lead:lead1", second, "newer draft") is True
    assert board.apply("lead:lead1", first, "slow older draft") is False
    assert board.get("lead:lead1") == "newer draft"


def test_draft_board_slots_are_independent():
    board = DraftBoard()
    a = board.begin("lead:lead1")
    b = board.begin("lead:lead2")

    assert board.apply("lead:lead1", a, "one") is True
    assert board.apply("lead:lead2", b, "two") is True
    assert board.get("lead:lead1") == "one"
    assert board.get("lead:missing") is None


def test_assistant_session_keeps_history():
    transport = FakeTransport(payload=text_payload("The G 63 is our top seller."))
    genai = GenerativeService(api_key="secret", transport=transport)
    session = AssistantSession()

    reply = session.send(genai, "What sells best?")

    assert reply == "The G 63 is our top seller."
    assert [m["role"] for m in session.messages] == ["model", "user", "model"]
    body = transport.calls[0]["json"]
    assert body["contents"][-1]["parts"][0]["text"] == "What sells best?"
    assert "ETIMAD" in body["systemInstruction"]["parts"][0]["text"]
