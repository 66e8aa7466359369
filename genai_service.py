"""
Generative content service (Gemini REST API).

Drafts car descriptions, lead emails and showroom images, and answers the
back-office assistant chat. This is an optional collaborator: with no API key
configured it returns fixed fallback values without touching the network,
and any failure is logged and turned into a fallback value. Callers never
see an exception from here.
"""
import itertools
import logging
import threading
from typing import Any, Dict, List, Optional

import requests

import config

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "AI features are disabled: set API_KEY in the environment to enable them."

# Per prompt kind: (missing key, failure, empty response)
FALLBACKS = {
    "car_description": (
        "API Key missing. Please configure your API key.",
        "Failed to generate description. Please try again.",
        "No description generated.",
    ),
    "lead_email": (
        "API Key missing.",
        "Failed to generate email.",
        "No email generated.",
    ),
    "assistant": (
        "API Key Required in Environment.",
        "Sorry, I encountered an error connecting to the AI service.",
        "",
    ),
}

PROMPTS = {
    "car_description": (
        "Write a compelling, professional, and exciting sales description (max 80 words) "
        "for a used car showroom listing.\n"
        "Car: {year} {make} {model}.\n"
        "Key Features/Notes: {features}.\n"
        "Focus on value, driving experience, and condition."
    ),
    "lead_email": (
        "Draft a professional and polite email from a car dealership sales agent to a customer.\n"
        "Customer Name: {lead_name}\n"
        "Context: They are interested in: {car_details}.\n"
        "Current Status: {status}.\n"
        "Goal: Encourage them to book a test drive or finalize the deal. Keep it under 150 words."
    ),
}

IMAGE_PROMPT = "A realistic, high-quality photo of a car: {prompt}. Photorealistic, showroom lighting, 4k."

ASSISTANT_INSTRUCTION = (
    "You are a helpful, professional AI assistant for a luxury used car dealership CRM called ETIMAD. "
    "You understand high-end cars, sales, and premium customer service."
)
ASSISTANT_GREETING = (
    "Hello! I'm your ETIMAD AI assistant. I can help you analyze market trends, draft content, "
    "or answer questions about your inventory."
)


class GenerativeService:
    def __init__(self, api_key: Optional[str] = None, transport=None, api_base: Optional[str] = None,
                 text_model: Optional[str] = None, image_model: Optional[str] = None,
                 timeout: Optional[float] = None) -> None:
        self.api_key = config.GEMINI_API_KEY if api_key is None else api_key
        self.transport = transport if transport is not None else requests.Session()
        self.api_base = (api_base or config.GEMINI_API_BASE).rstrip("/")
        self.text_model = text_model or config.GEMINI_TEXT_MODEL
        self.image_model = image_model or config.GEMINI_IMAGE_MODEL
        self.timeout = timeout or config.GEMINI_TIMEOUT

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    # ---------- Transport ----------

    def _generate(self, model: str, contents: List[Dict[str, Any]],
                  system_instruction: Optional[str] = None) -> Dict[str, Any]:
        body: Dict[str, Any] = {"contents": contents}
        if system_instruction:
            body["systemInstruction"] = {"parts": [{"text": system_instruction}]}
        resp = self.transport.post(
            f"{self.api_base}/models/{model}:generateContent",
            json=body,
            headers={"x-goog-api-key": self.api_key, "Content-Type": "application/json"},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()

    @staticmethod
    def _parts(data: Dict[str, Any]) -> List[Dict[str, Any]]:
        candidates = data.get("candidates") or []
        if not candidates:
            return []
        return (candidates[0].get("content") or {}).get("parts") or []

    @classmethod
    def _text(cls, data: Dict[str, Any]) -> str:
        return "".join(part.get("text", "") for part in cls._parts(data))

    # ---------- Public contract ----------

    def generate_text(self, kind: str, **args) -> str:
        missing, failed, empty = FALLBACKS[kind]
        if not self.is_configured:
            return missing
        prompt = PROMPTS[kind].format(**args)
        try:
            data = self._generate(self.text_model, [{"role": "user", "parts": [{"text": prompt}]}])
        except Exception as e:
            logger.error("Gemini Error (%s): %s", kind, e)
            return failed
        return self._text(data) or empty

    def generate_car_description(self, make: str, model: str, year: int, features: str) -> str:
        return self.generate_text("car_description", make=make, model=model, year=year, features=features)

    def generate_lead_email(self, lead_name: str, car_details: str, status: str) -> str:
        return self.generate_text("lead_email", lead_name=lead_name, car_details=car_details, status=status)

    def generate_image(self, prompt: str) -> Optional[str]:
        """Return a PNG data URI, or None when unconfigured, failed or empty."""
        if not self.is_configured:
            return None
        try:
            data = self._generate(
                self.image_model,
                [{"role": "user", "parts": [{"text": IMAGE_PROMPT.format(prompt=prompt)}]}],
            )
        except Exception as e:
            logger.error("Gemini Image Gen Error: %s", e)
            return None
        for part in self._parts(data):
            inline = part.get("inlineData") or part.get("inline_data")
            if inline and inline.get("data"):
                return f"data:image/png;base64,{inline['data']}"
        return None

    def chat(self, history: List[Dict[str, str]], message: str) -> str:
        missing, failed, _ = FALLBACKS["assistant"]
        if not self.is_configured:
            return missing
        contents = [{"role": m["role"], "parts": [{"text": m["text"]}]} for m in history]
        contents.append({"role": "user", "parts": [{"text": message}]})
        try:
            data = self._generate(self.text_model, contents, system_instruction=ASSISTANT_INSTRUCTION)
        except Exception as e:
            logger.error("Chat Error: %s", e)
            return failed
        return self._text(data)


class DraftBoard:
    """
    Latest generated drafts, keyed by slot (e.g. "lead:lead1").

    Every request takes a ticket from a process-wide increasing sequence; a
    result is only stored if no newer request was started for the same slot,
    so a slow first response cannot overwrite a newer one.
    """

    def __init__(self) -> None:
        self._seq = itertools.count(1)
        self._latest: Dict[str, int] = {}
        self._drafts: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def begin(self, slot: str) -> int:
        with self._lock:
            ticket = next(self._seq)
            self._latest[slot] = ticket
            return ticket

    def apply(self, slot: str, ticket: int, value: Any) -> bool:
        with self._lock:
            if self._latest.get(slot) != ticket:
                logger.debug("Discarding stale draft for %s (ticket %s)", slot, ticket)
                return False
            self._drafts[slot] = value
            return True

    def get(self, slot: str) -> Any:
        return self._drafts.get(slot)


class AssistantSession:
    def __init__(self) -> None:
        self.messages: List[Dict[str, str]] = [{"role": "model", "text": ASSISTANT_GREETING}]

    def send(self, genai: GenerativeService, message: str) -> str:
        history = self.messages[1:]
        self.messages.append({"role": "user", "text": message})
        reply = genai.chat(history, message)
        self.messages.append({"role": "model", "text": reply})
        return reply
