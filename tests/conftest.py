"""Shared fixtures and fake Gemini clients for the test suite."""

import asyncio
import io

import pytest
from PIL import Image

from vocabart.errors import TransportFailure
from vocabart.gemini.image import ImageClient
from vocabart.utils.image import to_data_uri


def make_png(color=(255, 0, 0), size=(32, 24)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, "PNG")
    return buf.getvalue()


def image_response(b64: str = "aGVsbG8=", mime: str = "image/png") -> dict:
    """A generateContent body carrying one inline image."""
    return {
        "candidates": [{
            "content": {
                "parts": [
                    {"text": "Here is your image."},
                    {"inlineData": {"mimeType": mime, "data": b64}},
                ]
            }
        }]
    }


class RecordingSleep:
    """Stand-in for asyncio.sleep that records delays without waiting."""

    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


class ScriptedClient(ImageClient):
    """ImageClient whose transport replays a fixed list of outcomes.

    Each outcome is a response dict, or an exception instance to raise.
    """

    def __init__(self, outcomes, api_key="test-key", **kwargs):
        kwargs.setdefault("sleep", RecordingSleep())
        super().__init__(api_key, **kwargs)
        self.outcomes = list(outcomes)
        self.payloads = []

    async def _post(self, payload):
        self.payloads.append(payload)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeDeckClient(ImageClient):
    """ImageClient that answers per term after an optional delay.

    Terms in `failing` resolve to None, as an exhausted retry budget would.
    """

    def __init__(self, failing=(), latencies=None, api_key="test-key"):
        super().__init__(api_key)
        self.failing = set(failing)
        self.latencies = latencies or {}
        self.calls = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def generate(self, card, style=None):
        self.check_credentials()
        self.calls.append((card.term, card.custom_prompt, style))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.latencies.get(card.term, 0))
        finally:
            self.in_flight -= 1
        if card.term in self.failing:
            return None
        return to_data_uri(f"{card.term}:{card.custom_prompt or ''}".encode("utf-8"))


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def png_data_uri(png_bytes) -> str:
    return to_data_uri(png_bytes)


@pytest.fixture
def transport_error() -> TransportFailure:
    return TransportFailure("HTTP 503: unavailable", status=503)


class TermScriptedClient(ImageClient):
    """ImageClient whose transport answers by the term named in the prompt.

    Terms missing from `bodies` get a valid image response.
    """

    def __init__(self, bodies, api_key="test-key", **kwargs):
        kwargs.setdefault("sleep", RecordingSleep())
        super().__init__(api_key, **kwargs)
        self.bodies = bodies

    async def _post(self, payload):
        text = payload["contents"][0]["parts"][0]["text"]
        for term, body in self.bodies.items():
            if f'"{term}"' in text:
                return body
        return image_response()
