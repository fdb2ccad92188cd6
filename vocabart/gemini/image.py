"""Gemini image generation over aiohttp.

One `ImageClient` owns one pooled session. `generate()` runs a bounded
retry loop for a single card and always resolves: a data URI on success,
None once the attempt budget is spent.
"""

import asyncio
import enum
import logging
from typing import Any, Awaitable, Callable, Iterable, Optional

import aiohttp

from vocabart.cards.model import Card
from vocabart.config import (
    DEFAULT_BACKOFF_BASE_S,
    DEFAULT_HTTP_TIMEOUT_S,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MODEL,
    Settings,
)
from vocabart.errors import PreconditionError, TransportFailure
from vocabart.gemini.prompt import STYLE_KEYWORDS, build_prompt

logger = logging.getLogger(__name__)

GEMINI_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"


class RetryState(enum.Enum):
    ATTEMPTING = "attempting"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"


def build_payload(prompt: str) -> dict:
    """Request body for a single text-to-image call."""
    return {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": {"responseModalities": ["TEXT", "IMAGE"]},
    }


def extract_image(data: Any) -> str:
    """Pull the first inline image out of a generateContent response as a data URI.

    Raises:
        TransportFailure: If the response carries no inline image data.
    """
    if not isinstance(data, dict):
        raise TransportFailure("Response body is not a JSON object")

    candidates = data.get("candidates") or []
    if not isinstance(candidates, list) or not candidates:
        raise TransportFailure("No candidates returned")

    candidate = candidates[0]
    content = candidate.get("content") if isinstance(candidate, dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        raise TransportFailure("Candidate has no content parts")

    for p in parts:
        inline = p.get("inlineData") if isinstance(p, dict) else None
        if not isinstance(inline, dict):
            continue
        b64 = inline.get("data")
        if b64 and isinstance(b64, str):
            mime = inline.get("mimeType")
            if not isinstance(mime, str) or not mime:
                mime = "image/png"
            return f"data:{mime};base64,{b64}"

    raise TransportFailure("No image inlineData found in response")


class ImageClient:
    """Client for Gemini text-to-image requests with linear backoff."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        *,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        backoff_base_s: float = DEFAULT_BACKOFF_BASE_S,
        timeout_s: float = DEFAULT_HTTP_TIMEOUT_S,
        keywords: Iterable[str] = STYLE_KEYWORDS,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.api_key = (api_key or "").strip()
        self.model = model
        self.max_attempts = max_attempts
        self.backoff_base_s = backoff_base_s
        self.timeout_s = timeout_s
        self.keywords = frozenset(keywords)
        self._sleep = sleep
        self._session: Optional[aiohttp.ClientSession] = None
        self._session_lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "ImageClient":
        return cls(
            settings.api_key,
            settings.model,
            max_attempts=settings.max_attempts,
            backoff_base_s=settings.backoff_base_s,
            timeout_s=settings.http_timeout_s,
            **kwargs,
        )

    @property
    def endpoint(self) -> str:
        return GEMINI_ENDPOINT.format(model=self.model)

    def check_credentials(self) -> None:
        """Raise PreconditionError if no API key is configured."""
        if not self.api_key:
            raise PreconditionError("Gemini API key is not set (GEMINI_API_KEY or --api-key).")

    async def _get_session(self) -> aiohttp.ClientSession:
        async with self._session_lock:
            if self._session is None or self._session.closed:
                self._session = aiohttp.ClientSession(
                    headers={"Content-Type": "application/json", "x-goog-api-key": self.api_key},
                    timeout=aiohttp.ClientTimeout(total=self.timeout_s),
                )
            return self._session

    async def close(self) -> None:
        async with self._session_lock:
            if self._session and not self._session.closed:
                await self._session.close()
            self._session = None

    async def __aenter__(self) -> "ImageClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _post(self, payload: dict) -> Any:
        """Send one request and return the decoded JSON body.

        Raises:
            TransportFailure: On non-2xx status, network error, timeout or bad JSON.
        """
        session = await self._get_session()
        try:
            async with session.post(self.endpoint, json=payload) as resp:
                if resp.status < 200 or resp.status >= 300:
                    body = await resp.text()
                    raise TransportFailure(f"HTTP {resp.status}: {body[:300]}", status=resp.status)
                return await resp.json(content_type=None)
        except asyncio.TimeoutError as e:
            raise TransportFailure(f"Request timed out after {self.timeout_s}s") from e
        except aiohttp.ClientError as e:
            raise TransportFailure(f"{type(e).__name__}: {e}") from e
        except ValueError as e:
            raise TransportFailure(f"Invalid JSON response: {e}") from e

    async def _attempt(self, payload: dict) -> str:
        data = await self._post(payload)
        return extract_image(data)

    async def generate(self, card: Card, style: Optional[str] = None) -> Optional[str]:
        """Generate an image for `card`.

        Returns:
            A data URI, or None after `max_attempts` failed attempts.

        Raises:
            PreconditionError: If no API key is configured. No request is made.
        """
        self.check_credentials()

        prompt = build_prompt(card.term, card.custom_prompt, style, keywords=self.keywords)
        payload = build_payload(prompt)

        attempt = 1
        state = RetryState.ATTEMPTING
        image = None

        while state is RetryState.ATTEMPTING:
            try:
                image = await self._attempt(payload)
                state = RetryState.SUCCEEDED
            except TransportFailure as e:
                logger.warning(f"Attempt {attempt}/{self.max_attempts} for {card.term!r} failed: {e}")
                if attempt >= self.max_attempts:
                    state = RetryState.EXHAUSTED
                else:
                    delay = self.backoff_base_s * attempt
                    logger.debug(f"Retrying {card.term!r} in {delay:.1f}s")
                    await self._sleep(delay)
                    attempt += 1

        if state is RetryState.EXHAUSTED:
            logger.error(f"Image generation failed for {card.term!r} after {self.max_attempts} attempts")
            return None

        return image
