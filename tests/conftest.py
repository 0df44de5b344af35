"""Pytest configuration and fixtures

Shared helpers for building scripted SSE streams and fake AI services.
"""

import json
import sys
from pathlib import Path
from typing import Iterable, List

import httpx
import pytest

# Add project root to sys.path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from sitesketch.config import Settings
from sitesketch.models.request import ImagePayload


def sse_text(text: str) -> str:
    return f"data: {json.dumps({'text': text})}\n\n"


def sse_error(message: str) -> str:
    return f"data: {json.dumps({'error': message})}\n\n"


SSE_CLOSE = "event: close\n\n"


class FakeAIService:
    """Stands in for AIService; yields scripted chunks, optionally failing."""

    def __init__(self, chunks: Iterable[str] = (), fail_after: int = -1, error: Exception = None):
        self.chunks = list(chunks)
        self.fail_after = fail_after
        self.error = error or RuntimeError("provider exploded")
        self.calls: List[dict] = []
        self.closed = False

    def available_models(self):
        return {"google": ["gemini-1.5-flash"], "openai": ["gpt-4o"]}

    async def stream_website_code(self, provider, model, prompt, images=()):
        self.calls.append({"provider": provider, "model": model, "prompt": prompt, "images": list(images)})
        try:
            for i, chunk in enumerate(self.chunks):
                if i == self.fail_after:
                    raise self.error
                yield chunk
            if self.fail_after == len(self.chunks):
                raise self.error
        finally:
            self.closed = True


@pytest.fixture
def settings():
    return Settings(_env_file=None, max_images=5, max_upload_bytes=1024)


@pytest.fixture
def make_image():
    def _make(size: int = 10, name: str = "ref.png") -> ImagePayload:
        return ImagePayload(filename=name, mime_type="image/png", data=b"x" * size)
    return _make


def sse_transport(pieces: Iterable[bytes], calls: list = None, status_code: int = 200) -> httpx.MockTransport:
    """Transport answering every request with the given body pieces, one read each."""
    pieces = list(pieces)

    async def _body():
        for piece in pieces:
            yield piece

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        if status_code != 200:
            return httpx.Response(status_code, json={"detail": b"".join(pieces).decode()})
        return httpx.Response(200, headers={"content-type": "text/event-stream"}, content=_body())

    return httpx.MockTransport(handler)
