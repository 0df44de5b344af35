"""
Chunk Stream Relay for sitesketch

Turns the AI capability's chunk sequence into Server-Sent Events frames.
Every path through the relay ends with the close marker unless the client
itself went away.
"""
from __future__ import annotations
import asyncio
import logging
from typing import AsyncGenerator, AsyncIterator

from sitesketch.exceptions import SiteSketchError
from sitesketch.models.events import ChunkEvent, CLOSE_EVENT
from sitesketch.models.request import GenerationRequest
from sitesketch.services.ai_service import AIService
from sitesketch.utils.streams import close_stream

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An error occurred while generating the website"

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no"
}


def user_error_message(exc: BaseException) -> str:
    """Message safe to put in an error event."""
    if isinstance(exc, SiteSketchError):
        return str(exc)
    return GENERIC_ERROR_MESSAGE


async def relay_chunks(chunks: AsyncIterator[str]) -> AsyncGenerator[str, None]:
    """Relay text chunks as SSE frames.

    Provider failures become a single error event. A client disconnect
    (generator closed or task cancelled) stops iteration of the provider
    stream and is not treated as an error.
    """
    try:
        try:
            async for text in chunks:
                if text:
                    yield ChunkEvent(text=text).encode()
        except (GeneratorExit, asyncio.CancelledError):
            logger.info("Client disconnected; stopping relay")
            raise
        except Exception as exc:
            logger.exception("Generation failed: %s", exc)
            yield ChunkEvent(error=user_error_message(exc)).encode()

        yield CLOSE_EVENT
    finally:
        await close_stream(chunks)


def relay_generation(ai_service: AIService, request: GenerationRequest) -> AsyncGenerator[str, None]:
    """Start the provider stream for a request and relay it."""
    chunks = ai_service.stream_website_code(
        provider=request.provider,
        model=request.model,
        prompt=request.provider_prompt,
        images=request.images,
    )
    return relay_chunks(chunks)
