"""
Helpers for async streams handed out by provider SDKs.
"""
import inspect
import logging
from typing import Any

logger = logging.getLogger(__name__)


async def close_stream(stream: Any) -> None:
    """Close an SDK stream or async generator, whichever interface it has.

    Errors while closing are logged; the stream is finished either way.
    """
    close = getattr(stream, "aclose", None) or getattr(stream, "close", None)
    if close is None:
        return
    try:
        result = close()
        if inspect.isawaitable(result):
            await result
    except Exception:
        logger.warning("Error while closing provider stream", exc_info=True)
