"""
Incremental Code Assembler

Consumes raw text read from a generation stream, one network read at a time,
and appends cleaned chunk text to a SourceDocument.
"""
from __future__ import annotations
import json
import logging
import re
from typing import List, Optional

from sitesketch.models.events import DATA_PREFIX

logger = logging.getLogger(__name__)

FENCE_MARKER = re.compile(r"```\w*\n?")
LANG_PSEUDO_TAG = re.compile(r'<lang="[^"]*">')
STYLE_BRACED_BLOCK = re.compile(r"<style>\s*\{([\s\S]*?)\}\s*</style>")
STYLE_OPEN_BRACE = re.compile(r"<style>\s*\{")

CLOSE_LINE = "event: close"


def clean_chunk(text: str) -> str:
    """Strip generation artifacts from one chunk.

    Works on arbitrary fragments: it never needs text outside the chunk.
    """
    text = FENCE_MARKER.sub("", text)
    text = LANG_PSEUDO_TAG.sub("", text)
    text = text.strip()
    text = STYLE_BRACED_BLOCK.sub(r"<style>\1</style>", text)
    text = STYLE_OPEN_BRACE.sub("<style>", text)
    return text


class SourceDocument:
    """Accumulated website source for one generation.

    Append-only while streaming; frozen once committed to history.
    """

    def __init__(self, text: str = ""):
        self._parts: List[str] = [text] if text else []
        self._frozen = False

    @property
    def text(self) -> str:
        return "".join(self._parts)

    def append(self, text: str) -> None:
        if self._frozen:
            raise ValueError("SourceDocument is frozen")
        self._parts.append(text)

    def freeze(self) -> str:
        self._frozen = True
        return self.text

    def __len__(self) -> int:
        return sum(len(part) for part in self._parts)

    def __str__(self) -> str:
        return self.text


class StreamAssembler:
    """Turns SSE lines into appended source text."""

    def __init__(self, document: Optional[SourceDocument] = None):
        self.document = document if document is not None else SourceDocument()
        self.error: Optional[str] = None
        self.closed = False
        self._pending = ""

    @property
    def halted(self) -> bool:
        return self.error is not None

    def feed(self, raw: str) -> List[str]:
        """Process one network read; return the cleaned texts appended, in order.

        A trailing partial line is kept and completed by the next read.
        """
        data = self._pending + raw
        lines = data.split("\n")
        self._pending = lines.pop()
        appended = []
        for line in lines:
            text = self._process_line(line)
            if text is not None:
                appended.append(text)
        return appended

    def finish(self) -> List[str]:
        """Flush whatever partial line is left at end of stream."""
        line, self._pending = self._pending, ""
        text = self._process_line(line) if line else None
        return [text] if text is not None else []

    def _process_line(self, line: str) -> Optional[str]:
        line = line.rstrip("\r")
        if line == CLOSE_LINE:
            self.closed = True
            return None
        if not line.startswith(DATA_PREFIX) or self.halted:
            return None

        try:
            payload = json.loads(line[len(DATA_PREFIX):])
        except json.JSONDecodeError:
            logger.warning("Skipping malformed stream line: %.120s", line)
            return None
        if not isinstance(payload, dict):
            logger.warning("Skipping unexpected stream payload: %.120s", line)
            return None

        if payload.get("error"):
            self.error = str(payload["error"])
            logger.error("Generation stream reported an error: %s", self.error)
            return None

        text = payload.get("text")
        if not text:
            return None
        cleaned = clean_chunk(text)
        self.document.append(cleaned)
        return cleaned
