"""
Stream event models for sitesketch

Each event travels as one Server-Sent Events frame:

    data: {"text": "<chunk>"}\\n\\n
    data: {"error": "<message>"}\\n\\n
    event: close\\n\\n
"""
from __future__ import annotations
import json
from typing import Optional
from pydantic import BaseModel, Field, model_validator


DATA_PREFIX = "data: "
CLOSE_EVENT = "event: close\n\n"


class ChunkEvent(BaseModel):
    """Either a text chunk or an error, never both."""

    text: Optional[str] = Field(None, description="Generated text fragment")
    error: Optional[str] = Field(None, description="User-visible error message")

    @model_validator(mode="after")
    def _exactly_one(self) -> "ChunkEvent":
        if (self.text is None) == (self.error is None):
            raise ValueError("ChunkEvent needs exactly one of text or error")
        return self

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def encode(self) -> str:
        payload = {"error": self.error} if self.is_error else {"text": self.text}
        return f"{DATA_PREFIX}{json.dumps(payload)}\n\n"
