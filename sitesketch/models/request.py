"""
Request models for sitesketch
"""
from __future__ import annotations
import base64
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field


MODIFY_TEMPLATE = (
    "Modify the following website code based on this instruction and the provided images: "
    "{prompt}\n\nCurrent code:\n{current_code}"
)


class ImagePayload(BaseModel):
    """One reference image attached to a generation."""

    model_config = ConfigDict(frozen=True)

    filename: str = Field("image", description="Original file name")
    mime_type: str = Field("image/jpeg", description="Content type of the image")
    data: bytes = Field(..., description="Raw image bytes")

    @property
    def size(self) -> int:
        return len(self.data)

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def to_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.to_base64()}"


class GenerationRequest(BaseModel):
    """A prompt submitted for generation; immutable once built."""

    model_config = ConfigDict(frozen=True)

    prompt: str = Field(..., description="Natural-language description or instruction")
    provider: str = Field(..., description="AI provider name")
    model: str = Field(..., description="Provider model identifier")
    current_code: Optional[str] = Field(None, description="Existing website source (modify mode)")
    images: List[ImagePayload] = Field(default_factory=list, description="Reference images")

    @property
    def is_modify(self) -> bool:
        return self.current_code is not None

    @property
    def provider_prompt(self) -> str:
        """The prompt forwarded to the AI provider."""
        if self.current_code is None:
            return self.prompt
        return MODIFY_TEMPLATE.format(prompt=self.prompt, current_code=self.current_code)
