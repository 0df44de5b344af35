"""
AI Service for sitesketch

Wraps the provider SDKs behind a single capability:

    stream_website_code(provider, model, prompt, images) -> async iterator of text chunks

The sequence is lazy, finite and non-restartable, and may raise at any point
after producing zero or more chunks.
"""
from __future__ import annotations
import logging
from typing import AsyncGenerator, Any, Dict, List, Optional, Sequence

from google import genai
from google.genai import types
from openai import AsyncOpenAI

try:
    from cerebras.cloud.sdk import AsyncCerebras
except ImportError:
    AsyncCerebras = None

from sitesketch.config import Settings, get_settings
from sitesketch.exceptions import ProviderConfigurationError, UnknownProviderError
from sitesketch.models.request import ImagePayload
from sitesketch.services.system_prompt import SYSTEM_PROMPT, MODEL_ACKNOWLEDGEMENT
from sitesketch.utils.streams import close_stream

logger = logging.getLogger(__name__)

PROVIDERS = ("google", "openai", "cerebras")

GOOGLE_SAFETY_CATEGORIES = (
    types.HarmCategory.HARM_CATEGORY_HARASSMENT,
    types.HarmCategory.HARM_CATEGORY_HATE_SPEECH,
    types.HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT,
    types.HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT,
)


# =============================================================================
# Message Builders
# =============================================================================

def build_google_contents(prompt: str, images: Sequence[ImagePayload] = ()) -> List[types.Content]:
    """Build the primed Gemini conversation for one generation."""
    user_parts = [types.Part.from_text(text=prompt)]
    for image in images:
        user_parts.append(types.Part.from_bytes(data=image.data, mime_type=image.mime_type))

    return [
        types.Content(role="user", parts=[types.Part.from_text(text=SYSTEM_PROMPT)]),
        types.Content(role="model", parts=[types.Part.from_text(text=MODEL_ACKNOWLEDGEMENT)]),
        types.Content(role="user", parts=user_parts),
    ]


def build_chat_messages(
    prompt: str,
    images: Sequence[ImagePayload] = (),
    supports_images: bool = True
) -> List[Dict[str, Any]]:
    """Build chat-completions messages (OpenAI-compatible APIs)."""
    if images and supports_images:
        content: Any = [{"type": "text", "text": prompt}]
        for image in images:
            content.append({"type": "image_url", "image_url": {"url": image.to_data_url()}})
    else:
        content = prompt

    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": content},
    ]


# =============================================================================
# AI Service Class
# =============================================================================

class AIService:
    """Service for streaming AI-generated website code."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._clients: Dict[str, Any] = {}

    def available_models(self) -> Dict[str, List[str]]:
        """Mapping of provider name to its ordered model identifiers."""
        return {
            provider: list(models)
            for provider, models in self.settings.provider_models.items()
            if provider in PROVIDERS
        }

    def _get_client(self, provider: str) -> Any:
        """Get or create the SDK client for a provider."""
        if provider not in PROVIDERS:
            raise UnknownProviderError(provider)
        if provider in self._clients:
            return self._clients[provider]

        api_key = self.settings.api_key_for(provider)
        if not api_key:
            raise ProviderConfigurationError(f"{provider.upper()}_API_KEY is required")

        timeout = self.settings.ai_timeout_seconds
        if provider == "google":
            http_options = types.HttpOptions(timeout=int(timeout * 1000)) if timeout else None
            client = genai.Client(api_key=api_key, http_options=http_options)
        elif provider == "cerebras":
            if AsyncCerebras is None:
                raise ProviderConfigurationError(
                    "cerebras-cloud-sdk is not installed. Run: pip install cerebras-cloud-sdk"
                )
            client = AsyncCerebras(api_key=api_key, **({"timeout": timeout} if timeout else {}))
        else:  # openai
            client = AsyncOpenAI(api_key=api_key, **({"timeout": timeout} if timeout else {}))

        self._clients[provider] = client
        return client

    async def stream_website_code(
        self,
        provider: str,
        model: str,
        prompt: str,
        images: Sequence[ImagePayload] = ()
    ) -> AsyncGenerator[str, None]:
        """Stream website source text chunks from the selected provider."""
        client = self._get_client(provider)
        logger.info("Generating with %s/%s (%d image(s))", provider, model, len(images))

        if provider == "google":
            chunks = self._stream_google(client, model, prompt, images)
        else:
            chunks = self._stream_chat_completions(client, provider, model, prompt, images)

        try:
            async for text in chunks:
                if text:
                    yield text
        finally:
            await close_stream(chunks)

    async def _stream_google(
        self,
        client: Any,
        model: str,
        prompt: str,
        images: Sequence[ImagePayload]
    ) -> AsyncGenerator[str, None]:
        config = types.GenerateContentConfig(
            max_output_tokens=self.settings.ai_max_tokens,
            safety_settings=[
                types.SafetySetting(category=category, threshold=types.HarmBlockThreshold.BLOCK_NONE)
                for category in GOOGLE_SAFETY_CATEGORIES
            ],
        )
        stream = await client.aio.models.generate_content_stream(
            model=model,
            contents=build_google_contents(prompt, images),
            config=config,
        )
        try:
            async for chunk in stream:
                if chunk.text:
                    yield chunk.text
        finally:
            await close_stream(stream)

    async def _stream_chat_completions(
        self,
        client: Any,
        provider: str,
        model: str,
        prompt: str,
        images: Sequence[ImagePayload]
    ) -> AsyncGenerator[str, None]:
        if provider == "cerebras":
            if images:
                logger.warning("Cerebras models are text-only; ignoring %d image(s)", len(images))
            stream = await client.chat.completions.create(
                model=model,
                messages=build_chat_messages(prompt, images, supports_images=False),
                max_completion_tokens=self.settings.ai_max_tokens,
                stream=True
            )
        else:  # openai
            stream = await client.chat.completions.create(
                model=model,
                messages=build_chat_messages(prompt, images),
                max_tokens=self.settings.ai_max_tokens,
                stream=True
            )

        try:
            async for chunk in stream:
                if chunk.choices and chunk.choices[0].delta.content:
                    yield chunk.choices[0].delta.content
        finally:
            await close_stream(stream)


# =============================================================================
# Module-level Functions
# =============================================================================

_ai_service: Optional[AIService] = None


def get_ai_service() -> AIService:
    """Get the global AI service instance."""
    global _ai_service
    if _ai_service is None:
        _ai_service = AIService()
    return _ai_service
