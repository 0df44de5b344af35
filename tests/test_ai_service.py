import types

import pytest

from sitesketch.config import Settings
from sitesketch.exceptions import ProviderConfigurationError, UnknownProviderError
from sitesketch.models.request import ImagePayload
from sitesketch.services.ai_service import AIService, build_chat_messages, build_google_contents
from sitesketch.services.system_prompt import SYSTEM_PROMPT

IMAGE = ImagePayload(filename="a.png", mime_type="image/png", data=b"abc")


class _ChatStream:
    def __init__(self, parts):
        self.parts = parts
        self.closed = False

    def __aiter__(self):
        return self._iter()

    async def _iter(self):
        for part in self.parts:
            delta = types.SimpleNamespace(content=part)
            yield types.SimpleNamespace(choices=[types.SimpleNamespace(delta=delta)])

    async def close(self):
        self.closed = True


def _chat_client(stream, calls):
    async def create(**kwargs):
        calls.append(kwargs)
        return stream
    return types.SimpleNamespace(chat=types.SimpleNamespace(completions=types.SimpleNamespace(create=create)))


def _google_client(texts, calls):
    async def _chunks():
        for text in texts:
            yield types.SimpleNamespace(text=text)

    async def generate_content_stream(**kwargs):
        calls.append(kwargs)
        return _chunks()

    models = types.SimpleNamespace(generate_content_stream=generate_content_stream)
    return types.SimpleNamespace(aio=types.SimpleNamespace(models=models))


@pytest.fixture
def service():
    return AIService(Settings(_env_file=None, google_api_key="", openai_api_key="", cerebras_api_key=""))


async def _collect(agen):
    return [chunk async for chunk in agen]


def test_chat_messages_with_images():
    messages = build_chat_messages("build it", [IMAGE])
    assert messages[0] == {"role": "system", "content": SYSTEM_PROMPT}
    content = messages[1]["content"]
    assert content[0] == {"type": "text", "text": "build it"}
    assert content[1]["image_url"]["url"] == "data:image/png;base64,YWJj"


def test_chat_messages_text_only_provider():
    messages = build_chat_messages("build it", [IMAGE], supports_images=False)
    assert messages[1]["content"] == "build it"


def test_google_contents_are_primed():
    contents = build_google_contents("build it", [IMAGE])
    assert [c.role for c in contents] == ["user", "model", "user"]
    assert contents[0].parts[0].text == SYSTEM_PROMPT
    assert contents[2].parts[0].text == "build it"
    assert contents[2].parts[1].inline_data.data == b"abc"
    assert contents[2].parts[1].inline_data.mime_type == "image/png"


@pytest.mark.asyncio
async def test_unknown_provider(service):
    with pytest.raises(UnknownProviderError):
        await _collect(service.stream_website_code("groq", "m", "p"))


@pytest.mark.asyncio
async def test_missing_api_key(service):
    with pytest.raises(ProviderConfigurationError, match="OPENAI_API_KEY"):
        await _collect(service.stream_website_code("openai", "gpt-4o", "p"))


@pytest.mark.asyncio
async def test_openai_streaming(service):
    calls = []
    stream = _ChatStream(["<h1>", None, "Hi</h1>"])
    service._clients["openai"] = _chat_client(stream, calls)

    chunks = await _collect(service.stream_website_code("openai", "gpt-4o", "p", [IMAGE]))

    assert chunks == ["<h1>", "Hi</h1>"]
    assert calls[0]["model"] == "gpt-4o"
    assert calls[0]["stream"] is True
    assert calls[0]["max_tokens"] == service.settings.ai_max_tokens
    assert stream.closed


@pytest.mark.asyncio
async def test_cerebras_ignores_images(service):
    calls = []
    service._clients["cerebras"] = _chat_client(_ChatStream(["x"]), calls)

    assert await _collect(service.stream_website_code("cerebras", "llama3.1-8b", "p", [IMAGE])) == ["x"]
    assert calls[0]["messages"][1]["content"] == "p"
    assert "max_completion_tokens" in calls[0]


@pytest.mark.asyncio
async def test_google_streaming(service):
    calls = []
    service._clients["google"] = _google_client(["<p>", "", "ok</p>"], calls)

    chunks = await _collect(service.stream_website_code("google", "gemini-1.5-flash", "p"))

    assert chunks == ["<p>", "ok</p>"]
    assert calls[0]["model"] == "gemini-1.5-flash"
    assert len(calls[0]["config"].safety_settings) == 4


def test_available_models(service):
    models = service.available_models()
    assert models["google"][0] == "gemini-1.5-pro-exp-0801"
    assert set(models) == {"google", "openai", "cerebras"}
