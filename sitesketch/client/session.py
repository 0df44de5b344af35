"""
Builder Session

Owns the state of one user's editing session (draft source, version history,
attached images, preview surface) and drives each generation lifecycle:
request -> stream -> assemble -> extract -> render -> commit.
"""
from __future__ import annotations
import json
import logging
import mimetypes
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Union

import aiofiles
import httpx

from sitesketch.client.assembler import SourceDocument, StreamAssembler
from sitesketch.client.export import ExportBundle, build_bundle
from sitesketch.client.history import VersionEntry, VersionHistory
from sitesketch.client.renderer import PreviewSurface, render
from sitesketch.config import Settings, get_settings
from sitesketch.exceptions import GenerationInProgressError, UploadRejectedError
from sitesketch.models.request import ImagePayload
from sitesketch.utils.uploads import validate_images

logger = logging.getLogger(__name__)


async def load_image(path: Union[str, Path]) -> ImagePayload:
    """Read an image file from disk into a payload."""
    path = Path(path)
    async with aiofiles.open(path, "rb") as f:
        data = await f.read()
    mime_type, _ = mimetypes.guess_type(path.name)
    return ImagePayload(filename=path.name, mime_type=mime_type or "image/jpeg", data=data)


def _error_detail(body: bytes) -> str:
    try:
        detail = json.loads(body).get("detail")
    except (ValueError, AttributeError):
        detail = None
    return str(detail) if detail else body.decode("utf-8", errors="replace")[:200]


class BuilderSession:
    """Client-side state for generating and iterating on one website."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        provider: Optional[str] = None,
        model: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        settings: Optional[Settings] = None,
        on_notify: Optional[Callable[[str], None]] = None
    ):
        self.settings = settings or get_settings()
        self.base_url = base_url or self.settings.server_url
        self.provider = provider
        self.model = model
        self.on_notify = on_notify
        self._client = client

        self.history = VersionHistory()
        self.surface = PreviewSurface()
        self.images: List[ImagePayload] = []
        self.draft: Optional[SourceDocument] = None
        self.notifications: List[str] = []
        self.site_prompt = ""
        self.busy = False

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def current_code(self) -> str:
        """Source of the version currently shown from history."""
        entry = self.history.current
        return entry.source if entry else ""

    @property
    def controls_enabled(self) -> bool:
        return not self.busy

    @property
    def status(self) -> str:
        return self.history.status

    def notify(self, message: str) -> None:
        self.notifications.append(message)
        logger.info("Notification: %s", message)
        if self.on_notify:
            self.on_notify(message)

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    def attach_images(self, images: Sequence[ImagePayload]) -> None:
        """Attach images; the whole batch is rejected if it breaks the policy."""
        candidate = self.images + list(images)
        try:
            validate_images(candidate, self.settings.max_images, self.settings.max_upload_bytes)
        except UploadRejectedError as e:
            self.notify(str(e))
            raise
        self.images = candidate
        count = len(images)
        self.notify(f"{count} image{'s' if count != 1 else ''} uploaded successfully!")

    def attach_image(self, image: ImagePayload) -> None:
        self.attach_images([image])

    def remove_image(self, index: int) -> ImagePayload:
        return self.images.pop(index)

    # ------------------------------------------------------------------
    # Rendering and history
    # ------------------------------------------------------------------

    def render(self, source: str) -> str:
        return render(source, self.surface)

    def execute_code(self, code: str) -> str:
        """Preview hand-edited code without committing a version."""
        return self.render(code)

    def navigate(self, delta: int) -> Optional[VersionEntry]:
        entry = self.history.navigate(delta)
        if entry is not None:
            self.render(entry.source)
        return entry

    def undo(self) -> Optional[VersionEntry]:
        return self.navigate(-1)

    def redo(self) -> Optional[VersionEntry]:
        return self.navigate(1)

    def export(self, prompt: Optional[str] = None) -> ExportBundle:
        return build_bundle(self.current_code, self.site_prompt if prompt is None else prompt)

    # ------------------------------------------------------------------
    # Network
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _http(self):
        if self._client is not None:
            yield self._client
        else:
            async with httpx.AsyncClient(base_url=self.base_url, timeout=None) as client:
                yield client

    async def fetch_models(self) -> Dict[str, List[str]]:
        async with self._http() as client:
            response = await client.get("/models")
            response.raise_for_status()
            return response.json()

    async def generate(self, prompt: str) -> Optional[VersionEntry]:
        """Generate a new website from a description."""
        entry = await self._run_generation(prompt, modify=False)
        if entry is not None:
            self.site_prompt = prompt
        return entry

    async def modify(self, prompt: str) -> Optional[VersionEntry]:
        """Ask for changes to the currently shown version."""
        return await self._run_generation(prompt, modify=True)

    def _form(self, prompt: str, modify: bool):
        data = {
            "prompt": prompt,
            "provider": self.provider or "",
            "model": self.model or "",
        }
        if modify:
            data["currentCode"] = self.current_code
        files = [("images", (image.filename, image.data, image.mime_type)) for image in self.images]
        return data, files or None

    def _apply(self, appended: List[str]) -> None:
        for _ in appended:
            self.render(self.draft.text)

    async def _run_generation(self, prompt: str, modify: bool) -> Optional[VersionEntry]:
        """Stream one generation; commit it unless the stream reported an error."""
        if self.busy:
            raise GenerationInProgressError()

        self.busy = True
        assembler = StreamAssembler()
        self.draft = assembler.document
        data, files = self._form(prompt, modify)
        try:
            async with self._http() as client:
                async with client.stream(
                    "POST", "/modify" if modify else "/generate", data=data, files=files
                ) as response:
                    if response.status_code != 200:
                        detail = _error_detail(await response.aread())
                        logger.error("Generation request rejected (%s): %s", response.status_code, detail)
                        self.notify(f"Request failed: {detail}")
                        return None

                    async for raw in response.aiter_text():
                        self._apply(assembler.feed(raw))
                        if assembler.halted:
                            break
                    if not assembler.halted:
                        self._apply(assembler.finish())

            if assembler.halted:
                self.notify(f"Generation failed: {assembler.error}")
                return None
            if not assembler.closed:
                logger.warning("Stream ended without a close event; keeping what arrived")

            entry = self.history.commit(self.draft.freeze(), prompt)
            logger.info("Committed %s", self.history.status)
            return entry
        except httpx.HTTPError as e:
            logger.exception("Generation request failed")
            self.notify(f"Generation failed: {e}")
            return None
        finally:
            self.busy = False
