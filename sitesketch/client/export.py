"""
Export Bundler

Splits the final website source into index.html, styles.css and script.js
and packs them into a ZIP archive for download.
"""
from __future__ import annotations
import io
import logging
import re
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Union

import aiofiles

from sitesketch.client.extractor import strip_wrappers

logger = logging.getLogger(__name__)

FIRST_STYLE = re.compile(r"<style>([\s\S]*?)</style>", re.IGNORECASE)
FIRST_SCRIPT = re.compile(r"<script>([\s\S]*?)</script>", re.IGNORECASE)
NAME_UNSAFE_CHARS = re.compile(r"[^a-z0-9-]")

DEFAULT_ARCHIVE_NAME = "my-website"


@dataclass(frozen=True)
class ExportBundle:
    """The three files of an exported site plus the archive name."""
    name: str
    markup: str
    style: str
    script: str

    @property
    def filename(self) -> str:
        return f"{self.name}.zip"

    def index_html(self) -> str:
        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Generated Website</title>
    <link rel="stylesheet" href="styles.css">
</head>
<body>
    {self.markup}
    <script src="script.js"></script>
</body>
</html>"""

    def files(self) -> Dict[str, str]:
        files = {"index.html": self.index_html()}
        if self.style:
            files["styles.css"] = self.style
        if self.script:
            files["script.js"] = self.script
        return files

    def archive(self) -> bytes:
        return bundle(self.files())

    async def save(self, directory: Union[str, Path]) -> Path:
        path = Path(directory) / self.filename
        async with aiofiles.open(path, "wb") as f:
            await f.write(self.archive())
        logger.info("Exported %s", path)
        return path


def _take_first(pattern: re.Pattern, text: str):
    match = pattern.search(text)
    if not match:
        return "", text
    return match.group(1), text.replace(match.group(0), "", 1)


def split_for_export(source: str):
    """Return ``(markup, style, script)`` using the first style and script block."""
    style, markup = _take_first(FIRST_STYLE, source)
    script, markup = _take_first(FIRST_SCRIPT, markup)
    return strip_wrappers(markup).strip(), style.strip(), script.strip()


def archive_name(prompt: str) -> str:
    """Name derived from the first three words of the prompt."""
    words = prompt.split()[:3]
    name = NAME_UNSAFE_CHARS.sub("", "-".join(words).lower())
    return name or DEFAULT_ARCHIVE_NAME


def build_bundle(source: str, prompt: str = "") -> ExportBundle:
    markup, style, script = split_for_export(source)
    return ExportBundle(name=archive_name(prompt), markup=markup, style=style, script=script)


def bundle(files: Dict[str, str]) -> bytes:
    """Pack ``{filename: content}`` into a deflated ZIP archive."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zip_file:
        for name, content in files.items():
            zip_file.writestr(name, content)
    return buffer.getvalue()
