"""
Preview Renderer

Reassembles extracted fragments into one standalone document and shows it
on a sandboxed surface (an iframe ``srcdoc`` with no shared script context).
"""
from __future__ import annotations
import html
import logging
import re
from pathlib import Path
from typing import Optional, Union

import aiofiles

from sitesketch.client.extractor import ExtractedFragments, extract, strip_code_fences

logger = logging.getLogger(__name__)

STRING_LITERAL = re.compile(r'(".*?")')
TAG_NAME = re.compile(r"(&lt;/?[a-z]+(&gt;)?)")
COMMENT = re.compile(r"(/\*.*?\*/|//.*$)", re.MULTILINE)


def render_preview(fragments: ExtractedFragments) -> str:
    """Build the preview document for a set of fragments."""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Preview</title>
    <style>
        /* Reset default styles */
        * {{
            margin: 0;
            padding: 0;
            box-sizing: border-box;
        }}

        {fragments.style}
    </style>
</head>
<body>
    {fragments.markup}
    <script>
        try {{
            {fragments.script}
        }} catch (error) {{
            console.error('Preview script error:', error);
        }}
    </script>
</body>
</html>
"""


def render_code_view(source: str) -> str:
    """Escape source for display and mark up strings, tags and comments."""
    code = html.escape(source, quote=False)
    code = STRING_LITERAL.sub(r'<span class="string">\1</span>', code)
    code = TAG_NAME.sub(r'<span class="keyword">\1</span>', code)
    code = COMMENT.sub(r'<span class="comment">\1</span>', code)
    return code


class PreviewSurface:
    """Isolated presentation surface for generated documents."""

    SANDBOX = "allow-scripts"

    def __init__(self):
        self.srcdoc = ""
        self.code_view = ""
        self.render_count = 0

    def show(self, document: str, source: str) -> None:
        """Display a document and refresh the raw-code view alongside it."""
        self.srcdoc = document
        self.code_view = render_code_view(strip_code_fences(source))
        self.render_count += 1

    def iframe(self, title: str = "Preview") -> str:
        """Markup embedding the current document in a sandboxed frame."""
        return (
            f'<iframe title="{html.escape(title)}" sandbox="{self.SANDBOX}" '
            f'srcdoc="{html.escape(self.srcdoc, quote=True)}"></iframe>'
        )

    async def save(self, path: Union[str, Path]) -> Path:
        """Write the current document to disk."""
        path = Path(path)
        async with aiofiles.open(path, "w", encoding="utf-8") as f:
            await f.write(self.srcdoc)
        logger.info("Preview written to %s", path)
        return path


def render(source: str, surface: Optional[PreviewSurface] = None) -> str:
    """Extract, render and (optionally) display a source document."""
    document = render_preview(extract(source))
    if surface is not None:
        surface.show(document, source)
    return document
