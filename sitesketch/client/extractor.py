"""
Fragment Extractor

Splits accumulated website source into style, script and markup using
best-effort pattern matching. The generator's output is not guaranteed to be
well-formed HTML, so this is a heuristic, not a parser.
"""
from __future__ import annotations
import re
from dataclasses import dataclass
from typing import List, Tuple

CODE_FENCE = re.compile(r"```html|```css|```javascript|```")
STYLE_BLOCK = re.compile(r"<style[^>]*>([\s\S]*?)</style>", re.IGNORECASE)
SCRIPT_BLOCK = re.compile(r"<script[^>]*>([\s\S]*?)</script>", re.IGNORECASE)

# Leading open tag and trailing close tag, each at most once
WRAPPERS = (
    re.compile(r"^\s*<html\b[^>]*>|</html>\s*$", re.IGNORECASE),
    re.compile(r"^\s*<body\b[^>]*>|</body>\s*$", re.IGNORECASE),
    re.compile(r"^\s*<head\b[^>]*>|</head>\s*$", re.IGNORECASE),
)
# Left over when "<!DOCTYPE" streams in ahead of the rest of the tag
STRAY_HTML_TOKEN = re.compile(r"^html", re.IGNORECASE)


@dataclass(frozen=True)
class ExtractedFragments:
    markup: str = ""
    style: str = ""
    script: str = ""


def strip_code_fences(source: str) -> str:
    return CODE_FENCE.sub("", source)


def strip_wrappers(markup: str) -> str:
    """Remove html/body/head wrappers and the stray leading ``html`` token.

    Repeats until nothing changes, so a wrapper hidden behind the stray
    token is removed in the same call.
    """
    while True:
        stripped = markup
        for wrapper in WRAPPERS:
            stripped = wrapper.sub("", stripped)
        stripped = STRAY_HTML_TOKEN.sub("", stripped, count=1)
        if stripped == markup:
            return markup
        markup = stripped


def _pull_blocks(pattern: re.Pattern, text: str) -> Tuple[str, str]:
    """Concatenate every block's inner text and drop the blocks from ``text``."""
    contents: List[str] = [match.group(1) + "\n" for match in pattern.finditer(text)]
    return "".join(contents), pattern.sub("", text)


def extract(source: str) -> ExtractedFragments:
    """Split website source into markup, style and script fragments."""
    working = strip_code_fences(source)
    style, working = _pull_blocks(STYLE_BLOCK, working)
    script, working = _pull_blocks(SCRIPT_BLOCK, working)
    return ExtractedFragments(markup=strip_wrappers(working), style=style, script=script)
