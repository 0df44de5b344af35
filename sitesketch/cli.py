"""
sitesketch command line

    sitesketch serve
    sitesketch models
    sitesketch generate "a landing page for a bakery" --image ref.png --out site/
    sitesketch modify "make the header blue" --code site/source.html --out site/
"""
from __future__ import annotations
import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

import aiofiles
import httpx

from sitesketch.client.session import BuilderSession, load_image
from sitesketch.config import configure_logging, get_settings
from sitesketch.exceptions import SiteSketchError

logger = logging.getLogger(__name__)

SOURCE_FILENAME = "source.html"
PREVIEW_FILENAME = "preview.html"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sitesketch", description="Generate websites from descriptions")
    parser.add_argument("--server", default=None, help="Server URL (default: settings.server_url)")
    parser.add_argument("--log-level", default=None, help="Logging level")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("serve", help="Run the generation server")
    sub.add_parser("models", help="List available models per provider")

    for name, help_text in (("generate", "Generate a new website"), ("modify", "Modify existing website code")):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("prompt", help="Description or change instruction")
        cmd.add_argument("--provider", default=None)
        cmd.add_argument("--model", default=None)
        cmd.add_argument("--image", action="append", default=[], help="Reference image (repeatable)")
        cmd.add_argument("--out", default=".", help="Output directory")
        if name == "modify":
            cmd.add_argument("--code", required=True, help="File holding the current website source")
    return parser


async def _write_text(path: Path, text: str) -> None:
    async with aiofiles.open(path, "w", encoding="utf-8") as f:
        await f.write(text)


async def run_generation(args: argparse.Namespace) -> int:
    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)
    session = BuilderSession(
        base_url=args.server,
        provider=args.provider,
        model=args.model,
        on_notify=lambda message: print(message, file=sys.stderr)
    )
    if args.image:
        session.attach_images([await load_image(path) for path in args.image])

    if args.command == "modify":
        async with aiofiles.open(args.code, "r", encoding="utf-8") as f:
            session.history.commit(await f.read(), "imported")
        entry = await session.modify(args.prompt)
    else:
        entry = await session.generate(args.prompt)

    if session.surface.srcdoc:
        await session.surface.save(out_dir / PREVIEW_FILENAME)
    if entry is None:
        return 1

    await _write_text(out_dir / SOURCE_FILENAME, entry.source)
    archive = await session.export(args.prompt).save(out_dir)
    print(archive)
    return 0


async def list_models(args: argparse.Namespace) -> int:
    session = BuilderSession(base_url=args.server)
    for provider, models in (await session.fetch_models()).items():
        print(f"{provider}: {', '.join(models)}")
    return 0


def serve() -> int:
    import uvicorn

    settings = get_settings()
    uvicorn.run("sitesketch.main:app", host=settings.host, port=settings.port, reload=settings.debug)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "serve":
        return serve()
    try:
        if args.command == "models":
            return asyncio.run(list_models(args))
        return asyncio.run(run_generation(args))
    except (SiteSketchError, httpx.HTTPError) as e:
        logger.error("%s", e)
        return 2


if __name__ == "__main__":
    sys.exit(main())
