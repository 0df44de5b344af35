"""Client-side pipeline: assemble, extract, preview, version and export."""
from sitesketch.client.assembler import SourceDocument, StreamAssembler, clean_chunk
from sitesketch.client.extractor import ExtractedFragments, extract
from sitesketch.client.renderer import PreviewSurface, render_preview
from sitesketch.client.history import VersionEntry, VersionHistory
from sitesketch.client.export import ExportBundle, archive_name, build_bundle, bundle
from sitesketch.client.session import BuilderSession, load_image

__all__ = [
    "SourceDocument",
    "StreamAssembler",
    "clean_chunk",
    "ExtractedFragments",
    "extract",
    "PreviewSurface",
    "render_preview",
    "VersionEntry",
    "VersionHistory",
    "ExportBundle",
    "archive_name",
    "build_bundle",
    "bundle",
    "BuilderSession",
    "load_image",
]
