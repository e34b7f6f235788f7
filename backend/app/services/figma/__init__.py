"""Design-file provider integration."""

from app.services.figma.base import (
    DesignProvider,
    RemoteDocument,
    PageInfo,
    FigmaApiError,
)
from app.services.figma.client import FigmaProvider
from app.services.figma.extractor import (
    ExtractedTextNode,
    FRAME_LIKE_TYPES,
    build_style_lookup,
    extract_text_nodes,
    list_pages,
)
from app.services.figma.style_mapper import map_font_size_to_style, resolve_style_label

__all__ = [
    # Base types
    "DesignProvider",
    "RemoteDocument",
    "PageInfo",
    "FigmaApiError",
    # Provider
    "FigmaProvider",
    # Extraction
    "ExtractedTextNode",
    "FRAME_LIKE_TYPES",
    "build_style_lookup",
    "extract_text_nodes",
    "list_pages",
    # Styles
    "map_font_size_to_style",
    "resolve_style_label",
]
