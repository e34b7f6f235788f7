"""Flatten a design-file node tree into trackable text items."""

from dataclasses import dataclass
from typing import Any, Iterable

from app.services.figma.base import PageInfo, RemoteDocument
from app.services.figma.style_mapper import DEFAULT_FONT_SIZE

FRAME_LIKE_TYPES = frozenset({"FRAME", "COMPONENT", "INSTANCE", "COMPONENT_SET"})
PAGE_TYPE = "CANVAS"


@dataclass
class ExtractedTextNode:
    """A text-bearing leaf with its page and outermost container context."""

    id: str
    page_id: str
    page_name: str
    content: str
    font_size: float
    x: float
    y: float
    width: float
    height: float
    style_name: str | None = None
    frame_id: str | None = None
    frame_name: str | None = None
    frame_x: float | None = None
    frame_y: float | None = None
    frame_width: float | None = None
    frame_height: float | None = None


@dataclass
class _Container:
    id: str
    name: str
    x: float | None
    y: float | None
    width: float | None
    height: float | None


def build_style_lookup(styles: dict[str, dict[str, Any]] | None) -> dict[str, str]:
    """Map style id -> style name from a file's style registry."""
    lookup = {}
    for style_id, meta in (styles or {}).items():
        name = meta.get("name") if isinstance(meta, dict) else None
        if name:
            lookup[style_id] = name
    return lookup


def _container_from(node: dict[str, Any]) -> _Container:
    bounds = node.get("absoluteBoundingBox") or {}
    return _Container(
        id=node["id"],
        name=node.get("name", ""),
        x=bounds.get("x"),
        y=bounds.get("y"),
        width=bounds.get("width"),
        height=bounds.get("height"),
    )


def extract_text_nodes(
    document: RemoteDocument,
    source_page_ids: Iterable[str] | None = None,
) -> list[ExtractedTextNode]:
    """Collect TEXT nodes depth-first, page by page.

    The outermost frame-like ancestor of a text node is its container; nested
    frames never replace it. Text without a bounding box is skipped since it
    cannot be positioned. With a non-empty ``source_page_ids`` only those
    pages are visited.
    """
    page_filter = set(source_page_ids or [])
    style_lookup = build_style_lookup(document.styles)
    extracted: list[ExtractedTextNode] = []

    def traverse(node: dict[str, Any], page: dict[str, Any], container: _Container | None) -> None:
        if container is None and node.get("type") in FRAME_LIKE_TYPES:
            container = _container_from(node)

        if node.get("type") == "TEXT" and node.get("characters"):
            bounds = node.get("absoluteBoundingBox")
            if bounds:
                style_id = (node.get("styles") or {}).get("text")
                font_size = (node.get("style") or {}).get("fontSize")
                extracted.append(
                    ExtractedTextNode(
                        id=node["id"],
                        page_id=page["id"],
                        page_name=page.get("name", ""),
                        content=node["characters"],
                        font_size=DEFAULT_FONT_SIZE if font_size is None else font_size,
                        x=bounds.get("x", 0.0),
                        y=bounds.get("y", 0.0),
                        width=bounds.get("width", 0.0),
                        height=bounds.get("height", 0.0),
                        style_name=style_lookup.get(style_id) if style_id else None,
                        frame_id=container.id if container else None,
                        frame_name=container.name if container else None,
                        frame_x=container.x if container else None,
                        frame_y=container.y if container else None,
                        frame_width=container.width if container else None,
                        frame_height=container.height if container else None,
                    )
                )

        for child in node.get("children") or []:
            traverse(child, page, container)

    for page in document.document.get("children") or []:
        if page_filter and page.get("id") not in page_filter:
            continue
        traverse(page, page, None)

    return extracted


def list_pages(document: RemoteDocument) -> list[PageInfo]:
    """Top-level pages of a document."""
    return [
        PageInfo(id=child["id"], name=child.get("name", ""))
        for child in document.document.get("children") or []
        if child.get("type") == PAGE_TYPE
    ]
