"""Design-file provider protocol and base types."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from app.core.exceptions import ProviderError


@dataclass
class RemoteDocument:
    """A fetched design file.

    ``document`` is the root node (its children are pages); ``styles`` is the
    file's style registry keyed by style id, each entry carrying at least a
    ``name``.
    """

    name: str
    document: dict[str, Any]
    styles: dict[str, dict[str, Any]] = field(default_factory=dict)
    last_modified: str | None = None


@dataclass
class PageInfo:
    """A top-level page of a design file."""

    id: str
    name: str


class DesignProvider(ABC):
    """Abstract base class for remote design-file providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name for identification."""
        ...

    @abstractmethod
    async def fetch_document(self, file_key: str, token: str) -> RemoteDocument:
        """Fetch a full design file.

        Args:
            file_key: Provider identifier of the file
            token: Opaque access token

        Returns:
            RemoteDocument with the node tree and style registry

        Raises:
            ProviderError: If the provider answered with an error or is unreachable
        """
        ...

    @abstractmethod
    async def fetch_images(
        self,
        file_key: str,
        token: str,
        node_ids: list[str],
    ) -> dict[str, str | None]:
        """Render preview images for the given nodes.

        Args:
            file_key: Provider identifier of the file
            token: Opaque access token
            node_ids: Nodes to render; an empty list yields an empty map
                without contacting the provider

        Returns:
            Mapping of node id to image URL (``None`` when rendering failed)

        Raises:
            ProviderError: If the provider answered with an error or is unreachable
        """
        ...


class FigmaApiError(ProviderError):
    """Figma API answered with an error status or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None, cause: Exception | None = None):
        self.cause = cause
        super().__init__(f"Figma API error: {message}", status_code=status_code)
