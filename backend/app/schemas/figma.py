"""Figma lookup schemas."""

from pydantic import BaseModel, Field


class PageLookupRequest(BaseModel):
    """Credentials for listing a file's pages before a project exists."""

    figma_token: str = Field(..., min_length=1)
    figma_file_key: str = Field(..., min_length=1)  # bare key or figma.com URL


class PageResponse(BaseModel):
    """A top-level page of a design file."""

    id: str
    name: str


class PageLookupResponse(BaseModel):
    """File name and its pages."""

    file_name: str
    pages: list[PageResponse]
