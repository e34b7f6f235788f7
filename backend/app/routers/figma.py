"""Figma lookups that do not need a stored project."""

from fastapi import APIRouter

from app.core.deps import Provider
from app.schemas.figma import PageLookupRequest, PageLookupResponse, PageResponse
from app.services.figma import list_pages
from app.services.projects import extract_figma_file_key

router = APIRouter(prefix="/figma")


@router.post("/pages", response_model=PageLookupResponse)
async def lookup_pages(
    data: PageLookupRequest,
    provider: Provider,
) -> PageLookupResponse:
    """List the pages of a file from a token and a key or URL."""
    file_key = extract_figma_file_key(data.figma_file_key)
    document = await provider.fetch_document(file_key, data.figma_token)
    return PageLookupResponse(
        file_name=document.name,
        pages=[PageResponse(id=page.id, name=page.name) for page in list_pages(document)],
    )
