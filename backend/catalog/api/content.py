from fastapi import APIRouter, Depends, HTTPException, Query

from catalog.api.deps import get_storage
from catalog.models import ContentType
from catalog.schemas.content import ContentResponse, EpisodeResponse
from catalog.services.storage import DatabaseStorage

router = APIRouter(prefix="/api/content", tags=["content"])


@router.get("", response_model=ContentResponse | list[ContentResponse] | None)
async def list_content(
    content_type: str | None = Query(None, alias="type"),
    featured: str | None = Query(None),
    popular: str | None = Query(None),
    new: str | None = Query(None),
    search: str | None = Query(None),
    storage: DatabaseStorage = Depends(get_storage),
):
    # Precedence: featured > popular > new > search > type > all
    if featured:
        return await storage.get_featured_content()
    if popular:
        return await storage.get_popular_content()
    if new:
        return await storage.get_new_content()
    if search:
        return await storage.search_content(search)
    if content_type in {t.value for t in ContentType}:
        return await storage.get_content_by_type(content_type)
    return await storage.get_all_content()


@router.get("/{content_id}", response_model=ContentResponse)
async def get_content(content_id: str, storage: DatabaseStorage = Depends(get_storage)):
    content = await storage.get_content_by_id(content_id)
    if not content:
        raise HTTPException(404, "Content not found")
    await storage.increment_view_count(content_id)
    return content


@router.get("/{content_id}/episodes", response_model=list[EpisodeResponse])
async def list_episodes(content_id: str, storage: DatabaseStorage = Depends(get_storage)):
    return await storage.get_episodes_by_content_id(content_id)
