from fastapi import APIRouter, Depends

from catalog.api.deps import get_current_user_id, get_storage
from catalog.schemas.content import ContentResponse
from catalog.schemas.favorite import FavoriteCreate, FavoriteResponse, FavoriteStatus
from catalog.services.storage import DatabaseStorage

router = APIRouter(prefix="/api/favorites", tags=["favorites"])


@router.get("", response_model=list[ContentResponse])
async def list_favorites(
    user_id: str = Depends(get_current_user_id),
    storage: DatabaseStorage = Depends(get_storage),
):
    return await storage.get_user_favorites(user_id)


@router.post("", response_model=FavoriteResponse, status_code=201)
async def add_favorite(
    data: FavoriteCreate,
    user_id: str = Depends(get_current_user_id),
    storage: DatabaseStorage = Depends(get_storage),
):
    return await storage.add_to_favorites(user_id, data.content_id)


@router.delete("/{content_id}", status_code=204)
async def remove_favorite(
    content_id: str,
    user_id: str = Depends(get_current_user_id),
    storage: DatabaseStorage = Depends(get_storage),
):
    """Remove every favorite row this user has for the item; no-op when there is none."""
    await storage.remove_from_favorites(user_id, content_id)


@router.get("/{content_id}/check", response_model=FavoriteStatus)
async def check_favorite(
    content_id: str,
    user_id: str = Depends(get_current_user_id),
    storage: DatabaseStorage = Depends(get_storage),
):
    return FavoriteStatus(is_favorite=await storage.is_favorite(user_id, content_id))
