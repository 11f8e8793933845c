import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from catalog.api.deps import get_storage, parse_admin_payload, require_admin
from catalog.schemas.admin import AdminVerifyResponse
from catalog.schemas.content import (
    ContentCreate,
    ContentResponse,
    ContentUpdate,
    EpisodeCreate,
    EpisodeResponse,
    EpisodeUpdate,
)
from catalog.services.storage import DatabaseStorage

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.post("/verify", response_model=AdminVerifyResponse)
async def verify(payload: dict[str, Any] = Depends(require_admin)):
    return AdminVerifyResponse(success=True)


@router.post("/content", response_model=ContentResponse, status_code=201)
async def create_content(
    payload: dict[str, Any] = Depends(require_admin),
    storage: DatabaseStorage = Depends(get_storage),
):
    data = parse_admin_payload(ContentCreate, payload, "content", "Invalid content data")
    content = await storage.create_content(data.model_dump())
    logger.info(f"Created {content.type} '{content.title}' ({content.id})")
    return content


@router.put("/content/{content_id}", response_model=ContentResponse)
async def update_content(
    content_id: str,
    payload: dict[str, Any] = Depends(require_admin),
    storage: DatabaseStorage = Depends(get_storage),
):
    data = parse_admin_payload(ContentUpdate, payload, "content", "Invalid content data")
    content = await storage.update_content(content_id, data.changes())
    if not content:
        raise HTTPException(404, "Content not found")
    return content


@router.delete("/content/{content_id}", status_code=204)
async def delete_content(
    content_id: str,
    payload: dict[str, Any] = Depends(require_admin),
    storage: DatabaseStorage = Depends(get_storage),
):
    await storage.delete_content(content_id)
    logger.info(f"Deleted content {content_id}")


@router.post("/episodes", response_model=EpisodeResponse, status_code=201)
async def create_episode(
    payload: dict[str, Any] = Depends(require_admin),
    storage: DatabaseStorage = Depends(get_storage),
):
    data = parse_admin_payload(EpisodeCreate, payload, "episode", "Invalid episode data")
    return await storage.create_episode(data.model_dump())


@router.put("/episodes/{episode_id}", response_model=EpisodeResponse)
async def update_episode(
    episode_id: str,
    payload: dict[str, Any] = Depends(require_admin),
    storage: DatabaseStorage = Depends(get_storage),
):
    data = parse_admin_payload(EpisodeUpdate, payload, "episode", "Invalid episode data")
    episode = await storage.update_episode(episode_id, data.changes())
    if not episode:
        raise HTTPException(404, "Episode not found")
    return episode


@router.delete("/episodes/{episode_id}", status_code=204)
async def delete_episode(
    episode_id: str,
    payload: dict[str, Any] = Depends(require_admin),
    storage: DatabaseStorage = Depends(get_storage),
):
    await storage.delete_episode(episode_id)
