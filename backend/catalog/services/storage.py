"""Data access layer for the content catalog.

Each method issues a single statement against the store. Writes commit their
own statement; store errors propagate to the caller untouched.
"""
from __future__ import annotations
import logging
from collections.abc import Mapping
from typing import Any, Literal

from sqlalchemy import delete, exists, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.database import utcnow
from catalog.models import Content, Episode, Favorite, User

logger = logging.getLogger(__name__)

LIST_LIMIT = 20


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class DatabaseStorage:
    def __init__(self, session: AsyncSession):
        self.session = session

    def _insert(self, model):
        if self.session.bind.dialect.name == "postgresql":
            return pg_insert(model)
        return sqlite_insert(model)

    def _active_content(self):
        return select(Content).where(Content.is_active == True)

    # ── Users ────────────────────────────────────────────────────────────────

    async def get_user(self, user_id: str) -> User | None:
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def upsert_user(self, data: Mapping[str, Any]) -> User:
        """Insert a user, or overwrite every supplied field when the id exists."""
        values = dict(data)
        overwrite = {k: v for k, v in values.items() if k != "id"}
        overwrite["updated_at"] = utcnow()
        stmt = (
            self._insert(User)
            .values(**values)
            .on_conflict_do_update(index_elements=[User.id], set_=overwrite)
            .returning(User)
        )
        result = await self.session.execute(stmt, execution_options={"populate_existing": True})
        user = result.scalar_one()
        await self.session.commit()
        logger.info(f"Upserted user {user.id}")
        return user

    # ── Content ──────────────────────────────────────────────────────────────

    async def get_all_content(self) -> list[Content]:
        result = await self.session.execute(
            self._active_content().order_by(Content.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_content_by_id(self, content_id: str) -> Content | None:
        result = await self.session.execute(
            self._active_content().where(Content.id == content_id)
        )
        return result.scalar_one_or_none()

    async def get_content_by_type(self, content_type: Literal["movie", "series"]) -> list[Content]:
        result = await self.session.execute(
            self._active_content()
            .where(Content.type == content_type)
            .order_by(Content.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_featured_content(self) -> Content | None:
        result = await self.session.execute(
            self._active_content()
            .where(Content.is_featured == True)
            .order_by(Content.created_at.desc())
            .limit(1)
        )
        return result.scalars().first()

    async def get_popular_content(self) -> list[Content]:
        result = await self.session.execute(
            self._active_content()
            .order_by(Content.view_count.desc(), Content.created_at.desc())
            .limit(LIST_LIMIT)
        )
        return list(result.scalars().all())

    async def get_new_content(self) -> list[Content]:
        result = await self.session.execute(
            self._active_content().order_by(Content.created_at.desc()).limit(LIST_LIMIT)
        )
        return list(result.scalars().all())

    async def search_content(self, query: str) -> list[Content]:
        pattern = f"%{_escape_like(query)}%"
        result = await self.session.execute(
            self._active_content()
            .where(Content.title.ilike(pattern, escape="\\"))
            .order_by(Content.created_at.desc())
        )
        return list(result.scalars().all())

    async def create_content(self, data: Mapping[str, Any]) -> Content:
        content = Content(**data)
        self.session.add(content)
        await self.session.commit()
        await self.session.refresh(content)
        return content

    async def update_content(self, content_id: str, data: Mapping[str, Any]) -> Content | None:
        """Apply a partial update. Returns None when no row has this id.

        Inactive rows are updated too; this is how hidden content is restored.
        """
        stmt = (
            update(Content)
            .where(Content.id == content_id)
            .values(**data, updated_at=utcnow())
            .returning(Content)
        )
        result = await self.session.execute(
            stmt, execution_options={"populate_existing": True, "synchronize_session": False}
        )
        content = result.scalar_one_or_none()
        await self.session.commit()
        return content

    async def delete_content(self, content_id: str) -> None:
        # episodes and favorites go with it via ON DELETE CASCADE
        await self.session.execute(
            delete(Content).where(Content.id == content_id),
            execution_options={"synchronize_session": False},
        )
        await self.session.commit()

    async def increment_view_count(self, content_id: str) -> None:
        await self.session.execute(
            update(Content)
            .where(Content.id == content_id)
            .values(view_count=Content.view_count + 1),
            execution_options={"synchronize_session": False},
        )
        await self.session.commit()

    # ── Episodes ─────────────────────────────────────────────────────────────

    async def get_episodes_by_content_id(self, content_id: str) -> list[Episode]:
        result = await self.session.execute(
            select(Episode)
            .where(Episode.content_id == content_id)
            .order_by(Episode.season_number, Episode.episode_number)
        )
        return list(result.scalars().all())

    async def get_episode(self, episode_id: str) -> Episode | None:
        result = await self.session.execute(select(Episode).where(Episode.id == episode_id))
        return result.scalar_one_or_none()

    async def create_episode(self, data: Mapping[str, Any]) -> Episode:
        episode = Episode(**data)
        self.session.add(episode)
        await self.session.commit()
        await self.session.refresh(episode)
        return episode

    async def update_episode(self, episode_id: str, data: Mapping[str, Any]) -> Episode | None:
        if not data:
            return await self.get_episode(episode_id)
        stmt = (
            update(Episode)
            .where(Episode.id == episode_id)
            .values(**data)
            .returning(Episode)
        )
        result = await self.session.execute(
            stmt, execution_options={"populate_existing": True, "synchronize_session": False}
        )
        episode = result.scalar_one_or_none()
        await self.session.commit()
        return episode

    async def delete_episode(self, episode_id: str) -> None:
        await self.session.execute(
            delete(Episode).where(Episode.id == episode_id),
            execution_options={"synchronize_session": False},
        )
        await self.session.commit()

    # ── Favorites ────────────────────────────────────────────────────────────

    async def get_user_favorites(self, user_id: str) -> list[Content]:
        result = await self.session.execute(
            select(Content)
            .join(Favorite, Favorite.content_id == Content.id)
            .where(Favorite.user_id == user_id, Content.is_active == True)
            .order_by(Favorite.created_at.desc())
        )
        return list(result.scalars().all())

    async def add_to_favorites(self, user_id: str, content_id: str) -> Favorite:
        favorite = Favorite(user_id=user_id, content_id=content_id)
        self.session.add(favorite)
        await self.session.commit()
        await self.session.refresh(favorite)
        return favorite

    async def remove_from_favorites(self, user_id: str, content_id: str) -> None:
        await self.session.execute(
            delete(Favorite).where(
                Favorite.user_id == user_id,
                Favorite.content_id == content_id,
            ),
            execution_options={"synchronize_session": False},
        )
        await self.session.commit()

    async def is_favorite(self, user_id: str, content_id: str) -> bool:
        result = await self.session.execute(
            select(
                exists().where(
                    Favorite.user_id == user_id,
                    Favorite.content_id == content_id,
                )
            )
        )
        return bool(result.scalar())
