import enum
import uuid
from datetime import datetime
from sqlalchemy import String, Integer, Boolean, ForeignKey, Text, DateTime, JSON
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column, relationship
from catalog.database import Base, utcnow

# Native text[] on PostgreSQL, JSON list elsewhere
TextList = JSON().with_variant(ARRAY(Text), "postgresql")


def new_id() -> str:
    return str(uuid.uuid4())


class ContentType(str, enum.Enum):
    movie = "movie"
    series = "series"


class Content(Base):
    __tablename__ = "content"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False)  # "movie" | "series"
    video_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    thumbnail_horizontal: Mapped[str | None] = mapped_column(Text, nullable=True)
    thumbnail_vertical: Mapped[str | None] = mapped_column(Text, nullable=True)
    year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    duration: Mapped[str | None] = mapped_column(String, nullable=True)  # e.g. "1h 42m"
    rating: Mapped[str | None] = mapped_column(String, nullable=True)    # e.g. "13+"
    genres: Mapped[list[str] | None] = mapped_column(TextList, nullable=True)
    cast: Mapped[list[str] | None] = mapped_column(TextList, nullable=True)
    director: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    view_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    episodes: Mapped[list["Episode"]] = relationship(
        "Episode", back_populates="content", passive_deletes=True
    )
    favorites: Mapped[list["Favorite"]] = relationship(
        "Favorite", back_populates="content", passive_deletes=True
    )


class Episode(Base):
    __tablename__ = "episodes"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=new_id)
    content_id: Mapped[str] = mapped_column(String, ForeignKey("content.id", ondelete="CASCADE"), nullable=False, index=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    episode_number: Mapped[int] = mapped_column(Integer, nullable=False)
    season_number: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    video_url: Mapped[str] = mapped_column(Text, nullable=False)
    thumbnail: Mapped[str | None] = mapped_column(Text, nullable=True)
    duration: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    content: Mapped["Content"] = relationship("Content", back_populates="episodes")
