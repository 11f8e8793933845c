from datetime import datetime
from typing import ClassVar, Literal
from pydantic import BaseModel, model_validator
from pydantic.alias_generators import to_camel

_CAMEL = {"alias_generator": to_camel, "populate_by_name": True}


class PartialUpdate(BaseModel):
    """Base for partial updates: omitted fields are left alone, explicit nulls clear the column.

    Columns that are NOT NULL are listed in ``not_nullable`` and reject an explicit null.
    """
    model_config = _CAMEL

    not_nullable: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_null_for_required_columns(self):
        for name in self.not_nullable:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} cannot be null")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class ContentCreate(BaseModel):
    model_config = _CAMEL

    title: str
    description: str | None = None
    type: Literal["movie", "series"]
    video_url: str | None = None
    thumbnail_horizontal: str | None = None
    thumbnail_vertical: str | None = None
    year: int | None = None
    duration: str | None = None
    rating: str | None = None
    genres: list[str] | None = None
    cast: list[str] | None = None
    director: str | None = None
    is_active: bool = True
    is_featured: bool = False


class ContentUpdate(PartialUpdate):
    not_nullable: ClassVar[tuple[str, ...]] = ("title", "type", "is_active", "is_featured")

    title: str | None = None
    description: str | None = None
    type: Literal["movie", "series"] | None = None
    video_url: str | None = None
    thumbnail_horizontal: str | None = None
    thumbnail_vertical: str | None = None
    year: int | None = None
    duration: str | None = None
    rating: str | None = None
    genres: list[str] | None = None
    cast: list[str] | None = None
    director: str | None = None
    is_active: bool | None = None
    is_featured: bool | None = None


class ContentResponse(BaseModel):
    model_config = {"from_attributes": True, **_CAMEL}

    id: str
    title: str
    description: str | None
    type: str
    video_url: str | None
    thumbnail_horizontal: str | None
    thumbnail_vertical: str | None
    year: int | None
    duration: str | None
    rating: str | None
    genres: list[str] | None
    cast: list[str] | None
    director: str | None
    is_active: bool
    is_featured: bool
    view_count: int
    created_at: datetime
    updated_at: datetime


class EpisodeCreate(BaseModel):
    model_config = _CAMEL

    content_id: str
    title: str
    description: str | None = None
    episode_number: int
    season_number: int = 1
    video_url: str
    thumbnail: str | None = None
    duration: str | None = None


class EpisodeUpdate(PartialUpdate):
    not_nullable: ClassVar[tuple[str, ...]] = ("content_id", "title", "episode_number", "season_number", "video_url")

    content_id: str | None = None
    title: str | None = None
    description: str | None = None
    episode_number: int | None = None
    season_number: int | None = None
    video_url: str | None = None
    thumbnail: str | None = None
    duration: str | None = None


class EpisodeResponse(BaseModel):
    model_config = {"from_attributes": True, **_CAMEL}

    id: str
    content_id: str
    title: str
    description: str | None
    episode_number: int
    season_number: int
    video_url: str
    thumbnail: str | None
    duration: str | None
    created_at: datetime
