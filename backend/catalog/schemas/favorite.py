from datetime import datetime
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class FavoriteCreate(BaseModel):
    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    content_id: str


class FavoriteResponse(BaseModel):
    model_config = {"from_attributes": True, "alias_generator": to_camel, "populate_by_name": True}

    id: str
    user_id: str
    content_id: str
    created_at: datetime


class FavoriteStatus(BaseModel):
    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    is_favorite: bool
