from datetime import datetime
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class UserUpsert(BaseModel):
    id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None

    @classmethod
    def from_claims(cls, claims: dict) -> "UserUpsert":
        """Map OpenID Connect userinfo claims onto a user record."""
        return cls(
            id=str(claims["sub"]),
            email=claims.get("email"),
            first_name=claims.get("first_name") or claims.get("given_name"),
            last_name=claims.get("last_name") or claims.get("family_name"),
            profile_image_url=claims.get("profile_image_url") or claims.get("picture"),
        )


class UserResponse(BaseModel):
    model_config = {"from_attributes": True, "alias_generator": to_camel, "populate_by_name": True}

    id: str
    email: str | None
    first_name: str | None
    last_name: str | None
    profile_image_url: str | None
    created_at: datetime
    updated_at: datetime
