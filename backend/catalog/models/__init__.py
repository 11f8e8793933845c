from catalog.models.user import User
from catalog.models.content import Content, ContentType, Episode
from catalog.models.favorite import Favorite
from catalog.models.session import AuthSession

__all__ = [
    "User",
    "Content",
    "ContentType",
    "Episode",
    "Favorite",
    "AuthSession",
]
