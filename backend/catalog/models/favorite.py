from datetime import datetime
from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from catalog.database import Base, utcnow
from catalog.models.content import new_id


class Favorite(Base):
    __tablename__ = "favorites"
    # No unique (user_id, content_id) constraint: duplicate rows are tolerated
    # and remove_from_favorites deletes every match.

    id: Mapped[str] = mapped_column(String, primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    content_id: Mapped[str] = mapped_column(String, ForeignKey("content.id", ondelete="CASCADE"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    user: Mapped["User"] = relationship("User", back_populates="favorites")
    content: Mapped["Content"] = relationship("Content", back_populates="favorites")
