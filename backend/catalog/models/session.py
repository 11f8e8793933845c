from datetime import datetime
from sqlalchemy import String, DateTime, Index, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from catalog.database import Base


class AuthSession(Base):
    __tablename__ = "sessions"
    __table_args__ = (
        Index("IDX_session_expire", "expire"),
    )

    sid: Mapped[str] = mapped_column(String, primary_key=True)
    sess: Mapped[dict] = mapped_column(JSON().with_variant(JSONB, "postgresql"), nullable=False)
    expire: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
