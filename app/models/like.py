"""Like model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base


class Like(Base):
    """A user's like of a cafe; at most one per (user, cafe)."""

    __tablename__ = "likes"
    __table_args__ = (UniqueConstraint("user_id", "cafe_id", name="uq_like_user_cafe"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(36), nullable=False, index=True)
    cafe_id = Column(String(36), ForeignKey("cafes.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    cafe = relationship("Cafe", back_populates="likes")
