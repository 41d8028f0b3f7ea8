"""Cafe model."""

from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, Float, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base


class Cafe(Base):
    """Cafe aggregate. ``id`` is derived from (name, address)."""

    __tablename__ = "cafes"
    __table_args__ = (UniqueConstraint("name", "address", name="uq_cafe_name_address"),)

    id = Column(String(36), primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    address = Column(Text, nullable=False)
    latitude = Column(Float, index=True)
    longitude = Column(Float, index=True)
    rating = Column(Float)  # 리뷰 평균, 첫 리뷰 전에는 NULL
    review_count = Column(Integer, nullable=False, default=0)
    images = Column(JSON, nullable=False, default=list)
    place_url = Column(Text)  # 카카오맵 상세 페이지

    # features
    seats = Column(String(20))
    desk_height = Column(String(20))
    outlets = Column(String(20))
    wifi = Column(String(20))
    atmosphere = Column(JSON, nullable=False, default=list)

    comments = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    reviews = relationship(
        "Review",
        back_populates="cafe",
        cascade="all, delete-orphan",
        order_by="Review.created_at.desc()",
    )
    likes = relationship("Like", back_populates="cafe", cascade="all, delete-orphan")
