"""Review model."""

from datetime import datetime

from sqlalchemy import JSON, Column, Date, DateTime, ForeignKey, Integer, String, Text, Time
from sqlalchemy.orm import relationship

from app.db.base import Base


class Review(Base):
    """User review of a cafe. Immutable except for deletion by its author."""

    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    cafe_id = Column(String(36), ForeignKey("cafes.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), nullable=False, index=True)
    user_name = Column(String(100), nullable=False)
    rating = Column(Integer, nullable=False)  # 1-5
    comment = Column(Text, nullable=False)
    purpose = Column(String(50))  # 방문 목적

    # 작성 시점의 features 스냅샷
    seats = Column(String(20))
    desk_height = Column(String(20))
    outlets = Column(String(20))
    wifi = Column(String(20))
    atmosphere = Column(JSON, nullable=False, default=list)

    visit_date = Column(Date)
    visit_time = Column(Time)
    stay_duration = Column(String(20))
    price_satisfaction = Column(Integer)
    overall_satisfaction = Column(Integer)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    cafe = relationship("Cafe", back_populates="reviews")
