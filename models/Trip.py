from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Float, Boolean, JSON
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import relationship

from database import Base, utcnow

CURRENCIES = ("USD", "EUR", "GBP", "INR", "CAD", "AUD", "JPY")


class Trip(Base):
    __tablename__ = "trips"

    id = Column(Integer, primary_key=True, index=True)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)

    # Location
    country = Column(String(100), nullable=False, index=True)
    city = Column(String(100), nullable=False, index=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    duration_days = Column(Integer, nullable=False)

    # Cost breakdown
    cost_transport = Column(Float, default=0, nullable=False)
    cost_accommodation = Column(Float, default=0, nullable=False)
    cost_food = Column(Float, default=0, nullable=False)
    cost_activities = Column(Float, default=0, nullable=False)
    cost_other = Column(Float, default=0, nullable=False)
    currency = Column(String(3), default="USD", nullable=False)

    tips = Column(JSON, default=list, nullable=False)
    mistakes = Column(JSON, default=list, nullable=False)

    rating_average = Column(Float, default=0, nullable=False)  # 0-5
    rating_count = Column(Integer, default=0, nullable=False)

    is_published = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    author = relationship("User", lazy="joined")
    images = relationship(
        "TripImage", back_populates="trip", cascade="all, delete-orphan", order_by="TripImage.position"
    )
    likes = relationship(
        "TripLike", back_populates="trip", cascade="all, delete-orphan", order_by="TripLike.created_at"
    )
    wishlist_entries = relationship("Wishlist", back_populates="trip", cascade="all, delete-orphan")

    @hybrid_property
    def total_cost(self):
        return (
            self.cost_transport
            + self.cost_accommodation
            + self.cost_food
            + self.cost_activities
            + self.cost_other
        )

    @property
    def like_count(self) -> int:
        return len(self.likes)
