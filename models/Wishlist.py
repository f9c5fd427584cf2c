from sqlalchemy import Column, Integer, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship

from database import Base, utcnow


class Wishlist(Base):
    __tablename__ = "wishlist"
    __table_args__ = (
        # a user can save a given trip only once
        UniqueConstraint("user_id", "trip_id", name="uq_wishlist_user_trip"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    trip = relationship("Trip", back_populates="wishlist_entries")
