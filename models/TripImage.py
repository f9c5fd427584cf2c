from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship

from database import Base


class TripImage(Base):
    __tablename__ = "trip_images"

    id = Column(Integer, primary_key=True, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, default=0, nullable=False)
    url = Column(String(500), nullable=False)  # external reference only
    caption = Column(String(200), nullable=True)

    trip = relationship("Trip", back_populates="images")
