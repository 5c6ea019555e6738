from sqlalchemy import Column, Integer, String, DateTime, Boolean, Text, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from tripai.database import Base


class Trip(Base):
    __tablename__ = "trips"
    __table_args__ = (
        Index("ix_trips_user_created", "user_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    destination = Column(String(200), nullable=False)
    days = Column(Integer, nullable=False)

    budget_min = Column(Integer, nullable=True)
    budget_max = Column(Integer, nullable=True)
    budget_label = Column(String(50), nullable=True)

    # Serialized Itinerary JSON; never updated after insert
    itinerary = Column(Text, nullable=False)

    is_active = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    owner = relationship("User", back_populates="trips")
