"""Trip model (read-only input for trip, budget and destination reports)."""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, Float, Integer, String, Text, TIMESTAMP, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column
from src.database import Base


class Trip(Base):
    __tablename__ = "trips"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_uid: Mapped[str] = mapped_column(String(128), index=True)

    title: Mapped[str] = mapped_column(String(255))
    destination: Mapped[str] = mapped_column(String(255), index=True)
    description: Mapped[Optional[str]] = mapped_column(Text)

    # Solo / Couple / Family / Group
    trip_type: Mapped[str] = mapped_column(String(20), server_default="Solo")

    start_date: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), index=True)
    end_date: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True))
    duration_days: Mapped[Optional[int]] = mapped_column(Integer)

    budget: Mapped[float] = mapped_column(Float, server_default="0")

    is_eco_friendly: Mapped[bool] = mapped_column(Boolean, server_default="false")
    eco_score: Mapped[float] = mapped_column(Float, server_default="0")
    carbon_footprint: Mapped[float] = mapped_column(Float, server_default="0")
    carbon_saved: Mapped[float] = mapped_column(Float, server_default="0")

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now()
    )

    def __repr__(self):
        return f"<Trip(destination='{self.destination}', start='{self.start_date}')>"
