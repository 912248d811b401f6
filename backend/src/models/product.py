"""Eco product catalogue model."""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, Float, Integer, String, Text, TIMESTAMP, func
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import Mapped, mapped_column
from src.database import Base


class Product(Base):
    __tablename__ = "products"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[Optional[str]] = mapped_column(Text)
    brand: Mapped[Optional[str]] = mapped_column(String(255))
    category: Mapped[str] = mapped_column(String(100), index=True)

    # 1 (poor) .. 5 (excellent)
    eco_rating: Mapped[int] = mapped_column(Integer, server_default="1")
    price: Mapped[float] = mapped_column(Float, server_default="0")
    is_available: Mapped[bool] = mapped_column(Boolean, server_default="true")
    available_locations: Mapped[list] = mapped_column(JSONB, default=list)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now()
    )

    def __repr__(self):
        return f"<Product(name='{self.name}', category='{self.category}')>"
