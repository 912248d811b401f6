"""Packing list model.

Categories are stored as JSONB::

    [{"name": "Clothing",
      "items": [{"name": "Socks", "qty": 2, "checked": true,
                 "eco": false, "suggested_by_ai": false}]}]
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, String, TIMESTAMP, func
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import Mapped, mapped_column
from src.database import Base


class PackingList(Base):
    __tablename__ = "packing_lists"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_uid: Mapped[str] = mapped_column(String(128), index=True)
    trip_id: Mapped[Optional[uuid.UUID]] = mapped_column(UUID(as_uuid=True), nullable=True)

    title: Mapped[str] = mapped_column(String(255))
    is_ai_generated: Mapped[bool] = mapped_column(Boolean, server_default="false")
    categories: Mapped[list] = mapped_column(JSONB, default=list)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), index=True
    )

    def iter_items(self):
        """Yield (category_name, item) pairs across all categories."""
        for category in self.categories or []:
            for item in category.get("items") or []:
                yield category.get("name") or "Uncategorized", item

    def __repr__(self):
        return f"<PackingList(title='{self.title}')>"
