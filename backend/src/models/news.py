"""Aggregated news article model."""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import String, Text, TIMESTAMP
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import Mapped, mapped_column
from src.database import Base


class News(Base):
    __tablename__ = "news"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    title: Mapped[str] = mapped_column(String(500))
    link: Mapped[str] = mapped_column(String(1000), unique=True)
    description: Mapped[Optional[str]] = mapped_column(Text)
    content: Mapped[Optional[str]] = mapped_column(Text)
    image: Mapped[Optional[str]] = mapped_column(String(1000))
    source_id: Mapped[str] = mapped_column(String(100), index=True)
    tags: Mapped[list] = mapped_column(JSONB, default=list)

    published_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), index=True)

    def __repr__(self):
        return f"<News(source='{self.source_id}', title='{self.title[:40]}')>"
