"""User model for identity-provider synced users."""

import uuid
from datetime import datetime

from sqlalchemy import String, TIMESTAMP, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column
from src.database import Base


class User(Base):
    """User synced from the identity provider on first authenticated request."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Identity provider subject
    uid: Mapped[str] = mapped_column(String(128), unique=True, index=True)

    email: Mapped[str | None] = mapped_column(String(255), index=True)
    display_name: Mapped[str | None] = mapped_column(String(255))

    # "user" or "admin"
    role: Mapped[str] = mapped_column(String(20), server_default="user")

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )
    last_login_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True))

    def __repr__(self):
        return f"<User(uid='{self.uid}', email='{self.email}')>"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
