"""Report model for persisting generated analytic reports."""

import uuid
from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Index,
    String,
    Text,
    TIMESTAMP,
    func,
)
from sqlalchemy.dialects.postgresql import UUID, JSONB
from src.database import Base


class Report(Base):
    """Stores a generated report together with its lifecycle state."""

    __tablename__ = "reports"
    __table_args__ = (
        CheckConstraint(
            "status <> 'completed' OR generated_at IS NOT NULL",
            name="ck_reports_completed_has_generated_at",
        ),
        CheckConstraint(
            "status IN ('pending', 'generating', 'completed', 'failed')",
            name="ck_reports_status",
        ),
        Index("ix_reports_owner_generated", "owner_uid", "generated_at"),
        Index("ix_reports_owner_type", "owner_uid", "report_type"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_uid = Column(String(128), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    report_type = Column(String(50), nullable=False)

    # Echo of the request, reused on regeneration
    filters = Column(JSONB, nullable=False, default=dict)
    selected_fields = Column(JSONB, nullable=True)

    data = Column(JSONB, nullable=False, default=dict)

    status = Column(String(20), nullable=False, default="pending", server_default="pending")
    error_message = Column(Text, nullable=True)
    generated_at = Column(TIMESTAMP(timezone=True), nullable=True)

    is_scheduled = Column(Boolean, nullable=False, default=False, server_default="false")
    schedule_frequency = Column(String(20), nullable=True)
    last_generated = Column(TIMESTAMP(timezone=True), nullable=True)

    tags = Column(JSONB, nullable=False, default=list)

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Report(type='{self.report_type}', owner='{self.owner_uid}', status='{self.status}')>"
