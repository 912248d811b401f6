"""Factory functions for business logic services."""

from functools import lru_cache

from sqlalchemy.ext.asyncio import AsyncSession

from src.config import get_settings
from src.database import AsyncSessionLocal
from src.repositories.report_repository import ReportRepository
from src.repositories.source_repository import SourceRepository
from src.services.field_config import DEFAULT_FIELD_CONFIGS, FieldConfigRegistry
from src.services.generators import GeneratorRegistry
from src.services.report_service import ReportService


@lru_cache(maxsize=1)
def get_field_registry() -> FieldConfigRegistry:
    """
    Create singleton field configuration registry.

    Construction cross-checks every configured path against the payload
    models, so a bad config fails here instead of on first use.
    """
    return FieldConfigRegistry(DEFAULT_FIELD_CONFIGS)


@lru_cache(maxsize=1)
def get_generator_registry() -> GeneratorRegistry:
    """Create singleton generator registry reading through short-lived sessions."""
    return GeneratorRegistry(SourceRepository(AsyncSessionLocal))


def get_report_service(db_session: AsyncSession) -> ReportService:
    """
    Create ReportService with dependencies.

    Note: Not cached because depends on request-scoped db session.

    Args:
        db_session: Database session owning the report records

    Returns:
        ReportService instance
    """
    settings = get_settings()
    return ReportService(
        report_repo=ReportRepository(db_session),
        generators=get_generator_registry(),
        field_registry=get_field_registry(),
        top_n=settings.report_top_n,
        recent_limit=settings.report_recent_records,
        default_page_size=settings.report_default_page_size,
        max_page_size=settings.report_max_page_size,
    )
