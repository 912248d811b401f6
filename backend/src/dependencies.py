"""FastAPI dependency injection providers."""

from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from src.database import get_db
from src.exceptions import MissingTokenError
from src.factories.service_factories import get_field_registry, get_report_service
from src.models.user import User
from src.repositories.report_repository import ReportRepository
from src.repositories.user_repository import UserRepository
from src.services.auth_service import get_auth_service
from src.services.field_config import FieldConfigRegistry
from src.services.report_service import ReportService


# Type aliases for cleaner router signatures
DbSession = Annotated[AsyncSession, Depends(get_db)]


# Repository dependencies (request-scoped)
def get_report_repository(db: DbSession) -> ReportRepository:
    """Get ReportRepository with database session."""
    return ReportRepository(db)


def get_user_repository(db: DbSession) -> UserRepository:
    """Get UserRepository with database session."""
    return UserRepository(db)


ReportRepoDep = Annotated[ReportRepository, Depends(get_report_repository)]
UserRepoDep = Annotated[UserRepository, Depends(get_user_repository)]


# Service dependencies
def get_report_service_dep(db: DbSession) -> ReportService:
    """Get ReportService with database session."""
    return get_report_service(db)


ReportServiceDep = Annotated[ReportService, Depends(get_report_service_dep)]
FieldRegistryDep = Annotated[FieldConfigRegistry, Depends(get_field_registry)]


# ============================================================================
# Authentication Dependencies
# ============================================================================


async def get_current_user_required(
    user_repo: UserRepoDep,
    db: DbSession,
    authorization: Annotated[str | None, Header(alias="Authorization")] = None,
) -> User:
    """Verify the bearer token and sync the caller to the users table, 401 otherwise."""
    if not authorization:
        raise MissingTokenError()

    auth_user = await get_auth_service().verify_token(authorization)
    user, _ = await user_repo.get_or_create(
        uid=auth_user.uid,
        email=auth_user.email,
        display_name=auth_user.display_name,
    )
    await db.commit()
    return user


CurrentUserRequired = Annotated[User, Depends(get_current_user_required)]
