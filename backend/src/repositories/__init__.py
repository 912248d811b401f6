"""Repository layer for data access."""

from src.repositories.report_repository import ReportRepository
from src.repositories.source_repository import SourceQuery, SourceRepository
from src.repositories.user_repository import UserRepository

__all__ = [
    "ReportRepository",
    "SourceQuery",
    "SourceRepository",
    "UserRepository",
]
