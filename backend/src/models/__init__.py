"""Database models."""

from src.models.news import News
from src.models.packing_list import PackingList
from src.models.post import Post
from src.models.product import Product
from src.models.report import Report
from src.models.trip import Trip
from src.models.user import User

__all__ = [
    "News",
    "PackingList",
    "Post",
    "Product",
    "Report",
    "Trip",
    "User",
]
