"""
Repository layer.

Data access objects grouped by business domain. Each repository wraps an
``AsyncSession`` and only flushes; services own the transaction.
"""

from .addresses import AddressRepository
from .base import AsyncBaseRepository, QueryBuilder
from .blog import BlogCommentRepository, BlogPostRepository
from .carts import CartRepository
from .catalog import CategoryRepository, FavoriteRepository, ProductRepository, TagRepository
from .newsletter import NewsletterRepository
from .orders import OrderRepository
from .quotes import QuoteRepository
from .users import AuditLogRepository, UserRepository

__all__ = [
    "AddressRepository",
    "AsyncBaseRepository",
    "AuditLogRepository",
    "BlogCommentRepository",
    "BlogPostRepository",
    "CartRepository",
    "CategoryRepository",
    "FavoriteRepository",
    "NewsletterRepository",
    "OrderRepository",
    "ProductRepository",
    "QueryBuilder",
    "QuoteRepository",
    "TagRepository",
    "UserRepository",
]
