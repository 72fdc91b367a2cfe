"""
Database entity models.

This package contains all database entity models organized by business domain.
Importing it registers every table on the shared metadata.

Modules:
- users: Accounts and the admin audit trail
- catalog: Categories, products, tags and favorites
- carts: User and guest carts
- addresses: Shipping and billing addresses
- orders: Orders, order lines and status history
- quotes: Custom arrangement quotes
- blog: Posts, threaded comments and reactions
- newsletter: Newsletter subscriptions
"""

from . import (
    addresses,
    blog,
    carts,
    catalog,
    newsletter,
    orders,
    quotes,
    users,
)

__all__ = [
    "addresses",
    "blog",
    "carts",
    "catalog",
    "newsletter",
    "orders",
    "quotes",
    "users",
]
