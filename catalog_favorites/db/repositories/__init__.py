"""Repositories wrapping SQLAlchemy access for users, products and favorites."""

from .favorites import FavoriteRepository
from .products import ProductRepository
from .users import UserRepository

__all__ = [
    "FavoriteRepository",
    "ProductRepository",
    "UserRepository",
]
