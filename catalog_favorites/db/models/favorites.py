"""SQLAlchemy ORM model linking users to the catalog products they favorited.

The ``(user_id, product_id)`` unique constraint is the authoritative guard
against duplicate favorites.  Concurrent requests can both pass the service's
existence check, so the insert itself must fail for the loser.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from . import Base, Product, User, new_uuid, utcnow


class Favorite(Base):
    """Association row that links a user to a cached catalog product."""

    __tablename__ = "favorites"
    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "product_id",
            name="uq_favorites_user_product",
        ),
        Index("ix_favorites_user_created", "user_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    product_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("products.id"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    user: Mapped[User] = relationship("User", back_populates="favorites")
    product: Mapped[Product] = relationship("Product")
