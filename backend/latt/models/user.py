"""User ORM: account owning subscriptions.

Invariants:
    - email is unique and stored lower-cased
    - password_hash is a bcrypt hash, never the plain password

Design Decisions:
    - cascade delete for subscriptions: a removed account takes its rows with it
"""

from datetime import datetime, timezone

from sqlalchemy import Integer, String, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from latt.db.base import Base


class User(Base):
    """User account: the owner referenced by subscriptions.user_id."""
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    subscriptions: Mapped[list["Subscription"]] = relationship(
        "Subscription", back_populates="user",
        cascade="all, delete-orphan", passive_deletes=True,
    )
