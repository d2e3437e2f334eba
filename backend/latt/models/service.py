"""Service ORM: catalog entry for a subscribable product, keyed by name.

Invariants:
    - lookup_key (casefolded name) is UNIQUE: at most one row per distinct name
    - name keeps the display form of the first submission
    - Rows are created on first reference and never mutated or deleted

Design Decisions:
    - Separate lookup_key column over a functional index: portable between
      PostgreSQL and SQLite, and the constraint name is stable for migrations
"""

from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from latt.core.domain_types import DEFAULT_LOGO_URL
from latt.db.base import Base


class Service(Base):
    """Service catalog entry."""
    __tablename__ = "services"
    __table_args__ = (
        UniqueConstraint("lookup_key", name="uq_services_lookup_key"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    lookup_key: Mapped[str] = mapped_column(String(100), nullable=False)
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    logo_url: Mapped[str] = mapped_column(
        String(500), nullable=False, default=DEFAULT_LOGO_URL,
    )

    subscriptions: Mapped[list["Subscription"]] = relationship(
        "Subscription", back_populates="service",
    )
