"""Subscription ORM: a user's recurring commitment to a Service.

Invariants:
    - user_id and service_id are enforced foreign keys
    - price is NUMERIC(10, 2), read back as Decimal
    - status starts as "active"

Design Decisions:
    - No ON DELETE for service_id: services are never deleted
    - renewal_date indexed with user_id: the dashboard query filters and orders on both
"""

from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    Integer, String, Date, DateTime, Numeric, ForeignKey, Index, CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from latt.core.domain_types import (
    SubscriptionStatus, DEFAULT_BILLING_CYCLE, DEFAULT_CURRENCY,
)
from latt.db.base import Base


class Subscription(Base):
    """Subscription row scoped to one user."""
    __tablename__ = "subscriptions"
    __table_args__ = (
        Index("ix_subscriptions_user_renewal", "user_id", "renewal_date"),
        CheckConstraint("price >= 0", name="ck_subscriptions_price_non_negative"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
    )
    service_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("services.id"), nullable=False,
    )
    renewal_date: Mapped[date] = mapped_column(Date, nullable=False)
    price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2, asdecimal=True), nullable=False,
    )
    currency: Mapped[str] = mapped_column(
        String(3), nullable=False, default=DEFAULT_CURRENCY,
    )
    plan_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    billing_cycle: Mapped[str] = mapped_column(
        String(20), nullable=False, default=DEFAULT_BILLING_CYCLE,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=SubscriptionStatus.ACTIVE.value,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    user: Mapped["User"] = relationship("User", back_populates="subscriptions")
    service: Mapped["Service"] = relationship(
        "Service", back_populates="subscriptions",
    )
