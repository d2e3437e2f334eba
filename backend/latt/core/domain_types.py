"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, ServiceId, SubscriptionId wrap the integer surrogate keys
    - All valid lifecycle states encoded as Enums: no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)
ServiceId = NewType("ServiceId", int)
SubscriptionId = NewType("SubscriptionId", int)


# ─── Enums ───────────────────────────────────────────────────────

class SubscriptionStatus(str, Enum):
    """Subscription lifecycle tags: maps to DB `status` column."""
    ACTIVE = "active"
    CANCELLED = "cancelled"


# ─── Defaults ────────────────────────────────────────────────────

DEFAULT_LOGO_URL = "/images/logos/placeholder.png"
DEFAULT_BILLING_CYCLE = "monthly"
DEFAULT_CURRENCY = "USD"
