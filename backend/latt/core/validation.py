"""Input Validation: pure normalisation of form values before they reach the store.

Invariants:
    - Every function either returns a normalised value or raises InvalidInputError
    - Service names compare case-insensitively: lookup key is the casefolded display name
    - Prices are Decimal with at most two fractional digits, never float
    - No IO: safe to call before any database work

Design Decisions:
    - Whitespace inside service names collapsed to one space: "Disney  Plus" and
      "Disney Plus" are the same catalog entry
    - bool rejected as a price even though it is an int subclass
"""

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from latt.core.domain_types import DEFAULT_BILLING_CYCLE, DEFAULT_CURRENCY
from latt.core.errors import InvalidInputError

SERVICE_NAME_MAX_LENGTH = 100
CATEGORY_MAX_LENGTH = 50
PLAN_NAME_MAX_LENGTH = 100
BILLING_CYCLE_MAX_LENGTH = 20
PRICE_CEILING = Decimal("100000000")  # NUMERIC(10, 2)
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_BYTES = 72  # bcrypt input limit

_CENT = Decimal("0.01")
_WHITESPACE = re.compile(r"\s+")
_ISO_DATE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")
_CURRENCY = re.compile(r"^[A-Za-z]{3}$")
_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


# ─── Services ────────────────────────────────────────────────────

def normalize_service_name(name: str | None) -> str:
    """Return the display form of a service name."""
    display = _WHITESPACE.sub(" ", name or "").strip()
    if not display:
        raise InvalidInputError("Service name cannot be empty", "serviceName")
    # casefold can lengthen a name ("ß" -> "ss"); the lookup key shares the column width
    if max(len(display), len(display.casefold())) > SERVICE_NAME_MAX_LENGTH:
        raise InvalidInputError(
            f"Service name exceeds {SERVICE_NAME_MAX_LENGTH} characters", "serviceName",
        )
    return display


def service_lookup_key(display_name: str) -> str:
    """Unique key for a normalised service name."""
    return display_name.casefold()


def normalize_category(category: str | None) -> str | None:
    value = (category or "").strip()
    if not value:
        return None
    if len(value) > CATEGORY_MAX_LENGTH:
        raise InvalidInputError(
            f"Category exceeds {CATEGORY_MAX_LENGTH} characters", "category",
        )
    return value


# ─── Subscriptions ───────────────────────────────────────────────

def parse_price(value: Decimal | int | float | str | None) -> Decimal:
    """Parse a non-negative price with at most two fractional digits."""
    if value is None or isinstance(value, bool):
        raise InvalidInputError("Price is required", "price")
    try:
        price = Decimal(str(value).strip()) if not isinstance(value, Decimal) else value
    except InvalidOperation:
        raise InvalidInputError(f"Price '{value}' is not a number", "price")
    if not price.is_finite():
        raise InvalidInputError("Price must be a finite number", "price")
    if price < 0:
        raise InvalidInputError("Price cannot be negative", "price")
    if price >= PRICE_CEILING:
        raise InvalidInputError("Price is too large", "price")
    if price != price.quantize(_CENT):
        raise InvalidInputError("Price cannot have more than two decimal places", "price")
    return price.quantize(_CENT)


def parse_renewal_date(value: date | str | None) -> date:
    """Parse a calendar date from a date object or an ISO YYYY-MM-DD string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = (value or "").strip()
    if not text:
        raise InvalidInputError("Renewal date is required", "renewalDate")
    try:
        if not _ISO_DATE.match(text):
            raise ValueError(text)
        return date.fromisoformat(text)
    except ValueError:
        raise InvalidInputError(
            f"Renewal date '{text}' is not a valid YYYY-MM-DD date", "renewalDate",
        )


def normalize_plan_name(plan_name: str | None) -> str | None:
    value = (plan_name or "").strip()
    if not value:
        return None
    if len(value) > PLAN_NAME_MAX_LENGTH:
        raise InvalidInputError(
            f"Plan name exceeds {PLAN_NAME_MAX_LENGTH} characters", "planName",
        )
    return value


def normalize_billing_cycle(billing_cycle: str | None) -> str:
    """Billing cycle is stored, never interpreted. Blank falls back to monthly."""
    if billing_cycle is None:
        return DEFAULT_BILLING_CYCLE
    value = billing_cycle.strip().lower()
    if not value:
        return DEFAULT_BILLING_CYCLE
    if len(value) > BILLING_CYCLE_MAX_LENGTH:
        raise InvalidInputError(
            f"Billing cycle exceeds {BILLING_CYCLE_MAX_LENGTH} characters", "billingCycle",
        )
    return value


def normalize_currency(currency: str | None) -> str:
    value = (currency or "").strip()
    if not value:
        return DEFAULT_CURRENCY
    if not _CURRENCY.match(value):
        raise InvalidInputError(
            f"Currency '{value}' must be a three-letter code", "currency",
        )
    return value.upper()


# ─── Accounts ────────────────────────────────────────────────────

def normalize_email(email: str | None) -> str:
    value = (email or "").strip().lower()
    if not _EMAIL.match(value):
        raise InvalidInputError("Email address is not valid", "email")
    return value


def check_password(password: str | None) -> str:
    """Enforce bcrypt-compatible password length (counted in UTF-8 bytes)."""
    if not password or len(password) < PASSWORD_MIN_LENGTH:
        raise InvalidInputError(
            f"Password must be at least {PASSWORD_MIN_LENGTH} characters", "password",
        )
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise InvalidInputError(
            f"Password exceeds {PASSWORD_MAX_BYTES} bytes", "password",
        )
    return password
