"""Spend Arithmetic: exact decimal totals over subscription prices.

Invariants:
    - Summation uses Decimal only; floats are converted through str() first
    - Result always quantised to cents (0 subscriptions -> Decimal("0.00"))

Design Decisions:
    - Pure function over a Python-side sum: the same code path for PostgreSQL
      NUMERIC and SQLite (which stores REAL) keeps totals identical across stores
"""

from decimal import Decimal
from typing import Iterable

_CENT = Decimal("0.01")


def sum_prices(prices: Iterable[Decimal | int | float | str]) -> Decimal:
    """Exact sum of prices, quantised to cents."""
    total = Decimal("0")
    for price in prices:
        total += price if isinstance(price, Decimal) else Decimal(str(price))
    return total.quantize(_CENT)


def totals_by_currency(rows: Iterable[tuple[str, Decimal]]) -> dict[str, Decimal]:
    """Per-currency totals from (currency, price) pairs, sorted by currency code."""
    grouped: dict[str, list[Decimal]] = {}
    for currency, price in rows:
        grouped.setdefault(currency, []).append(price)
    return {code: sum_prices(grouped[code]) for code in sorted(grouped)}
