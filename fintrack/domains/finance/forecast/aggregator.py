"""Monthly income/expense aggregation over a trailing lookback window."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Mapping, Optional, Tuple

DEFAULT_LOOKBACK_MONTHS = 6


@dataclass(frozen=True)
class MonthlyBucket:
    year: int
    month: int
    income: float = 0.0
    expense: float = 0.0

    @property
    def key(self) -> Tuple[int, int]:
        return (self.year, self.month)


def months_before(as_of: date, months: int) -> date:
    """Return ``as_of`` shifted back by whole calendar months.

    The day is clamped to the last day of the target month, so 31 Aug minus
    six months is 28/29 Feb.
    """
    total = as_of.year * 12 + (as_of.month - 1) - months
    year, month_index = divmod(total, 12)
    month = month_index + 1
    day = min(as_of.day, _days_in_month(year, month))
    return date(year, month, day)


def _days_in_month(year: int, month: int) -> int:
    if month == 12:
        return 31
    return (date(year, month + 1, 1) - date(year, month, 1)).days


def _field(txn: Any, name: str) -> Any:
    if isinstance(txn, Mapping):
        return txn.get(name)
    return getattr(txn, name, None)


def coerce_date(value: Any) -> Optional[date]:
    """Best-effort conversion of a transaction date; ``None`` when unparsable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            pass
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None
    return None


def _coerce_amount(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = float(Decimal(str(value)))
    except (InvalidOperation, ValueError):
        return None
    if not math.isfinite(amount):
        return None
    return amount


def aggregate_monthly(
    transactions: Iterable[Any],
    *,
    as_of: date,
    lookback_months: int = DEFAULT_LOOKBACK_MONTHS,
) -> List[MonthlyBucket]:
    """Group transactions into per-month income/expense totals.

    Transactions may be mappings or objects exposing ``date`` (or
    ``occurred_on``), ``type`` and ``amount``. Anything dated before
    ``as_of`` minus ``lookback_months`` or after ``as_of`` is ignored, as are
    records whose date or amount cannot be read. Any type other than
    ``income`` counts as an expense. Buckets come back sorted by ``(year, month)``.
    """
    cutoff = months_before(as_of, lookback_months)
    totals: dict[Tuple[int, int], List[float]] = {}
    for txn in transactions:
        raw_date = _field(txn, "date")
        if raw_date is None:
            raw_date = _field(txn, "occurred_on")
        when = coerce_date(raw_date)
        if when is None or when < cutoff or when > as_of:
            continue
        amount = _coerce_amount(_field(txn, "amount"))
        if amount is None:
            continue
        sums = totals.setdefault((when.year, when.month), [0.0, 0.0])
        if _field(txn, "type") == "income":
            sums[0] += amount
        else:
            sums[1] += amount
    return [
        MonthlyBucket(year=year, month=month, income=income, expense=expense)
        for (year, month), (income, expense) in sorted(totals.items())
    ]
