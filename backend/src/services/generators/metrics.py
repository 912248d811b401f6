"""Numeric and grouping helpers shared by report generators."""

from collections import Counter
from datetime import datetime, timedelta
from typing import Any, Callable, Hashable, Iterable, Optional, Sequence, TypeVar

T = TypeVar("T")

MONTH_LABEL_FORMAT = "%b %Y"

BUDGET_BUCKETS: tuple[tuple[str, float, Optional[float]], ...] = (
    ("0-500", 0, 500),
    ("501-1000", 500, 1000),
    ("1001-2000", 1000, 2000),
    ("2001-5000", 2000, 5000),
    ("5000+", 5000, None),
)

SEASONS = ("Winter", "Spring", "Summer", "Autumn")


def round2(value: float) -> float:
    return round(float(value), 2)


def safe_sum(values: Iterable[Optional[float]]) -> float:
    return round2(sum(v or 0 for v in values))


def safe_average(values: Iterable[Optional[float]]) -> float:
    """Mean rounded to two decimals; 0 for an empty input."""
    items = [v or 0 for v in values]
    if not items:
        return 0
    return round2(sum(items) / len(items))


def safe_percentage(part: float, whole: float) -> float:
    """``part / whole`` as a percentage; 0 when ``whole`` is 0."""
    if not whole:
        return 0
    return round2(part / whole * 100)


def safe_max(values: Sequence[float]) -> float:
    return round2(max(values)) if values else 0


def safe_min(values: Sequence[float]) -> float:
    return round2(min(values)) if values else 0


def frequency(values: Iterable[Hashable]) -> Counter:
    """Occurrence counts; iteration order is first occurrence."""
    return Counter(v for v in values if v is not None and v != "")


def top_n(counts: dict[Any, float], n: int) -> list[tuple[Any, float]]:
    """Descending by count; ties keep first-occurrence order (stable sort)."""
    return sorted(counts.items(), key=lambda kv: kv[1], reverse=True)[:n]


def most_frequent(values: Iterable[Hashable]) -> Optional[Any]:
    ranked = top_n(frequency(values), 1)
    return ranked[0][0] if ranked else None


def return_visits(counts: dict[Any, int]) -> int:
    """Number of keys seen more than once."""
    return sum(1 for count in counts.values() if count > 1)


def month_label(moment: datetime) -> str:
    return moment.strftime(MONTH_LABEL_FORMAT)


def sort_by_month(buckets: dict[str, T]) -> dict[str, T]:
    """Reorder month-labelled buckets chronologically, not lexically."""
    return dict(
        sorted(buckets.items(), key=lambda kv: datetime.strptime(kv[0], MONTH_LABEL_FORMAT))
    )


def group_by_month(items: Iterable[T], key: Callable[[T], Optional[datetime]]) -> dict[str, list[T]]:
    buckets: dict[str, list[T]] = {}
    for item in items:
        moment = key(item)
        if moment is None:
            continue
        buckets.setdefault(month_label(moment), []).append(item)
    return sort_by_month(buckets)


def season_of(moment: datetime) -> str:
    """Meteorological season (northern hemisphere)."""
    return SEASONS[(moment.month % 12) // 3]


def budget_bucket(amount: float) -> str:
    for label, _low, high in BUDGET_BUCKETS:
        if high is None or amount <= high:
            return label
    return BUDGET_BUCKETS[-1][0]


def within_days(moment: Optional[datetime], now: datetime, days: int) -> bool:
    return moment is not None and moment >= now - timedelta(days=days)


def iso(moment: Optional[datetime]) -> Optional[str]:
    return moment.isoformat() if moment is not None else None
