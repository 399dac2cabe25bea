"""Year-range lookup for time-varying asset parameters."""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from asset_chisel.schemas.asset import ReturnRateInterval

OverlapPolicy = Callable[[Sequence[ReturnRateInterval]], ReturnRateInterval]


def latest_start(candidates: Sequence[ReturnRateInterval]) -> ReturnRateInterval:
    """Most recently starting interval wins; ties keep input order."""
    return max(candidates, key=lambda interval: interval.startYear)


def earliest_start(candidates: Sequence[ReturnRateInterval]) -> ReturnRateInterval:
    return min(candidates, key=lambda interval: interval.startYear)


def active_interval(
    year: int,
    intervals: Sequence[ReturnRateInterval],
    policy: OverlapPolicy = latest_start,
) -> Optional[ReturnRateInterval]:
    """Return the interval covering ``year`` (inclusive on both ends), if any.

    Overlaps and gaps are tolerated; ``policy`` picks among overlapping matches.
    """
    matches = [
        interval for interval in intervals if interval.startYear <= year <= interval.endYear
    ]
    if not matches:
        return None
    return policy(matches)


def rate_for_year(
    year: int,
    intervals: Sequence[ReturnRateInterval],
    policy: OverlapPolicy = latest_start,
) -> float:
    """Effective annual rate in percent; 0 when no interval covers the year."""
    interval = active_interval(year, intervals, policy)
    return interval.ratePercent if interval is not None else 0.0
