"""Scheduled contributions and contribution-cap enforcement."""

from __future__ import annotations

import math
from typing import Sequence

from asset_chisel.schemas.asset import ContributionCap, ContributionSchedule

MONTHS_PER_YEAR = 12


def planned_contribution(year: int, schedules: Sequence[ContributionSchedule]) -> float:
    """Sum of every schedule active in ``year``; overlapping schedules add up."""
    total = 0.0
    for schedule in schedules:
        if schedule.startYear <= year <= schedule.endYear:
            total += schedule.monthlyAmount * MONTHS_PER_YEAR
    return total


def remaining_cap_room(cap: ContributionCap, cumulative: float) -> float:
    """How much more may flow in before the cap is hit (never negative)."""
    if not cap.enabled:
        return math.inf
    return max(0.0, cap.limit - cumulative)


def contribution_for_year(
    year: int,
    schedules: Sequence[ContributionSchedule],
    cap: ContributionCap,
    cumulative: float,
) -> float:
    """
    Actual contribution for ``year`` after applying the cap.

    Stateless: the caller threads ``cumulative`` from year to year and adds the
    returned amount to it.
    """
    planned = planned_contribution(year, schedules)
    if not cap.enabled:
        return planned
    remaining = cap.limit - cumulative
    if remaining <= 0:
        return 0.0
    return min(planned, remaining)


def has_active_schedule(year: int, schedules: Sequence[ContributionSchedule]) -> bool:
    return any(schedule.startYear <= year <= schedule.endYear for schedule in schedules)
