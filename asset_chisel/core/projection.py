"""Year-by-year projection of a single asset."""

from __future__ import annotations

import math
from typing import List, NamedTuple, Tuple

from asset_chisel.core.contributions import (
    contribution_for_year,
    has_active_schedule,
    planned_contribution,
    remaining_cap_room,
)
from asset_chisel.core.events import event_amount_for_year
from asset_chisel.core.intervals import OverlapPolicy, latest_start, rate_for_year
from asset_chisel.schemas.asset import Asset
from asset_chisel.schemas.projection import YearSnapshot


class Accumulators(NamedTuple):
    total: float
    principal: float
    cumulative_contribution: float


def round_half_up(value: float) -> float:
    """Round to whole units with halves going up (0.5 -> 1, -0.5 -> 0).

    Non-finite values (an overflowed balance) come back unchanged.
    """
    if not math.isfinite(value):
        return value
    return float(math.floor(value + 0.5))


def initial_snapshot(asset: Asset) -> YearSnapshot:
    return YearSnapshot(
        year=0,
        total=asset.initialAmount,
        principal=asset.initialAmount,
        profit=0.0,
        cumulativeContribution=0.0,
    )


def advance_year(
    state: Accumulators,
    year: int,
    asset: Asset,
    policy: OverlapPolicy = latest_start,
) -> Tuple[Accumulators, YearSnapshot]:
    """
    Move the accumulators from the end of ``year - 1`` to the end of ``year``.

    Order of operations:
      1) Apply the year's growth to the starting total.
      2) Add the scheduled contribution, clamped by the cap.
      3) Apply the year's net event amount. A net inflow is clamped by the
         cap like a contribution; a net withdrawal is applied in full and
         never frees cap room.
      4) Emit the snapshot; only total and profit are rounded, the
         accumulators carry full precision into the next year.
    """
    rate = rate_for_year(year, asset.returnRates, policy)
    total = state.total * (1 + rate / 100)
    principal = state.principal
    cumulative = state.cumulative_contribution

    planned = planned_contribution(year, asset.contributions)
    room_before = remaining_cap_room(asset.cap, cumulative)
    contribution = contribution_for_year(year, asset.contributions, asset.cap, cumulative)
    total += contribution
    principal += contribution
    cumulative += contribution

    event_amount = event_amount_for_year(year, asset.events)
    if event_amount >= 0:
        applied = min(event_amount, remaining_cap_room(asset.cap, cumulative))
        total += applied
        principal += applied
        cumulative += applied
    else:
        total += event_amount
        principal += event_amount

    snapshot = YearSnapshot(
        year=year,
        total=round_half_up(total),
        principal=principal,
        profit=round_half_up(total - principal),
        cumulativeContribution=cumulative,
        contributionStopped=has_active_schedule(year, asset.contributions)
        and (room_before <= 0 or contribution < planned),
    )
    return Accumulators(total, principal, cumulative), snapshot


def project_asset(
    asset: Asset,
    horizon_years: int,
    policy: OverlapPolicy = latest_start,
) -> List[YearSnapshot]:
    """
    Project ``asset`` for years 0..horizon_years (inclusive).

    Pure function of its inputs: the asset is never mutated and every call
    recomputes the whole series. A non-positive horizon yields only year 0.
    """
    state = Accumulators(asset.initialAmount, asset.initialAmount, 0.0)
    snapshots: List[YearSnapshot] = [initial_snapshot(asset)]
    for year in range(1, horizon_years + 1):
        state, snapshot = advance_year(state, year, asset, policy)
        snapshots.append(snapshot)
    return snapshots
