"""One-off cash events."""

from __future__ import annotations

from typing import Sequence

from asset_chisel.schemas.asset import CashEvent


def event_amount_for_year(year: int, events: Sequence[CashEvent]) -> float:
    """Signed sum of the events falling in ``year``. Cap clamping is the caller's job."""
    return sum((event.amount for event in events if event.year == year), 0.0)
