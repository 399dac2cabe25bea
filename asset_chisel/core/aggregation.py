"""Multi-asset aggregation of per-asset projections."""

from __future__ import annotations

from typing import Dict, List, Sequence

from asset_chisel.core.intervals import OverlapPolicy, latest_start
from asset_chisel.core.projection import project_asset
from asset_chisel.schemas.asset import Asset
from asset_chisel.schemas.projection import (
    AssetProjection,
    AssetSummary,
    CombinedSnapshot,
    PortfolioProjection,
    PortfolioSummary,
    YearSnapshot,
)


def breakdown_key(asset: Asset) -> str:
    return f"{asset.name}_total"


def summarize_asset(asset: Asset, data: Sequence[YearSnapshot]) -> AssetSummary:
    """Final-year figures plus how much cap room is left."""
    final = data[-1]
    cap_remaining = None
    cap_reached = False
    if asset.cap.enabled:
        cap_remaining = max(0.0, asset.cap.limit - final.cumulativeContribution)
        cap_reached = final.cumulativeContribution >= asset.cap.limit
    return AssetSummary(
        name=asset.name,
        finalTotal=final.total,
        finalPrincipal=final.principal,
        finalProfit=final.profit,
        cumulativeContribution=final.cumulativeContribution,
        capRemaining=cap_remaining,
        capReached=cap_reached,
    )


def combine_year(year: int, projections: Sequence[AssetProjection]) -> CombinedSnapshot:
    total = principal = profit = cumulative = 0.0
    breakdown: Dict[str, float] = {}
    for projection in projections:
        snapshot = projection.data[year]
        total += snapshot.total
        principal += snapshot.principal
        profit += snapshot.profit
        cumulative += snapshot.cumulativeContribution
        breakdown[breakdown_key(projection.asset)] = snapshot.total
    return CombinedSnapshot(
        year=year,
        total=total,
        principal=principal,
        profit=profit,
        cumulativeContribution=cumulative,
        **breakdown,
    )


def aggregate_portfolio(
    assets: Sequence[Asset],
    horizon_years: int,
    policy: OverlapPolicy = latest_start,
) -> PortfolioProjection:
    """
    Project every asset and sum the results year by year.

    Assets are independent of each other; each one's series comes straight
    from ``project_asset``. With no assets the combined series is all zeros.
    """
    span = max(horizon_years, 0)
    per_asset: List[AssetProjection] = []
    for asset in assets:
        data = project_asset(asset, span, policy)
        per_asset.append(
            AssetProjection(asset=asset, data=data, summary=summarize_asset(asset, data))
        )

    combined = [combine_year(year, per_asset) for year in range(span + 1)]
    final = combined[-1]
    return PortfolioProjection(
        perAsset=per_asset,
        combined=combined,
        summary=PortfolioSummary(
            finalTotal=final.total,
            finalPrincipal=final.principal,
            finalProfit=final.profit,
            assets=[projection.summary for projection in per_asset],
        ),
    )
