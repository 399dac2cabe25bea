"""Data contracts for projection inputs and results."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from asset_chisel.schemas.asset import Asset

MAX_SIMULATION_YEARS = 100


class YearSnapshot(BaseModel):
    """State of one asset at the end of a simulated year."""

    model_config = ConfigDict(frozen=True)

    year: int
    total: float
    principal: float
    profit: float
    cumulativeContribution: float
    # a schedule was active but the cap clamped it or was already used up
    contributionStopped: bool = False


class CombinedSnapshot(BaseModel):
    """Portfolio totals for one year.

    Per-asset breakdown values are kept as extra fields named
    ``"{asset name}_total"`` so that ``model_dump()`` gives the flat row the
    charts consume. Two assets sharing a name share a key; the later one wins.
    """

    model_config = ConfigDict(extra="allow")

    year: int
    total: float = 0.0
    principal: float = 0.0
    profit: float = 0.0
    cumulativeContribution: float = 0.0

    @property
    def breakdown(self) -> Dict[str, float]:
        return dict(self.model_extra or {})


class AssetSummary(BaseModel):
    name: str
    finalTotal: float
    finalPrincipal: float
    finalProfit: float
    cumulativeContribution: float
    capRemaining: Optional[float] = None
    capReached: bool = False


class AssetProjection(BaseModel):
    asset: Asset
    data: List[YearSnapshot]
    summary: AssetSummary


class PortfolioSummary(BaseModel):
    finalTotal: float
    finalPrincipal: float
    finalProfit: float
    assets: List[AssetSummary] = Field(default_factory=list)


class PortfolioProjection(BaseModel):
    perAsset: List[AssetProjection]
    combined: List[CombinedSnapshot]
    summary: PortfolioSummary


class ProjectionRequest(BaseModel):
    """Inputs required to project a portfolio."""

    simulationYears: int = Field(
        30,
        ge=0,
        le=MAX_SIMULATION_YEARS,
        description="Number of years to project (the horizon).",
    )
    assets: List[Asset] = Field(default_factory=list)

    @field_validator("assets", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value
