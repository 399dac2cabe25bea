"""Data contracts for asset definitions."""

from __future__ import annotations

from typing import Any, List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# Presentation-only keys (``expanded``, row ``id``/``name``) ride along in
# persisted scenarios, so unknown keys are ignored rather than rejected.
# Amounts must be finite; NaN/Infinity have no JSON representation.
_MODEL_CONFIG = ConfigDict(extra="ignore", frozen=True, allow_inf_nan=False)


class ReturnRateInterval(BaseModel):
    """Annual return applied to every year in [startYear, endYear]."""

    model_config = _MODEL_CONFIG

    startYear: int
    endYear: int
    ratePercent: float = Field(
        0.0,
        validation_alias=AliasChoices("ratePercent", "rate"),
        description="Annual return in percent (5 means 5%).",
    )


class ContributionSchedule(BaseModel):
    """Recurring monthly contribution for every year in [startYear, endYear]."""

    model_config = _MODEL_CONFIG

    startYear: int
    endYear: int
    monthlyAmount: float = 0.0


class CashEvent(BaseModel):
    """One-off cash flow; positive is a lump contribution, negative a withdrawal."""

    model_config = _MODEL_CONFIG

    year: int
    amount: float


class ContributionCap(BaseModel):
    """Lifetime ceiling on cumulative positive inflows."""

    model_config = _MODEL_CONFIG

    enabled: bool = False
    limit: float = Field(0.0, validation_alias=AliasChoices("limit", "amount"))


class Asset(BaseModel):
    model_config = _MODEL_CONFIG

    id: Any = None
    name: str = ""
    initialAmount: float = 0.0
    returnRates: List[ReturnRateInterval] = Field(default_factory=list)
    contributions: List[ContributionSchedule] = Field(
        default_factory=list,
        validation_alias=AliasChoices("contributions", "investments"),
    )
    events: List[CashEvent] = Field(default_factory=list)
    cap: ContributionCap = Field(
        default_factory=ContributionCap,
        validation_alias=AliasChoices("cap", "investmentLimit"),
    )

    @field_validator("returnRates", "contributions", "events", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("cap", mode="before")
    @classmethod
    def _none_as_disabled(cls, value: Any) -> Any:
        return ContributionCap() if value is None else value

    @field_validator("initialAmount", mode="before")
    @classmethod
    def _none_as_zero(cls, value: Any) -> Any:
        return 0.0 if value is None else value
