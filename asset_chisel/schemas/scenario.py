"""Data contracts for saved scenarios."""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class Scenario(BaseModel):
    """A named, saved parameter set.

    ``data`` is stored as-is; only projection reads it, as
    ``{simulationYears, assets}``.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    data: Dict[str, Any]
    createdAt: str
    updatedAt: str


class ScenarioCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    data: Optional[Dict[str, Any]] = None


class ScenarioUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(default=None, min_length=1)
    data: Optional[Dict[str, Any]] = None


class CurrentScenario(BaseModel):
    id: Optional[str] = None
