# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Arbitrator configuration model and YAML loader."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from region_arbitrator.analysis.baselines import CostBaselines, LatencyBaseline
from region_arbitrator.data.models import FactorWeights

DEFAULT_API_KEY_ENV = "ELECTRICITY_MAPS_API_KEY"


# ---------------------------------------------------------------------------
# Credential handling
# ---------------------------------------------------------------------------

class CredentialRef(BaseModel):
    """Reference to credentials: supports env vars, file paths, or inline."""

    env_var: str | None = Field(default=None, description="Environment variable name")
    file_path: str | None = Field(default=None, description="Path to credentials file")
    value: str | None = Field(default=None, description="Inline value (dev only)")

    def resolve(self) -> str:
        """Resolve the credential to a plain string."""
        if self.env_var:
            val = os.environ.get(self.env_var)
            if val:
                return val
        if self.file_path:
            path = Path(self.file_path).expanduser()
            if path.exists():
                return path.read_text().strip()
        if self.value:
            return self.value
        raise ValueError(
            "Could not resolve credential: none of env_var, file_path, or value produced a result"
        )


# ---------------------------------------------------------------------------
# Carbon data source
# ---------------------------------------------------------------------------

class CarbonApiConfig(BaseModel):
    """Connection settings for the Electricity Maps API."""

    base_url: str = Field(default="https://api.electricitymap.org/v3")
    credentials: CredentialRef | None = Field(
        default_factory=lambda: CredentialRef(env_var=DEFAULT_API_KEY_ENV)
    )
    timeout_seconds: float = Field(default=10.0, gt=0)
    zone_overrides: dict[str, str] = Field(
        default_factory=dict,
        description="Extra region code -> zone identifier entries",
    )


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------

class ArbitratorConfig(BaseModel):
    """Top-level configuration, usually loaded from YAML."""

    weights: FactorWeights = Field(default_factory=FactorWeights)
    carbon_api: CarbonApiConfig = Field(default_factory=CarbonApiConfig)
    latency_baselines: dict[str, LatencyBaseline] = Field(
        default_factory=dict,
        description="Entries added to (or replacing) the built-in latency table",
    )
    cost_baselines: CostBaselines = Field(default_factory=CostBaselines)


def load_config(path: str | Path) -> ArbitratorConfig:
    """Load an ArbitratorConfig from a YAML file."""
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    return ArbitratorConfig.model_validate(raw)
