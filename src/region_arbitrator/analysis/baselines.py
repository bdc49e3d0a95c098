# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Static reference tables the analyzers index measurements against.

Both tables are plain values handed to the analyzer constructors, so two
arbitrators can run side by side with different baselines.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class LatencyBaseline(BaseModel):
    """Typical latency for a region as seen from the global reference point."""

    model_config = {"frozen": True}

    baseline_latency: float = Field(..., gt=0, description="Typical latency in ms")
    p95_latency: float = Field(..., gt=0, description="Typical P95 latency in ms")
    description: str = Field(..., description="Geographic description")


class CostBaselines(BaseModel):
    """Market-average unit prices (mid-tier, USD)."""

    model_config = {"frozen": True}

    compute: float = Field(default=0.10, gt=0, description="USD per instance hour")
    storage: float = Field(default=0.023, gt=0, description="USD per GB-month")
    network: float = Field(default=0.09, gt=0, description="USD per GB egress")


def _b(latency: float, p95: float, description: str) -> LatencyBaseline:
    return LatencyBaseline(baseline_latency=latency, p95_latency=p95, description=description)


# ---------------------------------------------------------------------------
# Latency baselines (ms), keyed by provider region code
# ---------------------------------------------------------------------------
STATIC_LATENCY_MAP: dict[str, LatencyBaseline] = {
    # US East Coast
    "us-east-1": _b(25, 35, "US East (Virginia)"),
    "us-east-2": _b(30, 42, "US East (Ohio)"),
    # US West Coast
    "us-west-1": _b(45, 65, "US West (N. California)"),
    "us-west-2": _b(40, 58, "US West (Oregon)"),
    # Europe
    "eu-west-1": _b(85, 120, "Europe (Ireland)"),
    "eu-central-1": _b(90, 125, "Europe (Frankfurt)"),
    "eu-west-2": _b(88, 122, "Europe (London)"),
    "eu-north-1": _b(105, 145, "Europe (Stockholm)"),
    # Asia Pacific
    "ap-southeast-1": _b(180, 250, "Asia Pacific (Singapore)"),
    "ap-northeast-1": _b(160, 220, "Asia Pacific (Tokyo)"),
    "ap-south-1": _b(200, 280, "Asia Pacific (Mumbai)"),
    # Other AWS
    "ca-central-1": _b(35, 50, "Canada (Central)"),
    "sa-east-1": _b(150, 210, "South America (Sao Paulo)"),
    "af-south-1": _b(220, 310, "Africa (Cape Town)"),
    "me-south-1": _b(140, 195, "Middle East (Bahrain)"),
    # Azure
    "eastus": _b(25, 35, "Azure East US"),
    "westus2": _b(40, 58, "Azure West US 2"),
    "westeurope": _b(85, 120, "Azure West Europe"),
    # GCP
    "us-central1": _b(32, 45, "GCP US Central"),
    "europe-west1": _b(85, 120, "GCP Europe West"),
    "asia-southeast1": _b(180, 250, "GCP Asia Southeast"),
}

# Conservative estimate for regions missing from the table
UNKNOWN_REGION_BASELINE = _b(100, 140, "Unknown region (estimated)")

DEFAULT_COST_BASELINES = CostBaselines()
