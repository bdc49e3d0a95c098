# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Data models and the built-in region catalogue."""

from region_arbitrator.data.models import (
    ArbitratorVerdict,
    CarbonMetrics,
    CarbonScore,
    CloudRegion,
    CompositeScore,
    CostMetrics,
    CostScore,
    FactorWeights,
    GeographicLocation,
    GreenSuggestion,
    LatencyMetrics,
    LatencyScore,
    Verdict,
)
from region_arbitrator.data.regions import REGIONS, get_region

__all__ = [
    "ArbitratorVerdict",
    "CarbonMetrics",
    "CarbonScore",
    "CloudRegion",
    "CompositeScore",
    "CostMetrics",
    "CostScore",
    "FactorWeights",
    "GeographicLocation",
    "GreenSuggestion",
    "LatencyMetrics",
    "LatencyScore",
    "REGIONS",
    "Verdict",
    "get_region",
]
