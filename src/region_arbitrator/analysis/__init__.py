# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Per-factor analyzers: raw metrics in, normalized factor scores out."""

from region_arbitrator.analysis.carbon import CarbonAnalyzer, normalize_carbon_score
from region_arbitrator.analysis.cost import CostAnalyzer, normalize_cost_score
from region_arbitrator.analysis.errors import MetricValidationError
from region_arbitrator.analysis.latency import LatencyAnalyzer, normalize_latency_score

__all__ = [
    "CarbonAnalyzer",
    "CostAnalyzer",
    "LatencyAnalyzer",
    "MetricValidationError",
    "normalize_carbon_score",
    "normalize_cost_score",
    "normalize_latency_score",
]
