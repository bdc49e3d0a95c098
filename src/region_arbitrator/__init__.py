# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Region Arbitrator - Cloud Region Referee for latency, carbon and cost."""

__version__ = "0.1.0"

from region_arbitrator.data.models import (
    ArbitratorVerdict,
    CloudRegion,
    CompositeScore,
    FactorWeights,
    GreenSuggestion,
    RefereeConfidence,
    Verdict,
)
from region_arbitrator.data.regions import REGIONS, get_region
from region_arbitrator.collectors.base import CollectionFailure, MetricCollector
from region_arbitrator.collectors.collector import RegionDataCollector
from region_arbitrator.config import ArbitratorConfig, load_config
from region_arbitrator.scoring.engine import ScoringEngine
from region_arbitrator.scoring.weights import WeightValidationError
from region_arbitrator.verdicts.engine import VerdictGenerator
from region_arbitrator.arbitrator import RegionArbitrator

__all__ = [
    "ArbitratorConfig",
    "ArbitratorVerdict",
    "CloudRegion",
    "CollectionFailure",
    "CompositeScore",
    "FactorWeights",
    "GreenSuggestion",
    "MetricCollector",
    "REGIONS",
    "RefereeConfidence",
    "RegionArbitrator",
    "RegionDataCollector",
    "ScoringEngine",
    "Verdict",
    "VerdictGenerator",
    "WeightValidationError",
    "get_region",
    "load_config",
]
