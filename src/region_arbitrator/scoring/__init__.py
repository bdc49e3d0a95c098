# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Scoring engine for the region arbitrator."""

from region_arbitrator.scoring.engine import ScoringEngine
from region_arbitrator.scoring.weights import WeightValidationError, validate_weights

__all__ = ["ScoringEngine", "WeightValidationError", "validate_weights"]
