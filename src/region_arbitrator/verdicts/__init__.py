# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Referee verdicts and green suggestions."""

from region_arbitrator.verdicts.engine import VerdictGenerator, neutral_scores
from region_arbitrator.verdicts.suggestions import find_green_alternative, suggest_green_alternative

__all__ = [
    "VerdictGenerator",
    "find_green_alternative",
    "neutral_scores",
    "suggest_green_alternative",
]
