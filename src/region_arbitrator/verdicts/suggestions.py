# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Green alternative search and suggestion templates.

Given the evaluated region, a pool of candidate regions, and their
precomputed factor scores, the search keeps candidates that are strictly
greener while still offering acceptable latency, then picks the greenest
(near-ties on carbon go to the faster region).  When nothing qualifies it
falls back to an optimization strategy for the current region rather than
declaring that no solution exists.
"""

from __future__ import annotations

from functools import cmp_to_key
from typing import Mapping, Sequence

from region_arbitrator.collectors.base import CollectionFailure
from region_arbitrator.data.models import (
    CloudRegion,
    FactorScoreSet,
    GreenSuggestion,
    SuggestionType,
)
from region_arbitrator.scoring.thresholds import (
    ACCEPTABLE_LATENCY_SCORE,
    ALTERNATIVE_CARBON_TIE,
)


def _compare_candidates(
    a: tuple[CloudRegion, FactorScoreSet], b: tuple[CloudRegion, FactorScoreSet]
) -> float:
    carbon_diff = b[1].carbon.score - a[1].carbon.score
    if abs(carbon_diff) > ALTERNATIVE_CARBON_TIE:
        return carbon_diff
    return b[1].latency.score - a[1].latency.score


def find_green_alternative(
    region: CloudRegion,
    candidates: Sequence[CloudRegion],
    scores: Mapping[str, FactorScoreSet],
) -> tuple[CloudRegion, FactorScoreSet] | None:
    """Best greener candidate with acceptable latency, or ``None``."""
    current = scores.get(region.region_code)
    if current is None:
        return None

    qualifying: list[tuple[CloudRegion, FactorScoreSet]] = []
    for candidate in candidates:
        if candidate.region_code == region.region_code:
            continue
        candidate_scores = scores.get(candidate.region_code)
        if candidate_scores is None:
            continue
        if (
            candidate_scores.carbon.score > current.carbon.score
            and candidate_scores.latency.score >= ACCEPTABLE_LATENCY_SCORE
        ):
            qualifying.append((candidate, candidate_scores))

    if not qualifying:
        return None
    qualifying.sort(key=cmp_to_key(_compare_candidates))
    return qualifying[0]


def alternative_region_suggestion(
    current: FactorScoreSet, alternative: CloudRegion, alternative_scores: FactorScoreSet
) -> GreenSuggestion:
    carbon_gain = round(alternative_scores.carbon.score - current.carbon.score)
    latency_delta = round(alternative_scores.latency.score - current.latency.score)
    if latency_delta >= 0:
        latency_text = f"with {latency_delta} points better latency"
    else:
        latency_text = f"with only {abs(latency_delta)} points latency trade-off"

    return GreenSuggestion(
        type=SuggestionType.alternative_region,
        description=(
            f"The Referee recommends {alternative.display_name} as a Pragmatic Green alternative. "
            f"This region offers {carbon_gain} points better carbon performance {latency_text}. "
            f"Carbon category: {alternative_scores.carbon.category.value}, "
            f"Renewable energy: {round(alternative_scores.carbon.renewable_percentage)}%."
        ),
        alternative_region=alternative,
        expected_impact=(
            f"{carbon_gain} point carbon improvement while maintaining acceptable performance"
        ),
    )


def optimization_strategy(region: CloudRegion) -> GreenSuggestion:
    return GreenSuggestion(
        type=SuggestionType.optimization_strategy,
        description=(
            "The Referee finds no better regional alternatives available. "
            "Focus on optimization strategies: implement efficient caching to reduce compute load, "
            "use auto-scaling to minimize idle resources, consider serverless architectures for "
            "variable workloads, and schedule batch processing during low-carbon grid hours. "
            f"Monitor {region.display_name}'s renewable energy adoption for future improvements."
        ),
        expected_impact=(
            "Reduced carbon footprint through operational efficiency while maintaining "
            "current regional choice"
        ),
    )


def data_unavailable_suggestion(failure: CollectionFailure) -> GreenSuggestion:
    return GreenSuggestion(
        type=SuggestionType.optimization_strategy,
        description=(
            "The Referee recommends selecting an alternative region with available data sources, "
            f"or retrying {failure.region.display_name} once {failure.factor.value} data "
            "connectivity is restored. Consider regions with established monitoring "
            "infrastructure for more reliable assessments."
        ),
        expected_impact="Avoid regions with data collection issues for consistent evaluation",
    )


def suggest_green_alternative(
    region: CloudRegion,
    candidates: Sequence[CloudRegion] | None = None,
    scores: Mapping[str, FactorScoreSet] | None = None,
) -> GreenSuggestion:
    """Greener alternative from *candidates* if one qualifies, else a strategy."""
    if candidates and scores:
        found = find_green_alternative(region, candidates, scores)
        if found is not None:
            alternative, alternative_scores = found
            return alternative_region_suggestion(
                scores[region.region_code], alternative, alternative_scores
            )
    return optimization_strategy(region)
