# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Region arbitrator: the orchestrator behind every evaluation.

Collects metrics for one or many regions, runs the three analyzers, the
scoring engine and the verdict generator, and returns immutable
:class:`~region_arbitrator.data.models.ArbitratorVerdict` objects.

A :class:`CollectionFailure` is contained to the region that raised it
and becomes a Blue Card.  Any other exception aborts a batch; it is
re-raised once the sibling calls have finished.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from functools import cmp_to_key
from typing import Any, Sequence

from region_arbitrator.analysis.baselines import STATIC_LATENCY_MAP
from region_arbitrator.analysis.carbon import CarbonAnalyzer
from region_arbitrator.analysis.cost import CostAnalyzer
from region_arbitrator.analysis.latency import LatencyAnalyzer
from region_arbitrator.collectors.base import CollectionFailure, MetricCollector
from region_arbitrator.collectors.collector import RegionDataCollector
from region_arbitrator.config import ArbitratorConfig
from region_arbitrator.data.models import (
    ArbitratorVerdict,
    CloudRegion,
    FactorScoreSet,
    FactorWeights,
)
from region_arbitrator.reporting.match_report import format_match_report
from region_arbitrator.scoring.engine import ScoringEngine
from region_arbitrator.verdicts.engine import VerdictGenerator

logger = logging.getLogger(__name__)

# Scores closer than this are considered tied when ranking a batch.
SORT_TIE_TOLERANCE = 1.0


@dataclass(frozen=True)
class _Assessment:
    region: CloudRegion
    scores: FactorScoreSet | None = None
    failure: CollectionFailure | None = None


def _compare_verdicts(a: ArbitratorVerdict, b: ArbitratorVerdict) -> float:
    carbon_diff = b.scores.carbon.score - a.scores.carbon.score
    if abs(carbon_diff) > SORT_TIE_TOLERANCE:
        return carbon_diff
    composite_diff = b.scores.composite.overall_score - a.scores.composite.overall_score
    if abs(composite_diff) > SORT_TIE_TOLERANCE:
        return composite_diff
    return b.scores.latency.score - a.scores.latency.score


def _raise_first_error(
    results: Sequence[Any], expected: type[BaseException] | None = None
) -> list[Any]:
    """Re-raise the first error in gathered *results*.

    Errors other than *expected* take precedence, so an unexpected failure
    is never hidden behind a CollectionFailure from a sibling call.
    """
    errors = [r for r in results if isinstance(r, BaseException)]
    for error in errors:
        if expected is None or not isinstance(error, expected):
            raise error
    if errors:
        raise errors[0]
    return list(results)


def rank_verdicts(verdicts: Sequence[ArbitratorVerdict]) -> list[ArbitratorVerdict]:
    """Greenest first: carbon, then composite, then latency score."""
    return sorted(verdicts, key=cmp_to_key(_compare_verdicts))


class RegionArbitrator:
    """Evaluate cloud regions on latency, carbon and cost.

    Usage::

        arbitrator = RegionArbitrator()
        verdict = asyncio.run(arbitrator.evaluate_one(get_region("eu-north-1")))
    """

    def __init__(
        self,
        collector: MetricCollector | None = None,
        config: ArbitratorConfig | None = None,
        *,
        latency_analyzer: LatencyAnalyzer | None = None,
        carbon_analyzer: CarbonAnalyzer | None = None,
        cost_analyzer: CostAnalyzer | None = None,
        verdict_generator: VerdictGenerator | None = None,
    ) -> None:
        self.config = config or ArbitratorConfig()
        self.collector: MetricCollector = collector or RegionDataCollector.from_config(
            self.config.carbon_api
        )
        self.latency_analyzer = latency_analyzer or LatencyAnalyzer(
            {**STATIC_LATENCY_MAP, **self.config.latency_baselines}
        )
        self.carbon_analyzer = carbon_analyzer or CarbonAnalyzer()
        self.cost_analyzer = cost_analyzer or CostAnalyzer(self.config.cost_baselines)
        self.verdict_generator = verdict_generator or VerdictGenerator()
        self._engine = ScoringEngine(self.config.weights)

    # ------------------------------------------------------------------
    # Weights and configuration
    # ------------------------------------------------------------------

    def configure_weights(self, weights: FactorWeights) -> None:
        """Validate and activate *weights*; raises WeightValidationError."""
        self._engine = ScoringEngine(weights)
        logger.info(
            "Weights updated: carbon=%.2f latency=%.2f cost=%.2f",
            weights.carbon,
            weights.latency,
            weights.cost,
        )

    def get_weights(self) -> FactorWeights:
        return self._engine.weights

    def get_configuration(self) -> dict[str, Any]:
        """Active weights plus the class name of every component."""
        weights = self.get_weights()
        return {
            "weights": {
                "carbon": weights.carbon,
                "latency": weights.latency,
                "cost": weights.cost,
            },
            "components": {
                "collector": type(self.collector).__name__,
                "latency_analyzer": type(self.latency_analyzer).__name__,
                "carbon_analyzer": type(self.carbon_analyzer).__name__,
                "cost_analyzer": type(self.cost_analyzer).__name__,
                "scoring_engine": type(self._engine).__name__,
                "verdict_generator": type(self.verdict_generator).__name__,
            },
        }

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    async def evaluate_one(self, region: CloudRegion) -> ArbitratorVerdict:
        """Evaluate a single region."""
        engine = self._engine
        assessment = await self._assess(region)
        return self._judge(engine, assessment, [assessment])

    async def evaluate_many(self, regions: Sequence[CloudRegion]) -> list[ArbitratorVerdict]:
        """Evaluate *regions* concurrently and return them greenest first.

        Every successfully scored region in the batch is a candidate green
        alternative for the others.
        """
        if not regions:
            return []

        engine = self._engine
        logger.info("Evaluating %d regions", len(regions))
        assessments = _raise_first_error(
            await asyncio.gather(
                *(self._assess(region) for region in regions), return_exceptions=True
            )
        )
        verdicts = [self._judge(engine, a, assessments) for a in assessments]

        failed = sum(1 for a in assessments if a.failure is not None)
        logger.info(
            "Evaluated %d regions (%d without data)", len(assessments), failed
        )
        return rank_verdicts(verdicts)

    def format_report(
        self,
        verdicts: Sequence[ArbitratorVerdict],
        title: str = "Cloud Region Evaluation",
        generated_at: datetime | None = None,
    ) -> str:
        """Plain-text match report for *verdicts* under the active weights."""
        return format_match_report(verdicts, self.get_weights(), title, generated_at)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _assess(self, region: CloudRegion) -> _Assessment:
        """Collect and analyze one region; a CollectionFailure is captured."""
        results = await asyncio.gather(
            self.collector.get_latency(region),
            self.collector.get_carbon(region),
            self.collector.get_cost(region),
            return_exceptions=True,
        )
        try:
            latency, carbon, cost = _raise_first_error(results, expected=CollectionFailure)
        except CollectionFailure as failure:
            logger.warning(
                "Data collection failed for %s (%s): %s",
                region.region_code,
                failure.factor.value,
                failure,
            )
            return _Assessment(region=region, failure=failure)

        scores = FactorScoreSet(
            latency=self.latency_analyzer.analyze(latency),
            carbon=self.carbon_analyzer.analyze(carbon),
            cost=self.cost_analyzer.analyze(cost),
        )
        return _Assessment(region=region, scores=scores)

    def _judge(
        self,
        engine: ScoringEngine,
        assessment: _Assessment,
        pool: Sequence[_Assessment],
    ) -> ArbitratorVerdict:
        if assessment.failure is not None:
            return self.verdict_generator.generate_blue_card(assessment.region, assessment.failure)

        scores = assessment.scores
        assert scores is not None
        composite = engine.combine(scores.latency, scores.carbon, scores.cost)

        scored = [a for a in pool if a.scores is not None]
        return self.verdict_generator.generate(
            composite,
            assessment.region,
            scores,
            candidates=[a.region for a in scored],
            candidate_scores={a.region.region_code: a.scores for a in scored},
        )
