# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Collector protocol and the collection failure it may raise.

A collector is the only part of the arbitrator that talks to the outside
world. Each of its three methods is independently callable and safe to
await concurrently for the same region.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from region_arbitrator.data.models import (
    CarbonMetrics,
    CloudRegion,
    CostMetrics,
    Factor,
    LatencyMetrics,
)


class CollectionFailure(Exception):
    """Upstream data for one factor of one region is unavailable.

    Raising this short-circuits scoring for the region and produces a
    Blue Card instead; it never aborts sibling evaluations.
    """

    def __init__(
        self,
        message: str,
        region: CloudRegion,
        factor: Factor,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.region = region
        self.factor = factor
        self.cause = cause

    def __repr__(self) -> str:
        return (
            f"CollectionFailure({str(self)!r}, region={self.region.region_code!r}, "
            f"factor={self.factor.value!r})"
        )


@runtime_checkable
class MetricCollector(Protocol):
    """Protocol that all metric collectors must satisfy."""

    async def get_latency(self, region: CloudRegion) -> LatencyMetrics:
        """Return latency measurements for *region*."""
        ...

    async def get_carbon(self, region: CloudRegion) -> CarbonMetrics:
        """Return grid carbon data for *region*; may raise CollectionFailure."""
        ...

    async def get_cost(self, region: CloudRegion) -> CostMetrics:
        """Return unit prices for *region*."""
        ...
