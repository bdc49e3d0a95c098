# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Default metric collector used by the arbitrator.

Latency and cost are always estimated locally and never fail.  Carbon is
delegated to :class:`ElectricityMapsCollector`, which talks to the live
API when a key is available.
"""

from __future__ import annotations

import logging

import httpx

from region_arbitrator.collectors.electricity_maps import ElectricityMapsCollector
from region_arbitrator.collectors.estimates import estimate_cost, estimate_latency
from region_arbitrator.collectors.zones import REGION_ZONE_MAP
from region_arbitrator.config import CarbonApiConfig
from region_arbitrator.data.models import (
    CarbonMetrics,
    CloudRegion,
    CostMetrics,
    LatencyMetrics,
)

logger = logging.getLogger(__name__)


class RegionDataCollector:
    """Collect latency, carbon, and cost metrics for a region.

    Usage::

        collector = RegionDataCollector.from_config(CarbonApiConfig())
        carbon = await collector.get_carbon(region)
    """

    def __init__(self, carbon: ElectricityMapsCollector | None = None) -> None:
        self.carbon = carbon or ElectricityMapsCollector()

    @classmethod
    def from_config(
        cls,
        config: CarbonApiConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> RegionDataCollector:
        """Build a collector, resolving the API key from *config* if possible."""
        api_key: str | None = None
        if config.credentials is not None:
            try:
                api_key = config.credentials.resolve()
            except ValueError:
                logger.debug("No Electricity Maps credentials resolved, carbon data will be mocked")

        zone_map = {**REGION_ZONE_MAP, **config.zone_overrides}
        return cls(
            ElectricityMapsCollector(
                api_key,
                base_url=config.base_url,
                timeout_seconds=config.timeout_seconds,
                zone_map=zone_map,
                transport=transport,
            )
        )

    async def get_latency(self, region: CloudRegion) -> LatencyMetrics:
        return estimate_latency(region)

    async def get_carbon(self, region: CloudRegion) -> CarbonMetrics:
        return await self.carbon.get_carbon(region)

    async def get_cost(self, region: CloudRegion) -> CostMetrics:
        return estimate_cost(region)
