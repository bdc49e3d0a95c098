# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Electricity Maps carbon collector.

Queries the forecast endpoint for the zone serving a region and the
power-breakdown endpoint for its renewable share, using ``httpx``.
Without an API key, or when the API cannot be reached, deterministic
per-zone mock values are returned instead.

A specific set of upstream conditions is escalated as
:class:`CollectionFailure` rather than degraded, because scoring a
region on invented data in those cases would be misleading:

* 404 (unknown zone), 429 (rate limited), any 5xx
* a request that does not finish within the configured timeout
* a forecast payload with no data points
"""

from __future__ import annotations

import asyncio
import logging
import math
from datetime import datetime
from typing import Any, Mapping

import httpx

from region_arbitrator.collectors.base import CollectionFailure
from region_arbitrator.collectors.estimates import mock_carbon
from region_arbitrator.collectors.zones import resolve_zone
from region_arbitrator.data.models import CarbonMetrics, CloudRegion, Factor

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.electricitymap.org/v3"
DATA_SOURCE = "electricitymaps.com (forecast)"

RENEWABLE_SOURCES = frozenset({"solar", "wind", "hydro", "geothermal", "biomass"})

# Readings outside this range are treated as a malformed payload.
MAX_PLAUSIBLE_INTENSITY = 1000.0


class _DegradedResponse(Exception):
    """Upstream answered, but not usefully; fall back to mock data."""


def renewable_percentage(breakdown: Mapping[str, Any] | None) -> float:
    """Share of renewable sources in a power consumption breakdown (0-100)."""
    if not breakdown:
        return 0.0
    total = 0.0
    renewable = 0.0
    for source, value in breakdown.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        if not math.isfinite(value) or value <= 0:
            continue
        total += value
        if source.lower() in RENEWABLE_SOURCES:
            renewable += value
    if total <= 0:
        return 0.0
    return min(100.0, renewable / total * 100.0)


class ElectricityMapsCollector:
    """Collect carbon intensity and renewable share for cloud regions."""

    def __init__(
        self,
        api_key: str | None = None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 10.0,
        zone_map: Mapping[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.zone_map = zone_map
        self._transport = transport

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def get_carbon(self, region: CloudRegion) -> CarbonMetrics:
        """Return carbon metrics for *region*, or raise CollectionFailure."""
        zone = resolve_zone(region, self.zone_map)

        if not self.api_key:
            logger.debug("No Electricity Maps API key, using mock data for %s", zone)
            return mock_carbon(zone)

        try:
            async with self._client() as client:
                return await asyncio.wait_for(
                    self._collect_live(client, region, zone), self.timeout_seconds
                )
        except CollectionFailure:
            raise
        except (httpx.TimeoutException, asyncio.TimeoutError) as exc:
            raise CollectionFailure(
                f"Network timeout while fetching carbon data for region '{region.region_code}'",
                region,
                Factor.carbon,
                exc,
            ) from exc
        except httpx.TransportError as exc:
            logger.warning(
                "Could not reach Electricity Maps for zone %s (%s), using mock data", zone, exc
            )
            return mock_carbon(zone)
        except _DegradedResponse as exc:
            logger.warning("%s, using mock data", exc)
            return mock_carbon(zone)

    # ------------------------------------------------------------------
    # Live collection (requires an API key)
    # ------------------------------------------------------------------

    def _client(self) -> httpx.AsyncClient:
        """Create an httpx client with authentication and timeout settings."""
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout_seconds,
            headers={"auth-token": self.api_key or "", "Accept": "application/json"},
            transport=self._transport,
        )

    async def _collect_live(
        self, client: httpx.AsyncClient, region: CloudRegion, zone: str
    ) -> CarbonMetrics:
        resp = await client.get("/carbon-intensity/forecast", params={"zone": zone})
        self._raise_for_escalated_status(resp, region, zone)
        if not resp.is_success:
            raise _DegradedResponse(f"Electricity Maps API error {resp.status_code} for zone {zone}")

        try:
            payload = resp.json()
        except ValueError as exc:
            raise _DegradedResponse(f"Malformed forecast payload for zone {zone}") from exc

        forecast = payload.get("forecast") if isinstance(payload, dict) else None
        if not forecast:
            raise CollectionFailure(
                f"No forecast data available for zone '{zone}'", region, Factor.carbon
            )
        if not isinstance(forecast, list):
            raise _DegradedResponse(f"Malformed forecast series for zone {zone}")

        latest = forecast[0]
        intensity = latest.get("carbonIntensity") if isinstance(latest, dict) else None
        if isinstance(intensity, bool) or not isinstance(intensity, (int, float)):
            raise _DegradedResponse(f"Forecast for zone {zone} has no usable carbonIntensity")
        if not math.isfinite(intensity) or not 0 <= intensity <= MAX_PLAUSIBLE_INTENSITY:
            raise _DegradedResponse(
                f"Forecast for zone {zone} has implausible carbonIntensity {intensity}"
            )
        try:
            last_updated = datetime.fromisoformat(str(latest.get("datetime")).replace("Z", "+00:00"))
        except ValueError as exc:
            raise _DegradedResponse(f"Forecast for zone {zone} has no usable datetime") from exc

        renewable = await self._fetch_renewable_percentage(client, zone)

        return CarbonMetrics(
            carbon_intensity=float(intensity),
            renewable_percentage=renewable,
            data_source=DATA_SOURCE,
            last_updated=last_updated,
        )

    async def _fetch_renewable_percentage(self, client: httpx.AsyncClient, zone: str) -> float:
        """Renewable share from the latest power breakdown; 0 when unavailable."""
        resp = await client.get("/power-breakdown/latest", params={"zone": zone})
        if not resp.is_success:
            logger.debug("Power breakdown unavailable for %s: HTTP %s", zone, resp.status_code)
            return 0.0
        try:
            payload = resp.json()
        except ValueError:
            logger.debug("Malformed power breakdown payload for %s", zone)
            return 0.0
        if not isinstance(payload, dict):
            return 0.0
        breakdown = payload.get("powerConsumptionBreakdown")
        return renewable_percentage(breakdown if isinstance(breakdown, dict) else None)

    @staticmethod
    def _raise_for_escalated_status(resp: httpx.Response, region: CloudRegion, zone: str) -> None:
        status = resp.status_code
        if status == 404:
            message = f"Zone key '{zone}' not found in Electricity Maps API"
        elif status == 429:
            message = f"API rate limit exceeded for zone '{zone}'"
        elif status >= 500:
            message = f"Electricity Maps API server error ({status}) for zone '{zone}'"
        else:
            return
        raise CollectionFailure(message, region, Factor.carbon)
