# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Shared test fixtures for the region arbitrator test suite."""

from __future__ import annotations

from datetime import timedelta
from typing import Callable

import httpx
import pytest

from region_arbitrator.collectors.collector import RegionDataCollector
from region_arbitrator.collectors.electricity_maps import ElectricityMapsCollector
from region_arbitrator.config import DEFAULT_API_KEY_ENV
from region_arbitrator.data.models import (
    CarbonCategory,
    CarbonMetrics,
    CarbonScore,
    CloudProvider,
    CloudRegion,
    CostCategory,
    CostScore,
    FactorScoreSet,
    GeographicLocation,
    LatencyCategory,
    LatencyScore,
    utc_now,
)

ScoreFactory = Callable[..., FactorScoreSet]


@pytest.fixture(autouse=True)
def _no_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep every test on deterministic mock carbon data unless it opts in."""
    monkeypatch.delenv(DEFAULT_API_KEY_ENV, raising=False)


@pytest.fixture()
def make_scores() -> ScoreFactory:
    """Build a FactorScoreSet from three raw scores."""

    def _make(
        latency: float,
        carbon: float,
        cost: float,
        confidence: float = 0.9,
        renewable: float = 50.0,
    ) -> FactorScoreSet:
        return FactorScoreSet(
            latency=LatencyScore(
                score=latency,
                confidence=confidence,
                reasoning="latency",
                category=LatencyCategory.good,
            ),
            carbon=CarbonScore(
                score=carbon,
                confidence=confidence,
                reasoning="carbon",
                category=CarbonCategory.moderate,
                renewable_percentage=renewable,
            ),
            cost=CostScore(
                score=cost,
                confidence=confidence,
                reasoning="cost",
                category=CostCategory.moderate,
                relative_cost_index=1.0,
            ),
        )

    return _make


@pytest.fixture()
def make_region() -> Callable[..., CloudRegion]:
    """Build an ad-hoc region outside the catalogue."""

    def _make(code: str, country: str = "US", lat: float = 40.0, lon: float = -75.0) -> CloudRegion:
        return CloudRegion(
            provider=CloudProvider.other,
            region_code=code,
            display_name=f"Region {code}",
            location=GeographicLocation(country=country, latitude=lat, longitude=lon),
        )

    return _make


@pytest.fixture()
def fresh_carbon() -> CarbonMetrics:
    """Live-looking carbon data from a trusted source, updated just now."""
    return CarbonMetrics(
        carbon_intensity=150,
        renewable_percentage=60,
        data_source="electricitymaps.com (forecast)",
        last_updated=utc_now(),
    )


@pytest.fixture()
def stale_carbon(fresh_carbon: CarbonMetrics) -> CarbonMetrics:
    """The same reading, three hours old."""
    return fresh_carbon.model_copy(update={"last_updated": utc_now() - timedelta(hours=3)})


def forecast_payload(intensity: float = 120, when: str = "2025-01-01T12:00:00Z") -> dict:
    return {"zone": "X", "forecast": [{"carbonIntensity": intensity, "datetime": when}]}


@pytest.fixture()
def api_collector() -> Callable[[Callable[[httpx.Request], httpx.Response]], RegionDataCollector]:
    """Collector with an API key whose HTTP traffic goes to *handler*."""

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> RegionDataCollector:
        carbon = ElectricityMapsCollector("test-key", transport=httpx.MockTransport(handler))
        return RegionDataCollector(carbon)

    return _make


@pytest.fixture()
def live_handler() -> Callable[[httpx.Request], httpx.Response]:
    """Answers both endpoints successfully for every zone."""

    def _handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/carbon-intensity/forecast"):
            return httpx.Response(200, json=forecast_payload())
        if request.url.path.endswith("/power-breakdown/latest"):
            return httpx.Response(
                200, json={"powerConsumptionBreakdown": {"hydro": 60, "wind": 10, "gas": 30}}
            )
        return httpx.Response(404)

    return _handler
