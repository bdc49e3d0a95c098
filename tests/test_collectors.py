# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Tests for zone lookup, local estimates, and the Electricity Maps collector."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from region_arbitrator.collectors import (
    CollectionFailure,
    ElectricityMapsCollector,
    MetricCollector,
    RegionDataCollector,
    resolve_zone,
)
from region_arbitrator.collectors.electricity_maps import DATA_SOURCE, renewable_percentage
from region_arbitrator.collectors.estimates import (
    MOCK_CARBON_SOURCE,
    estimate_cost,
    estimate_latency,
    haversine_km,
    mock_carbon,
)
from region_arbitrator.config import CarbonApiConfig, CredentialRef
from region_arbitrator.data.models import Factor
from region_arbitrator.data.regions import get_region


def _collector(handler) -> ElectricityMapsCollector:
    return ElectricityMapsCollector("test-key", transport=httpx.MockTransport(handler))


def _forecast(intensity: float) -> dict:
    return {"forecast": [{"carbonIntensity": intensity, "datetime": "2025-01-01T12:00:00Z"}]}


def _status(code: int):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(code, json={"message": "nope"})

    return handler


class TestZones:
    def test_mapped_region(self):
        assert resolve_zone(get_region("eu-north-1")) == "SE-SE3"
        assert resolve_zone(get_region("us-east-1")) == "US-MIDA-PJM"

    def test_unmapped_region_falls_back_to_country(self, make_region):
        assert resolve_zone(make_region("xx-test-9", country="NO")) == "NO"

    def test_custom_table(self):
        assert resolve_zone(get_region("eu-west-1"), {"eu-west-1": "GB"}) == "GB"


class TestEstimates:
    def test_haversine_zero(self):
        assert haversine_km(10, 10, 10, 10) == 0

    def test_latency_near_reference(self):
        metrics = estimate_latency(get_region("us-east-1"))
        assert metrics.average_latency == 21
        assert metrics.p95_latency == pytest.approx(31.5)
        assert metrics.source_location == "mock-us-east-1"

    def test_latency_grows_with_distance(self):
        near = estimate_latency(get_region("us-east-1"))
        far = estimate_latency(get_region("ap-southeast-1"))
        assert far.average_latency > near.average_latency

    def test_cost_multiplier(self):
        cost = estimate_cost(get_region("eu-west-1"))
        assert cost.compute_cost_per_hour == pytest.approx(0.12)
        assert cost.storage_cost_per_gb == pytest.approx(0.0276)
        assert cost.region == "eu-west-1"

    def test_cost_unknown_region_is_baseline(self, make_region):
        cost = estimate_cost(make_region("xx-test-9"))
        assert cost.compute_cost_per_hour == pytest.approx(0.10)

    def test_mock_carbon_table(self):
        carbon = mock_carbon("SE-SE3")
        assert carbon.carbon_intensity == 100
        assert carbon.renewable_percentage == 85
        assert carbon.data_source == MOCK_CARBON_SOURCE
        assert carbon.last_updated is not None

    def test_mock_carbon_default(self):
        carbon = mock_carbon("ATLANTIS")
        assert (carbon.carbon_intensity, carbon.renewable_percentage) == (400, 25)


class TestRenewablePercentage:
    def test_share_of_renewables(self):
        assert renewable_percentage({"solar": 30, "wind": 20, "coal": 50}) == pytest.approx(50)

    def test_ignores_non_numeric_and_negative(self):
        breakdown = {"hydro": 40, "gas": 40, "nuclear": None, "battery discharge": -10, "flag": True}
        assert renewable_percentage(breakdown) == pytest.approx(50)

    def test_empty(self):
        assert renewable_percentage(None) == 0
        assert renewable_percentage({}) == 0
        assert renewable_percentage({"coal": 0}) == 0

    def test_ignores_non_finite(self):
        breakdown = {"wind": 50, "coal": 50, "solar": float("nan"), "gas": float("inf")}
        assert renewable_percentage(breakdown) == pytest.approx(50)


class TestElectricityMapsCollector:
    def test_no_key_uses_mock(self):
        carbon = asyncio.run(ElectricityMapsCollector().get_carbon(get_region("eu-north-1")))
        assert carbon.data_source == MOCK_CARBON_SOURCE
        assert carbon.carbon_intensity == 100

    def test_live_forecast(self, live_handler):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return live_handler(request)

        carbon = asyncio.run(_collector(handler).get_carbon(get_region("eu-north-1")))

        assert carbon.carbon_intensity == 120
        assert carbon.renewable_percentage == pytest.approx(70)
        assert carbon.data_source == DATA_SOURCE
        assert carbon.last_updated.year == 2025
        assert seen[0].headers["auth-token"] == "test-key"
        assert seen[0].url.params["zone"] == "SE-SE3"
        assert seen[0].url.path == "/v3/carbon-intensity/forecast"

    @pytest.mark.parametrize("code", [404, 429, 500, 503])
    def test_escalated_status_raises(self, code):
        region = get_region("eu-west-1")
        with pytest.raises(CollectionFailure) as info:
            asyncio.run(_collector(_status(code)).get_carbon(region))
        assert info.value.region == region
        assert info.value.factor is Factor.carbon

    def test_not_found_names_zone(self):
        with pytest.raises(CollectionFailure, match="'IE' not found"):
            asyncio.run(_collector(_status(404)).get_carbon(get_region("eu-west-1")))

    def test_unauthorized_falls_back_to_mock(self):
        carbon = asyncio.run(_collector(_status(401)).get_carbon(get_region("eu-west-1")))
        assert carbon.data_source == MOCK_CARBON_SOURCE
        assert carbon.carbon_intensity == 300

    def test_timeout_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(CollectionFailure, match="timeout") as info:
            asyncio.run(_collector(handler).get_carbon(get_region("eu-west-1")))
        assert isinstance(info.value.cause, httpx.TimeoutException)

    def test_slow_response_raises(self):
        async def handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(5)
            return httpx.Response(200, json={})

        collector = ElectricityMapsCollector(
            "test-key", timeout_seconds=0.05, transport=httpx.MockTransport(handler)
        )
        with pytest.raises(CollectionFailure, match="timeout") as info:
            asyncio.run(collector.get_carbon(get_region("eu-west-1")))
        assert isinstance(info.value.cause, asyncio.TimeoutError)

    def test_connection_error_falls_back_to_mock(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        carbon = asyncio.run(_collector(handler).get_carbon(get_region("eu-west-1")))
        assert carbon.data_source == MOCK_CARBON_SOURCE

    def test_empty_forecast_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"zone": "IE", "forecast": []})

        with pytest.raises(CollectionFailure, match="No forecast data"):
            asyncio.run(_collector(handler).get_carbon(get_region("eu-west-1")))

    def test_malformed_payload_falls_back_to_mock(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"<html>maintenance</html>")

        carbon = asyncio.run(_collector(handler).get_carbon(get_region("eu-west-1")))
        assert carbon.data_source == MOCK_CARBON_SOURCE

    @pytest.mark.parametrize("intensity", [-5, 1500])
    def test_implausible_intensity_falls_back_to_mock(self, intensity):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=_forecast(intensity))

        carbon = asyncio.run(_collector(handler).get_carbon(get_region("eu-west-1")))
        assert carbon.data_source == MOCK_CARBON_SOURCE
        assert carbon.carbon_intensity == 300

    def test_nan_intensity_falls_back_to_mock(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                content=b'{"forecast": [{"carbonIntensity": NaN, "datetime": "2025-01-01T12:00:00Z"}]}',
            )

        carbon = asyncio.run(_collector(handler).get_carbon(get_region("eu-west-1")))
        assert carbon.data_source == MOCK_CARBON_SOURCE

    def test_upper_bound_is_inclusive(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/carbon-intensity/forecast"):
                return httpx.Response(200, json=_forecast(1000))
            return httpx.Response(500)

        carbon = asyncio.run(_collector(handler).get_carbon(get_region("eu-west-1")))
        assert carbon.data_source == DATA_SOURCE
        assert carbon.carbon_intensity == 1000

    def test_breakdown_failure_means_zero_renewable(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/carbon-intensity/forecast"):
                return httpx.Response(
                    200,
                    json={"forecast": [{"carbonIntensity": 80, "datetime": "2025-06-01T00:00:00Z"}]},
                )
            return httpx.Response(500)

        carbon = asyncio.run(_collector(handler).get_carbon(get_region("eu-north-1")))
        assert carbon.carbon_intensity == 80
        assert carbon.renewable_percentage == 0


class TestRegionDataCollector:
    def test_satisfies_protocol(self):
        assert isinstance(RegionDataCollector(), MetricCollector)

    def test_latency_and_cost_are_local(self):
        collector = RegionDataCollector()
        region = get_region("us-west-2")
        latency = asyncio.run(collector.get_latency(region))
        cost = asyncio.run(collector.get_cost(region))
        assert latency.source_location == "mock-us-west-2"
        assert cost.compute_cost_per_hour == pytest.approx(0.11)

    def test_from_config_reads_env_key(self, monkeypatch):
        monkeypatch.setenv("ELECTRICITY_MAPS_API_KEY", "from-env")
        collector = RegionDataCollector.from_config(CarbonApiConfig())
        assert collector.carbon.api_key == "from-env"

    def test_from_config_without_key(self):
        collector = RegionDataCollector.from_config(CarbonApiConfig())
        assert collector.carbon.api_key is None

    def test_from_config_inline_key_and_overrides(self):
        config = CarbonApiConfig(
            base_url="https://example.test/v3/",
            credentials=CredentialRef(value="inline"),
            timeout_seconds=3,
            zone_overrides={"xx-test-9": "NO-NO1"},
        )
        collector = RegionDataCollector.from_config(config)
        assert collector.carbon.api_key == "inline"
        assert collector.carbon.base_url == "https://example.test/v3"
        assert collector.carbon.timeout_seconds == 3
        assert collector.carbon.zone_map["xx-test-9"] == "NO-NO1"
        assert collector.carbon.zone_map["eu-north-1"] == "SE-SE3"
