# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Deterministic latency, cost, and carbon estimates.

Used whenever no live source is configured.  Every value produced here is
tagged (``mock-`` source location, ``Mock Data`` carbon source) so the
analyzers can lower their confidence accordingly.
"""

from __future__ import annotations

import math

from region_arbitrator.data.models import (
    CarbonMetrics,
    CloudRegion,
    CostMetrics,
    LatencyMetrics,
    utc_now,
)

MOCK_SOURCE_PREFIX = "mock-"
MOCK_CARBON_SOURCE = "Mock Data"

# Washington DC, the point all estimated latencies are measured from
REFERENCE_LATITUDE = 39.0458
REFERENCE_LONGITUDE = -76.6413

_EARTH_RADIUS_KM = 6371.0

# ---------------------------------------------------------------------------
# Pricing
# ---------------------------------------------------------------------------
BASE_COMPUTE_COST = 0.10   # USD per hour
BASE_STORAGE_COST = 0.023  # USD per GB-month
BASE_NETWORK_COST = 0.09   # USD per GB

REGIONAL_COST_MULTIPLIERS: dict[str, float] = {
    "us-east-1": 1.0,
    "us-west-2": 1.1,
    "eu-west-1": 1.2,
    "eu-central-1": 1.15,
    "ap-southeast-1": 1.3,
    "ap-northeast-1": 1.25,
}

# ---------------------------------------------------------------------------
# Carbon: (gCO2/kWh, renewable %) per zone
# ---------------------------------------------------------------------------
MOCK_CARBON_BY_ZONE: dict[str, tuple[float, float]] = {
    "US-MIDA-PJM": (400, 20),  # US East
    "US-NW-PACW": (250, 60),   # US West, hydro-heavy
    "IE": (300, 35),
    "DE": (350, 45),
    "JP-ON": (450, 18),
    "SG": (500, 5),
    "CA-QC": (150, 95),        # Quebec hydro
    "SE-SE3": (100, 85),       # Sweden hydro/nuclear
    "BR-CS": (200, 75),
    "IN-WE": (600, 15),
    # Country-level fallbacks
    "US": (400, 20),
    "CA": (200, 80),
    "SE": (100, 85),
    "BR": (200, 75),
    "IN": (600, 15),
    "JP": (450, 18),
}
DEFAULT_MOCK_CARBON = (400.0, 25.0)


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in kilometres."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    return _EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def estimate_latency(region: CloudRegion) -> LatencyMetrics:
    """Approximate latency from distance: 1 ms per 100 km plus 20 ms, at least 10 ms."""
    distance = haversine_km(
        REFERENCE_LATITUDE,
        REFERENCE_LONGITUDE,
        region.location.latitude,
        region.location.longitude,
    )
    latency = max(10.0, float(round(distance / 100 + 20)))
    return LatencyMetrics(
        average_latency=latency,
        p95_latency=latency * 1.5,
        measurement_timestamp=utc_now(),
        source_location=f"{MOCK_SOURCE_PREFIX}{region.region_code}",
    )


def estimate_cost(region: CloudRegion) -> CostMetrics:
    """Baseline prices scaled by the regional multiplier (1.0 when unknown)."""
    multiplier = REGIONAL_COST_MULTIPLIERS.get(region.region_code, 1.0)
    return CostMetrics(
        compute_cost_per_hour=BASE_COMPUTE_COST * multiplier,
        storage_cost_per_gb=BASE_STORAGE_COST * multiplier,
        network_cost_per_gb=BASE_NETWORK_COST * multiplier,
        region=region.region_code,
    )


def mock_carbon(zone: str) -> CarbonMetrics:
    """Typical carbon figures for *zone*, tagged as mock data."""
    intensity, renewable = MOCK_CARBON_BY_ZONE.get(zone, DEFAULT_MOCK_CARBON)
    return CarbonMetrics(
        carbon_intensity=float(intensity),
        renewable_percentage=float(renewable),
        data_source=MOCK_CARBON_SOURCE,
        last_updated=utc_now(),
    )
