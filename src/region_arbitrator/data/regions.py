# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Catalogue of well-known cloud regions.

The arbitrator accepts any :class:`CloudRegion`; this catalogue only
provides ready-made definitions for the regions the CLI and examples
evaluate by code.
"""

from __future__ import annotations

from region_arbitrator.data.models import CloudProvider, CloudRegion, GeographicLocation


def _aws(code: str, name: str, country: str, city: str, lat: float, lon: float) -> CloudRegion:
    return CloudRegion(
        provider=CloudProvider.aws,
        region_code=code,
        display_name=name,
        location=GeographicLocation(country=country, city=city, latitude=lat, longitude=lon),
    )


# ---------------------------------------------------------------------------
# Region definitions
# ---------------------------------------------------------------------------

US_EAST_1 = _aws("us-east-1", "US East (N. Virginia)", "US", "N. Virginia", 39.0, -77.4)
US_WEST_2 = _aws("us-west-2", "US West (Oregon)", "US", "Oregon", 44.0, -120.5)
EU_WEST_1 = _aws("eu-west-1", "Europe (Ireland)", "IE", "Dublin", 53.0, -8.0)
EU_CENTRAL_1 = _aws("eu-central-1", "Europe (Frankfurt)", "DE", "Frankfurt", 50.1, 8.7)
AP_NORTHEAST_1 = _aws("ap-northeast-1", "Asia Pacific (Tokyo)", "JP", "Tokyo", 35.7, 139.7)
AP_SOUTHEAST_1 = _aws("ap-southeast-1", "Asia Pacific (Singapore)", "SG", "Singapore", 1.3, 103.8)
CA_CENTRAL_1 = _aws("ca-central-1", "Canada (Central)", "CA", "Montreal", 45.5, -73.6)
EU_NORTH_1 = _aws("eu-north-1", "Europe (Stockholm)", "SE", "Stockholm", 59.3, 18.1)
SA_EAST_1 = _aws("sa-east-1", "South America (Sao Paulo)", "BR", "Sao Paulo", -23.5, -46.6)
AP_SOUTH_1 = _aws("ap-south-1", "Asia Pacific (Mumbai)", "IN", "Mumbai", 19.1, 72.9)


REGIONS: dict[str, CloudRegion] = {
    region.region_code: region
    for region in (
        US_EAST_1,
        US_WEST_2,
        EU_WEST_1,
        EU_CENTRAL_1,
        AP_NORTHEAST_1,
        AP_SOUTHEAST_1,
        CA_CENTRAL_1,
        EU_NORTH_1,
        SA_EAST_1,
        AP_SOUTH_1,
    )
}


def get_region(code: str) -> CloudRegion:
    """Return the catalogue region for *code*.

    Raises
    ------
    KeyError
        If *code* is not in the catalogue.
    """
    try:
        return REGIONS[code]
    except KeyError:
        available = ", ".join(sorted(REGIONS.keys()))
        raise KeyError(
            f"Unknown region '{code}'. Available regions: {available}"
        ) from None
