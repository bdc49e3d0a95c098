# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Cloud region -> Electricity Maps zone identifier lookup."""

from __future__ import annotations

import logging
from typing import Mapping

from region_arbitrator.data.models import CloudRegion

logger = logging.getLogger(__name__)

REGION_ZONE_MAP: dict[str, str] = {
    "us-east-1": "US-MIDA-PJM",
    "us-west-2": "US-NW-PACW",
    "eu-west-1": "IE",
    "eu-central-1": "DE",
    "ap-northeast-1": "JP-ON",
    "ap-southeast-1": "SG",
    "ca-central-1": "CA-QC",
    "eu-north-1": "SE-SE3",
    "sa-east-1": "BR-CS",
    "ap-south-1": "IN-WE",
}


def resolve_zone(region: CloudRegion, zone_map: Mapping[str, str] | None = None) -> str:
    """Return the zone identifier for *region*.

    Regions missing from the table fall back to their country code.
    """
    table = REGION_ZONE_MAP if zone_map is None else zone_map
    zone = table.get(region.region_code)
    if zone:
        return zone
    logger.debug(
        "Region %s not in zone table, using country code %s",
        region.region_code,
        region.location.country,
    )
    return region.location.country
