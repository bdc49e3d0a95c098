# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Metric collectors: the arbitrator's only contact with the outside world."""

from region_arbitrator.collectors.base import CollectionFailure, MetricCollector
from region_arbitrator.collectors.collector import RegionDataCollector
from region_arbitrator.collectors.electricity_maps import ElectricityMapsCollector
from region_arbitrator.collectors.zones import REGION_ZONE_MAP, resolve_zone

__all__ = [
    "CollectionFailure",
    "ElectricityMapsCollector",
    "MetricCollector",
    "REGION_ZONE_MAP",
    "RegionDataCollector",
    "resolve_zone",
]
