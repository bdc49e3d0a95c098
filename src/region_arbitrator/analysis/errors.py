# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Validation error raised by the factor analyzers."""


class MetricValidationError(ValueError):
    """A raw metric is missing, out of range, or not a finite number."""
