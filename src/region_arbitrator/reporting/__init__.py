# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Reporting modules for terminal and plain-text output."""

from region_arbitrator.reporting.match_report import format_match_report
from region_arbitrator.reporting.terminal import TerminalRenderer

__all__ = ["TerminalRenderer", "format_match_report"]
