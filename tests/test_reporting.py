"""Tests for the plain-text match report and the Rich terminal renderer."""

from __future__ import annotations

import asyncio
import io
from datetime import datetime, timezone

import httpx
import pytest
from rich.console import Console

from region_arbitrator.arbitrator import RegionArbitrator
from region_arbitrator.data.models import FactorWeights
from region_arbitrator.data.regions import REGIONS, get_region
from region_arbitrator.reporting import TerminalRenderer, format_match_report
from region_arbitrator.reporting.match_report import count_verdicts

GENERATED_AT = datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture()
def batch():
    regions = [get_region(c) for c in ("us-east-1", "eu-north-1", "ca-central-1")]
    return asyncio.run(RegionArbitrator().evaluate_many(regions))


class TestMatchReport:
    def test_empty(self):
        report = RegionArbitrator().format_report([], generated_at=GENERATED_AT)
        assert "REFEREE MATCH REPORT" in report
        assert "No regions evaluated." in report
        assert "2025-03-01T09:30:00+00:00" in report

    def test_header(self, batch):
        report = format_match_report(batch, FactorWeights(), "Q3 Placement", GENERATED_AT)
        assert "Report: Q3 Placement" in report
        assert "Generated: 2025-03-01T09:30:00+00:00" in report
        assert "Configuration: Carbon 40%, Latency 40%, Cost 20%" in report
        assert "Regions Evaluated: 3" in report

    def test_verdict_counts(self, batch):
        report = format_match_report(batch, FactorWeights(), generated_at=GENERATED_AT)
        assert "Play On: 1 region\n" in report
        assert "Yellow Card: 1 region\n" in report
        assert "Red Card: 1 region\n" in report
        assert "Blue Card" not in report

    def test_greenest_and_details(self, batch):
        report = format_match_report(batch, FactorWeights(), generated_at=GENERATED_AT)
        assert "Winner: Europe (Stockholm)" in report
        assert "1. Europe (Stockholm) (eu-north-1)" in report
        assert "3. US East (N. Virginia) (us-east-1)" in report
        assert "Green Path: alternative region" in report
        assert "The Referee recommends Europe (Stockholm) as the optimal choice" in report

    def test_reasoning_truncated(self, batch):
        report = format_match_report(batch, FactorWeights(), generated_at=GENERATED_AT)
        reasoning_lines = [line for line in report.splitlines() if "Reasoning:" in line]
        assert len(reasoning_lines) == 3
        assert all(line.endswith("...") for line in reasoning_lines)

    def test_deterministic(self, batch):
        first = format_match_report(batch, FactorWeights(), generated_at=GENERATED_AT)
        second = format_match_report(batch, FactorWeights(), generated_at=GENERATED_AT)
        assert first == second

    def test_weights_follow_arbitrator(self, batch):
        arbitrator = RegionArbitrator()
        arbitrator.configure_weights(FactorWeights(carbon=0.6, latency=0.2, cost=0.2))
        report = arbitrator.format_report(batch, generated_at=GENERATED_AT)
        assert "Configuration: Carbon 60%, Latency 20%, Cost 20%" in report

    def test_blue_cards_reported(self, api_collector):
        arbitrator = RegionArbitrator(api_collector(lambda request: httpx.Response(503)))
        verdicts = asyncio.run(arbitrator.evaluate_many([get_region("eu-west-1")]))

        report = arbitrator.format_report(verdicts, generated_at=GENERATED_AT)

        assert "Blue Card: 1 region (data unavailable)" in report
        assert "No region could be scored." in report
        assert "1 region cannot be evaluated due to data issues." in report

    def test_count_verdicts(self, batch):
        counts = count_verdicts(batch)
        assert sum(counts.values()) == 3
        assert len(counts) == 4


class TestTerminalRenderer:
    def _console(self) -> Console:
        return Console(file=io.StringIO(), width=160, no_color=True)

    def test_render_verdicts(self, batch):
        console = self._console()
        TerminalRenderer(console).render(batch, FactorWeights())
        output = console.file.getvalue()
        assert "REGION ARBITRATOR" in output
        assert "Europe (Stockholm)" in output
        assert "GREEN ALTERNATIVE" in output
        assert "GREEN STRATEGY" in output

    def test_render_without_reasons(self, batch):
        console = self._console()
        TerminalRenderer(console).render(batch, FactorWeights(), show_reasons=False)
        assert "GREEN" not in console.file.getvalue()

    def test_render_regions(self):
        console = self._console()
        TerminalRenderer(console).render_regions(list(REGIONS.values()))
        output = console.file.getvalue()
        for code in REGIONS:
            assert code in output
