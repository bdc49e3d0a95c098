"""Rich terminal renderer.

Composes Rich tables and panels into the user-facing terminal output
for region evaluations.
"""

from __future__ import annotations

from typing import Sequence

from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from region_arbitrator.data.models import (
    ArbitratorVerdict,
    CloudRegion,
    FactorWeights,
    SuggestionType,
)
from region_arbitrator.scoring.weights import CARBON_NAME, COST_NAME, LATENCY_NAME


def mini_gauge(score: float, width: int = 10) -> str:
    """Compact gauge for inline use in tables."""
    clamped = max(0.0, min(100.0, score))
    filled = int(clamped / 100 * width)

    if clamped >= 70:
        color = "green"
    elif clamped >= 40:
        color = "yellow"
    else:
        color = "red"

    bar = "█" * filled + "░" * (width - filled)
    return f"[{color}]{bar}[/] {clamped:.0f}"


class TerminalRenderer:
    """Renders verdicts and region listings to the terminal using Rich."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render(
        self,
        verdicts: Sequence[ArbitratorVerdict],
        weights: FactorWeights,
        show_reasons: bool = True,
    ) -> None:
        """Render ranked verdicts, then the reasoning and suggestion for each."""
        self._render_header(verdicts, weights)
        self._render_verdict_table(verdicts)
        if show_reasons:
            for verdict in verdicts:
                self._render_verdict_detail(verdict)

    def render_regions(self, regions: Sequence[CloudRegion]) -> None:
        """Render the region catalogue."""
        table = Table(show_header=True, header_style="bold", padding=(0, 1))
        table.add_column("Code", style="bold cyan")
        table.add_column("Name")
        table.add_column("Provider", justify="center")
        table.add_column("Country", justify="center")
        table.add_column("City")

        for region in regions:
            table.add_row(
                region.region_code,
                region.display_name,
                region.provider.value,
                region.location.country,
                region.location.city or "-",
            )

        self.console.print(table)

    # ------------------------------------------------------------------
    # Private rendering methods
    # ------------------------------------------------------------------

    def _render_header(self, verdicts: Sequence[ArbitratorVerdict], weights: FactorWeights) -> None:
        header_text = Text()
        header_text.append("REGION ARBITRATOR", style="bold cyan")
        header_text.append(" | ", style="dim")
        header_text.append(f"{len(verdicts)} regions", style="bold")
        header_text.append(" | ", style="dim")
        header_text.append(
            f"{CARBON_NAME} {weights.carbon:.0%} / {LATENCY_NAME} {weights.latency:.0%} / "
            f"{COST_NAME} {weights.cost:.0%}"
        )

        self.console.print()
        self.console.print(Panel(header_text, title="Referee Match"))

    def _render_verdict_table(self, verdicts: Sequence[ArbitratorVerdict]) -> None:
        table = Table(show_header=True, header_style="bold", padding=(0, 1))
        table.add_column("#", justify="right", style="bold", width=3)
        table.add_column("Region", min_width=18)
        table.add_column("Verdict", justify="center", min_width=11)
        table.add_column(CARBON_NAME, justify="left", min_width=14)
        table.add_column(LATENCY_NAME, justify="left", min_width=14)
        table.add_column(COST_NAME, justify="left", min_width=14)
        table.add_column("Overall", justify="right", min_width=7)
        table.add_column("Confidence", justify="center", min_width=10)

        for rank, v in enumerate(verdicts, start=1):
            color = v.verdict.color
            table.add_row(
                str(rank),
                f"{v.region.display_name}\n[dim]{v.region.region_code}[/dim]",
                f"[{color}]{v.verdict.value}[/{color}]",
                mini_gauge(v.scores.carbon.score),
                mini_gauge(v.scores.latency.score),
                mini_gauge(v.scores.cost.score),
                f"{v.scores.composite.overall_score:.1f}",
                v.referee_confidence.value,
            )

        self.console.print()
        self.console.print(table)

    def _render_verdict_detail(self, verdict: ArbitratorVerdict) -> None:
        color = verdict.verdict.color

        self.console.print()
        self.console.print(Rule(
            f"[bold]{verdict.region.display_name}[/bold] - {verdict.verdict.value}",
            style=color,
        ))
        self.console.print(f"  {verdict.reason}")

        suggestion = verdict.suggestion
        title = "GREEN ALTERNATIVE"
        if suggestion.type is not SuggestionType.alternative_region:
            title = "GREEN STRATEGY"
        body = suggestion.description
        if suggestion.expected_impact:
            body += f"\n\n[dim]Expected impact: {suggestion.expected_impact}[/dim]"
        self.console.print(
            Panel(body, title=f"[bold]{title}[/bold]", border_style="green", padding=(0, 1))
        )
