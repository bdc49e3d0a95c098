# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Main CLI application for region-arbitrator."""

from __future__ import annotations

import asyncio
import json
import logging

import click
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from region_arbitrator.analysis.errors import MetricValidationError
from region_arbitrator.arbitrator import RegionArbitrator
from region_arbitrator.config import ArbitratorConfig, load_config
from region_arbitrator.data.models import ArbitratorVerdict, CloudRegion, FactorWeights
from region_arbitrator.data.regions import REGIONS, get_region
from region_arbitrator.reporting.terminal import TerminalRenderer
from region_arbitrator.scoring.weights import WeightValidationError


def _load(config_path: str | None, console: Console) -> ArbitratorConfig:
    if not config_path:
        return ArbitratorConfig()
    try:
        return load_config(config_path)
    except FileNotFoundError as exc:
        console.print(f"[red]{exc}[/]")
        raise SystemExit(1)
    except (ValidationError, yaml.YAMLError) as exc:
        console.print(f"Invalid config file {config_path}:", style="red", markup=False)
        console.print(str(exc), style="red", markup=False, highlight=False)
        raise SystemExit(1)


def _resolve_regions(codes: tuple[str, ...], console: Console) -> list[CloudRegion]:
    regions = []
    for code in codes:
        try:
            regions.append(get_region(code))
        except KeyError as exc:
            console.print(f"[red]{exc.args[0]}[/]")
            raise SystemExit(1)
    return regions


def _merge_weights(
    base: FactorWeights,
    carbon: float | None,
    latency: float | None,
    cost: float | None,
) -> FactorWeights:
    return FactorWeights(
        carbon=base.carbon if carbon is None else carbon,
        latency=base.latency if latency is None else latency,
        cost=base.cost if cost is None else cost,
    )


@click.group()
@click.version_option(version="0.1.0")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("--verbose", "-v", is_flag=True, help="Log collector and evaluation details")
@click.pass_context
def cli(ctx: click.Context, no_color: bool, verbose: bool) -> None:
    """region-arbitrator: Cloud Region Referee

    Judge cloud regions on three factors:

    \b
      Carbon:  grid carbon intensity and renewable share
      Latency: baseline round-trip latency
      Cost:    compute, storage and network prices
    """
    ctx.ensure_object(dict)
    console = Console(no_color=no_color)
    ctx.obj["console"] = console

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True, no_color=no_color))],
        force=True,
    )


@cli.command()
@click.pass_context
def regions(ctx: click.Context) -> None:
    """List the built-in region catalogue."""
    console: Console = ctx.obj["console"]
    TerminalRenderer(console).render_regions(list(REGIONS.values()))


@cli.command()
@click.argument("region_codes", nargs=-1, required=True, metavar="REGION...")
@click.option(
    "--config", "-c", type=click.Path(), default=None,
    help="Arbitrator config YAML file",
)
@click.option("--carbon", type=float, default=None, help="Carbon weight (0-0.8)")
@click.option("--latency", type=float, default=None, help="Latency weight (0-0.8)")
@click.option("--cost", type=float, default=None, help="Cost weight (0-0.8)")
@click.option("--report", is_flag=True, default=False, help="Print the plain-text match report")
@click.option(
    "--export-json", type=click.Path(), default=None,
    help="Export verdicts as JSON at this path",
)
@click.option("--show-reasons/--no-reasons", default=True, help="Show reasoning per region")
@click.pass_context
def evaluate(
    ctx: click.Context,
    region_codes: tuple[str, ...],
    config: str | None,
    carbon: float | None,
    latency: float | None,
    cost: float | None,
    report: bool,
    export_json: str | None,
    show_reasons: bool,
) -> None:
    """Evaluate one or more regions and rank them greenest first."""
    console: Console = ctx.obj["console"]

    cfg = _load(config, console)
    cfg = cfg.model_copy(update={"weights": _merge_weights(cfg.weights, carbon, latency, cost)})
    selected = _resolve_regions(region_codes, console)

    try:
        arbitrator = RegionArbitrator(config=cfg)
    except WeightValidationError as exc:
        console.print(f"[red]Invalid weights: {exc}[/]")
        raise SystemExit(1)

    try:
        with console.status("[bold cyan]Collecting metrics and scoring regions..."):
            verdicts = asyncio.run(arbitrator.evaluate_many(selected))
    except MetricValidationError as exc:
        console.print(f"Invalid metrics: {exc}", style="red", markup=False)
        raise SystemExit(1)

    if report:
        console.print(arbitrator.format_report(verdicts), markup=False, highlight=False)
    else:
        TerminalRenderer(console).render(
            verdicts, arbitrator.get_weights(), show_reasons=show_reasons
        )

    if export_json:
        _export_json(verdicts, export_json, console)


@cli.command("config")
@click.option(
    "--config", "-c", "config_path", type=click.Path(), default=None,
    help="Arbitrator config YAML file",
)
@click.pass_context
def show_config(ctx: click.Context, config_path: str | None) -> None:
    """Show the active weights and components."""
    console: Console = ctx.obj["console"]
    cfg = _load(config_path, console)

    try:
        arbitrator = RegionArbitrator(config=cfg)
    except WeightValidationError as exc:
        console.print(f"[red]Invalid weights: {exc}[/]")
        raise SystemExit(1)

    info = arbitrator.get_configuration()

    table = Table(title="Active Configuration", show_header=True, header_style="bold")
    table.add_column("Setting", style="bold")
    table.add_column("Value")
    for factor, weight in info["weights"].items():
        table.add_row(f"weight.{factor}", f"{weight:.0%}")
    for name, component in info["components"].items():
        table.add_row(name, component)
    table.add_row("carbon_api.base_url", cfg.carbon_api.base_url)
    console.print(table)


def _export_json(verdicts: list[ArbitratorVerdict], path: str, console: Console) -> None:
    """Export to JSON."""
    with open(path, "w") as f:
        json.dump([v.model_dump(mode="json") for v in verdicts], f, indent=2)
    console.print(f"  [green]JSON verdicts exported to:[/green] {path}")
