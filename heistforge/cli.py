"""Command line helpers for HeistForge."""

from __future__ import annotations

import argparse
import logging
import sys
from random import Random

from rich.console import Console
from rich.table import Table

from .config import HeistForgeConfig
from .diagnostics.simulator import HeistSimulator
from .domain.core import forecast
from .domain.items import item_name
from .domain.types import (
    DEFAULT_SKILL,
    CrimeMode,
    ItemKey,
    MinigameOutcome,
    MinigameResult,
    PlayerProfile,
    Risk,
    SoloHeistConfig,
)
from .validators import validate_config

console = Console()


def run_simulator() -> None:
    parser = argparse.ArgumentParser(description="HeistForge payout simulator")
    parser.add_argument("--mode", choices=[m.value for m in CrimeMode], help="Only this mode")
    parser.add_argument("--risk", choices=[r.value for r in Risk], help="Only this risk level")
    _add_items_argument(parser)
    parser.add_argument(
        "--minigame",
        choices=[o.value for o in MinigameOutcome if o is not MinigameOutcome.PARTIAL],
        default=MinigameOutcome.NOT_PLAYED.value,
        help="Skill check result applied to every run",
    )
    parser.add_argument("--skill", type=int, default=DEFAULT_SKILL, help="Thief skill of the simulated player")
    parser.add_argument("--runs", type=int, default=1000, help="Heists per mode and risk")
    parser.add_argument("--seed", type=int, help="Seed for reproducible runs")
    args = parser.parse_args()

    config = _setup(args.seed)
    rng = Random(config.rng_seed) if config.rng_seed is not None else Random()
    simulator = HeistSimulator(rng=rng, thief_skill=args.skill)
    results = simulator.sweep(
        modes=[CrimeMode(args.mode)] if args.mode else None,
        risks=[Risk(args.risk)] if args.risk else None,
        items=args.items,
        minigame=MinigameResult(MinigameOutcome(args.minigame)),
        runs=args.runs,
    )

    table = Table(title=f"{args.runs} heists per setup")
    for column in ("Mode", "Risk", "Success", "Mean", "Best", "Worst", "Heat"):
        table.add_column(column, justify="left" if column in ("Mode", "Risk") else "right")
    for result in results:
        table.add_row(
            result.mode.label,
            result.risk.value,
            f"{result.success_rate:.1%}",
            f"{result.mean_amount:+.1f}",
            str(result.biggest_win),
            str(result.biggest_loss),
            f"{result.mean_heat:.1f}",
        )
    console.print(table)


def run_forecast() -> None:
    parser = argparse.ArgumentParser(description="HeistForge heist forecast")
    parser.add_argument("mode", choices=[m.value for m in CrimeMode])
    parser.add_argument("risk", choices=[r.value for r in Risk])
    _add_items_argument(parser)
    parser.add_argument("--skill", type=int, default=DEFAULT_SKILL, help="Thief skill")
    parser.add_argument("--heat", type=int, default=0, help="Current heat")
    args = parser.parse_args()

    _setup(None)
    profile = PlayerProfile(user_id=0, heat=args.heat, thief_skill=args.skill)
    cfg = SoloHeistConfig(mode=CrimeMode(args.mode), risk=Risk(args.risk), items=args.items)
    result = forecast(profile, cfg)

    table = Table(title=f"{cfg.resolved_mode().label} / {cfg.resolved_risk().value}", show_header=False)
    table.add_column("Field")
    table.add_column("Value", justify="right")
    table.add_row("Loadout", ", ".join(item_name(item) for item in cfg.items) or "-")
    table.add_row("Chance (minigame won)", f"{result.chance_if_success:.1f}%")
    table.add_row("Chance (minigame lost)", f"{result.chance_if_fail:.1f}%")
    table.add_row("Chance (minigame skipped)", f"{result.chance_if_skipped:.1f}%")
    table.add_row("Loot", f"{result.reward_min}-{result.reward_max}")
    table.add_row("Heat", f"+{result.heat_on_success} / +{result.heat_on_fail}")
    console.print(table)
    console.print(f"Heat at {args.heat}: {result.heat_summary}")


def run_validate() -> None:
    parser = argparse.ArgumentParser(description="HeistForge configuration validator")
    parser.parse_args()

    try:
        config = HeistForgeConfig.from_env()
    except ValueError as exc:
        console.print(f"[red]Invalid environment:[/red] {exc}")
        sys.exit(1)
    issues = validate_config(config)
    if issues:
        console.print("[red]Configuration problems found:[/red]")
        for issue in issues:
            console.print(f"- {issue}")
        sys.exit(1)
    console.print("Configuration is valid ✅")


def _add_items_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--items",
        nargs="*",
        type=ItemKey,
        default=[],
        metavar="ITEM",
        help=f"Loadout items ({', '.join(item.value for item in ItemKey)})",
    )


def _setup(seed: int | None) -> HeistForgeConfig:
    config = HeistForgeConfig.from_env()
    if seed is not None:
        config.rng_seed = seed
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return config
