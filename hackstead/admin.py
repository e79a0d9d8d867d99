"""Administrative CLI helpers for inspecting and checking the balance documents."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Sequence

from .catalog import Config, ConfigLoadError, DOCUMENT_NAMES, load_config
from .config import HacksteadSettings
from .models.advancements import AdvancementSet, HacksteadSum
from .models.archetypes import UnknownArchetypeName
from .models.plants import PlantSum
from .validation import validate_corpus

log = logging.getLogger(__name__)


def format_multiplier(value: float) -> str:
    """Return ``value`` as ``x1.5`` with trailing zeros removed."""

    text = f"{value:.4f}".rstrip("0").rstrip(".")
    return f"x{text or '0'}"


def describe_sum(config: Config, summary: HacksteadSum | PlantSum) -> list[str]:
    if isinstance(summary, HacksteadSum):
        return [f"land: {summary.land}"]

    registry = config.possession_archetypes
    lines = [
        f"xp multiplier: {format_multiplier(summary.xp_multiplier)}",
        f"yield speed multiplier: {format_multiplier(summary.yield_speed_multiplier)}",
    ]
    if summary.yields:
        lines.append("yields:")
        for amount, handle in summary.yields:
            lines.append(f"  - {amount:g} x {registry.get(handle).name}")
    else:
        lines.append("yields: none")
    if summary.recipes:
        lines.append("recipes:")
        for recipe in summary.recipes:
            needs = ", ".join(
                f"{quantity} x {registry.get(handle).name}" for quantity, handle in recipe.needs
            )
            lines.append(f"  - {registry.get(recipe.makes).name} <- {needs or 'nothing'}")
    else:
        lines.append("recipes: none")
    return lines


def _select_set(config: Config, plant: str | None) -> AdvancementSet[Any, Any]:
    if plant is None:
        return config.hackstead_advancements
    return config.find_plant(plant).advancements


def _command_list(config: Config, args: argparse.Namespace) -> int:
    print(f"Documents: {', '.join(DOCUMENT_NAMES)}")
    print(f"  - possession archetypes: {len(config.possession_archetypes)}")
    print(f"  - plant archetypes: {len(config.plant_archetypes)}")
    print(f"  - hackstead tiers: {len(config.hackstead_advancements.all())}")
    if config.special_users:
        print(f"  - special users: {', '.join(config.special_users)}")
    else:
        print("  - special users: none")
    return 0


def _command_validate(config: Config, args: argparse.Namespace) -> int:
    issues = validate_corpus(config, strict=args.strict)
    if not issues:
        print("All references resolve.")
        return 0

    error_count = 0
    warning_count = 0
    for issue in sorted(issues, key=lambda issue: issue.level != "error"):
        print(issue.display())
        if issue.level == "error":
            error_count += 1
        else:
            warning_count += 1

    summary_parts = []
    if error_count:
        summary_parts.append(f"{error_count} error(s)")
    if warning_count:
        summary_parts.append(f"{warning_count} warning(s)")
    print("\nValidation complete: " + ", ".join(summary_parts))
    return 1 if error_count else 0


def _command_sum(config: Config, args: argparse.Namespace) -> int:
    advancements = _select_set(config, args.plant)
    for line in describe_sum(config, advancements.sum(args.xp)):
        print(line)
    return 0


def _command_max(config: Config, args: argparse.Namespace) -> int:
    advancements = _select_set(config, args.plant)
    for line in describe_sum(config, advancements.max()):
        print(line)
    return 0


def _command_tiers(config: Config, args: argparse.Namespace) -> int:
    advancements = _select_set(config, args.plant)
    current = advancements.current(args.xp) if args.xp is not None else None
    for tier in advancements.all():
        marker = "*" if tier is current else " "
        print(f"{marker} {tier.xp:>8}  {tier.title}")
        if tier.description:
            print(f"            {tier.description}")
    if args.xp is not None:
        threshold = advancements.next_threshold(args.xp)
        if threshold is None:
            print("\nNo further tiers ahead.")
        else:
            print(f"\nNext tier at {threshold} xp.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Inspect and check the balance documents.")
    parser.add_argument(
        "--config-dir",
        help="Directory holding the documents (default: $HACKSTEAD_CONFIG_DIR or ./config)",
    )

    subparsers = parser.add_subparsers(dest="command")

    list_parser = subparsers.add_parser("list", help="Show what the documents contain")
    list_parser.set_defaults(func=_command_list)

    validate_parser = subparsers.add_parser(
        "validate",
        aliases=["lint"],
        help="Check that every archetype name in the documents resolves",
    )
    validate_parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Also warn about duplicate archetype names",
    )
    validate_parser.set_defaults(func=_command_validate)

    sum_parser = subparsers.add_parser("sum", help="Show the bonuses unlocked at an xp total")
    sum_parser.add_argument("--xp", type=int, required=True, help="Accumulated experience")
    sum_parser.add_argument("--plant", help="Plant archetype name (default: hackstead)")
    sum_parser.set_defaults(func=_command_sum)

    max_parser = subparsers.add_parser("max", help="Show the bonuses of every tier combined")
    max_parser.add_argument("--plant", help="Plant archetype name (default: hackstead)")
    max_parser.set_defaults(func=_command_max)

    tiers_parser = subparsers.add_parser("tiers", help="List advancement tiers")
    tiers_parser.add_argument("--plant", help="Plant archetype name (default: hackstead)")
    tiers_parser.add_argument("--xp", type=int, help="Mark the tier current at this xp")
    tiers_parser.set_defaults(func=_command_tiers)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not getattr(args, "command", None):
        parser.print_help()
        return 0

    settings = HacksteadSettings.from_env()
    logging.basicConfig(level=settings.log_level)
    if getattr(args, "strict", False) is None:
        args.strict = settings.strict

    try:
        config = load_config(args.config_dir or settings.config_dir)
    except ConfigLoadError as exc:
        print(f"Unable to load {exc.document}: {exc.cause}", file=sys.stderr)
        return 2

    try:
        return args.func(config, args)
    except UnknownArchetypeName as exc:
        print(str(exc), file=sys.stderr)
        return 1


__all__ = ["build_parser", "describe_sum", "format_multiplier", "main"]


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
