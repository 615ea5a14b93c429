"""Command-line interface for composing a formation from a roster CSV."""

from __future__ import annotations

import argparse
import random
import sys
from pathlib import Path

from pitchside.config import get_formation, iter_formations
from pitchside.config_loader import load_formations
from pitchside.formation import AssignmentError, assign_formation, export_formation_to_csv
from pitchside.ingest import load_roster_csv
from pitchside.suggest import suggest_position


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a starting lineup from checked-in players")
    parser.add_argument("roster", type=Path, help="Path to roster CSV")
    parser.add_argument(
        "--formation",
        default="4-4-2",
        help="Formation name (built-in: {})".format(", ".join(f.name for f in iter_formations())),
    )
    parser.add_argument(
        "--formations-file",
        type=Path,
        default=None,
        help="JSON file with additional formations",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible lineup")
    parser.add_argument(
        "--all-players",
        action="store_true",
        help="Treat every roster row as checked in",
    )
    parser.add_argument("--output", type=Path, default=None, help="Write the lineup CSV here")
    parser.add_argument(
        "--suggest",
        action="store_true",
        help="Print a suggested position for every player",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    try:
        roster = load_roster_csv(args.roster)
        extra = load_formations(args.formations_file) if args.formations_file else None
        formation = get_formation(args.formation, extra)
    except (KeyError, OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if args.suggest:
        for player in roster:
            suggestion = suggest_position(player, roster)
            marker = "" if suggestion == player.position else " *"
            print(f"#{player.jersey_number:<3} {player.name:<24} {player.position:<11} -> {suggestion}{marker}")

    available = roster if args.all_players else [player for player in roster if player.is_checked_in]
    rng = random.Random(args.seed) if args.seed is not None else None
    result = assign_formation(available, formation, rng=rng)
    if isinstance(result, AssignmentError):
        print(f"error: {result.message}", file=sys.stderr)
        return 1

    csv_text = export_formation_to_csv(formation, result)
    if args.output:
        args.output.write_text(csv_text, encoding="utf-8")
        print(f"Wrote {formation.name} lineup with {len(result)} players to {args.output}")
    else:
        print(csv_text, end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())
