"""Lightweight REST client for the pitchside API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx

from pitchside.ingest import load_roster_csv


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the pitchside REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("--import-roster", type=Path, metavar="CSV", help="Register every player in a roster CSV")
    parser.add_argument("--list-players", action="store_true", help="List registered players and exit")
    parser.add_argument("--check-in", type=int, metavar="PLAYER_ID", action="append", default=[], help="Toggle check-in")
    parser.add_argument("--formation", help="Generate a lineup for a catalog formation, e.g. 4-4-2")
    parser.add_argument("--suggest", type=int, metavar="PLAYER_ID", help="Fetch a smart position suggestion")
    parser.add_argument("--stats-text", help='Apply a stats note such as "Sam scored 2 goals"')
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url) as client:
        if args.import_roster:
            for player in load_roster_csv(args.import_roster):
                resp = client.post(
                    "/players",
                    json={
                        "name": player.name,
                        "position": player.position,
                        "jersey_number": player.jersey_number,
                        "is_checked_in": player.is_checked_in,
                        "goals": player.goals,
                        "assists": player.assists,
                        "red_cards": player.red_cards,
                        "yellow_cards": player.yellow_cards,
                        "matches_played": player.matches_played,
                    },
                )
                if resp.status_code == 400:
                    print(f"skipped #{player.jersey_number} {player.name}: {resp.json()['detail']}")
                    continue
                resp.raise_for_status()
                print(f"registered #{player.jersey_number} {player.name}")

        if args.list_players:
            resp = client.get("/players")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
            return

        for player_id in args.check_in:
            resp = client.post(f"/players/{player_id}/toggle-checkin")
            if resp.status_code == 404:
                raise SystemExit(f"player {player_id} not found")
            resp.raise_for_status()
            body = resp.json()
            state = "in" if body["is_checked_in"] else "out"
            print(f"{body['name']} checked {state}")

        if args.stats_text:
            resp = client.post("/stats/natural", json={"text": args.stats_text})
            if resp.status_code in (400, 404):
                raise SystemExit(resp.json()["detail"])
            resp.raise_for_status()
            print(resp.json()["message"])

        if args.suggest is not None:
            resp = client.get(f"/players/{args.suggest}/smart-position")
            if resp.status_code == 404:
                raise SystemExit(f"player {args.suggest} not found")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))

        if args.formation:
            resp = client.post("/formations/generate", json={"formation_name": args.formation})
            if resp.status_code == 400:
                raise SystemExit(json.dumps(resp.json()["detail"], indent=2))
            resp.raise_for_status()
            payload = resp.json()
            print(payload["message"])
            for player in payload["players"]:
                print(f"  {player['assigned_position']:<11} #{player['jersey_number']:<3} {player['name']}")


if __name__ == "__main__":
    main()
