from __future__ import annotations

import argparse
import json
import sys

import requests


def _print(obj) -> None:
    print(json.dumps(obj, indent=2, ensure_ascii=False))


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Serf service discovery status CLI")
    p.add_argument("--api", default="http://localhost:8000", help="API base URL")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("health", help="Show discovery health")
    sub.add_parser("targets", help="Show published target groups")
    sub.add_parser("config", help="Show the active discovery configuration")

    s_ev = sub.add_parser("events", help="Show discovery events")
    s_ev.add_argument("--limit", type=int, default=20)

    args = p.parse_args(argv)

    base = args.api.rstrip("/")
    params = {"limit": args.limit} if args.cmd == "events" else None

    r = requests.get(f"{base}/{args.cmd}", params=params, timeout=10)
    _print(r.json())
    return 0 if r.ok else 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
