#!/usr/bin/env python3
"""Run a factory floor command script and print each step."""

from __future__ import annotations

import argparse

from factoryfloor import FactoryFloor, FloorSession


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="factory floor command script runner.")
    parser.add_argument("--script", default="examples/moves.txt", help="Path to a command script")
    parser.add_argument("--positions", type=int, default=10, help="Number of floor positions")
    return parser


def main() -> int:
    args = build_parser().parse_args()
    session = FloorSession(FactoryFloor.new_instance(args.positions))

    with open(args.script, "r", encoding="utf-8") as f:
        for line in f:
            result = session.run_line(line)
            if result is None:
                continue
            print(f"{line.strip():<20} -> {result.error.value:<10} {session.floor}")
            if session.stopped:
                break

    print()
    print(session.floor.output("\n"))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())


# python examples/run_moves.py --script examples/moves.txt --positions 10
