"""Run the netting engine over a set of intents and print the residual obligations.

Usage:
  python scripts/run_netting_demo.py
  python scripts/run_netting_demo.py --input intents.json --max-cycle-length 6 --json

Input file: a JSON list of {"sender", "receiver", "token", "amount"} objects,
or an object with an "intents" key holding that list.
"""

from __future__ import annotations

import argparse
import json
import logging
import pathlib
import sys

# Allow running this script without installing the package.
REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

from netting_hub.config import Settings
from netting_hub.core.netting.models import Intent
from netting_hub.core.netting.service import NettingService
from netting_hub.utils.exceptions import NettingException


EXAMPLE_INTENTS = [
    Intent(sender="A", receiver="B", token="ETH", amount=100),
    Intent(sender="B", receiver="C", token="ETH", amount=50),
    Intent(sender="C", receiver="A", token="ETH", amount=30),
    Intent(sender="D", receiver="E", token="USDC", amount=200),
    Intent(sender="E", receiver="D", token="USDC", amount=200),
]


def load_intents(path: pathlib.Path) -> list[Intent]:
    raw = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(raw, dict):
        if "intents" not in raw:
            raise ValueError(f"{path}: missing 'intents' key")
        raw = raw["intents"]
    if not isinstance(raw, list):
        raise ValueError(f"{path}: expected a list of intents")

    intents: list[Intent] = []
    for n, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ValueError(f"{path}: intent #{n} is not an object")
        for key in ("sender", "receiver", "token"):
            if not isinstance(item[key], str):
                raise ValueError(f"{path}: intent #{n} field {key!r} must be a string")
        # Amount is passed through as-is; Intent rejects floats, bools and out-of-range values.
        intents.append(
            Intent(
                sender=item["sender"],
                receiver=item["receiver"],
                token=item["token"],
                amount=item["amount"],
            )
        )
    return intents


def _print_intents(title: str, intents: list[Intent]) -> None:
    print(title)
    if not intents:
        print("  (none)")
    for intent in intents:
        print(f"  {intent}")


def _build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Net circular obligations between parties")
    p.add_argument("--input", type=pathlib.Path, default=None, help="JSON file with intents (default: built-in example)")
    p.add_argument("--max-cycle-length", type=int, default=None, help="Max edges per cycle (default: NETTING_MAX_CYCLE_LENGTH)")
    p.add_argument("--max-cycles", type=int, default=None, help="Cap on cycles explored per SCC (default: NETTING_MAX_CYCLES)")
    p.add_argument("--no-dedupe", action="store_true", help="Process every cycle rotation instead of one canonical rotation")
    p.add_argument("--json", action="store_true", help="Emit a JSON report instead of text")
    p.add_argument("--log-level", default=None, help="Logging level (default: LOG_LEVEL)")
    return p


def main() -> int:
    args = _build_arg_parser().parse_args()

    overrides: dict[str, object] = {}
    if args.max_cycles is not None:
        overrides["NETTING_MAX_CYCLES"] = args.max_cycles
    if args.no_dedupe:
        overrides["NETTING_DEDUPLICATE_ROTATIONS"] = False
    settings = Settings(**overrides)

    logging.basicConfig(
        level=(args.log_level or settings.LOG_LEVEL or "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    try:
        intents = load_intents(args.input) if args.input else list(EXAMPLE_INTENTS)
    except (OSError, ValueError, KeyError) as exc:
        print(f"Cannot load intents: {exc}", file=sys.stderr)
        return 2
    except NettingException as exc:
        print(json.dumps(exc.to_dict(), indent=2), file=sys.stderr)
        return 2

    try:
        result = NettingService(settings).run(intents, max_cycle_length=args.max_cycle_length)
    except NettingException as exc:
        print(json.dumps(exc.to_dict(), indent=2), file=sys.stderr)
        return 1

    if args.json:
        report = {
            "original": [i.to_dict() for i in intents],
            "residual": [i.to_dict() for i in result.intents],
            "stats": {
                "sccs": result.sccs,
                "cycles_found": result.cycles_found,
                "cycles_netted": result.cycles_netted,
            },
            "netted": [n.to_dict() for n in result.netted],
            "cancelled": result.cancelled_by_token,
        }
        print(json.dumps(report, indent=2))
        return 0

    _print_intents("Original intents:", intents)
    print()
    _print_intents("Remaining intents after netting:", result.intents)
    if result.netted:
        print()
        print("Netted cycles:")
        for n in result.netted:
            print(f"  {' -> '.join(n.cycle)} -> {n.cycle[0]}: {n.amount} {n.token}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
