from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Optional, Sequence, TextIO

from roomledger.config import Settings, get_settings
from roomledger.logging import configure_logging, get_logger
from roomledger.schemas import dump_result, load_bill
from roomledger.services.calculator import calculate_bill
from roomledger.services.settlement import clamp_settlement
from roomledger.services.validation import BillValidationError

EXIT_INVALID_INPUT = 2


def _read_payload(path: str) -> Any:
    if path == "-":
        return json.load(sys.stdin)
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="roomledger", description="Settle a shared bill in minor units.")
    commands = parser.add_subparsers(dest="command", required=True)

    calculate = commands.add_parser("calculate", help="print balances and suggested transfers")
    calculate.add_argument("path", help="bill JSON file, or - for stdin")

    clamp = commands.add_parser("clamp", help="check a manual settlement against the bill")
    clamp.add_argument("path", help="bill JSON file, or - for stdin")
    clamp.add_argument("from_user")
    clamp.add_argument("to_user")
    clamp.add_argument("amount", type=int, help="requested amount in minor units")
    return parser


def run(argv: Optional[Sequence[str]] = None, settings: Optional[Settings] = None, out: Optional[TextIO] = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = settings or get_settings()
    out = out or sys.stdout
    log = get_logger(__name__)

    try:
        bill = load_bill(_read_payload(args.path))
        result = calculate_bill(bill, tolerance=settings.settlement_tolerance, max_amount=settings.max_amount)
    except BillValidationError as exc:
        for error in exc.errors:
            print(error, file=sys.stderr)
        return EXIT_INVALID_INPUT
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        print(f"cannot read bill: {exc}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    if result.validation_errors:
        print("warning: calculation inconsistency", file=sys.stderr)

    if args.command == "calculate":
        json.dump(dump_result(result), out, ensure_ascii=False, indent=2)
        out.write("\n")
        return 0

    try:
        clamped = clamp_settlement(
            args.from_user,
            args.to_user,
            args.amount,
            result.user_balances,
            factor=settings.minor_units,
            symbol=settings.currency_symbol,
        )
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_INVALID_INPUT
    log.info("cli.clamp", from_user=args.from_user, to_user=args.to_user, amount=clamped.amount)
    json.dump(
        {"amount": clamped.amount, "is_valid": clamped.is_valid, "reason": clamped.reason},
        out,
        ensure_ascii=False,
        indent=2,
    )
    out.write("\n")
    return 0 if clamped.is_valid else 1


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_json)
    sys.exit(run(settings=settings))


if __name__ == "__main__":
    main()
