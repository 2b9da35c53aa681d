from __future__ import annotations

import argparse
import sys

from .calculator import DEFAULT_HOURLY_RATE, calculate
from .validation import validate


def cmd_calculate(args: argparse.Namespace) -> int:
    result = calculate(args.start, args.end, args.lunch, args.rate)
    if result is None:
        print("Nothing to calculate: start and end times are required")
        return 1
    print(f"Total hours: {result.total_hours:.2f}")
    print(f"Lunch discount: {'yes' if result.lunch_discount else 'no'}")
    print(f"Net hours: {result.net_hours:.2f}")
    print(f"Value: R$ {result.total_value:.2f} (rate {result.hourly_rate:.2f}/h)")
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    calculation = calculate(args.start, args.end, args.lunch, args.rate)
    result = validate(
        args.date,
        args.start,
        args.end,
        calculation,
        allow_overnight=not args.same_day_only,
    )
    if not result.ok:
        print(f"{result.error.value}: {result.message}")
        return 1
    print(f"OK {result.value.work_date.isoformat()} {args.start}-{args.end} net={result.calculation.net_hours:.2f}h")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Overtime hours calculator")
    sub = parser.add_subparsers(dest="command", required=True)

    calc = sub.add_parser("calculate", help="Compute total/net hours and value for a shift")
    calc.add_argument("start", help="Start time, HH:MM")
    calc.add_argument("end", help="End time, HH:MM")
    calc.add_argument("--lunch", action="store_true", help="Deduct a one hour lunch break")
    calc.add_argument("--rate", type=float, default=DEFAULT_HOURLY_RATE)
    calc.set_defaults(func=cmd_calculate)

    check = sub.add_parser("validate", help="Validate a shift the way the entry form does")
    check.add_argument("date", help="YYYY-MM-DD")
    check.add_argument("start")
    check.add_argument("end")
    check.add_argument("--lunch", action="store_true")
    check.add_argument("--rate", type=float, default=DEFAULT_HOURLY_RATE)
    check.add_argument("--same-day-only", action="store_true", help="Reject shifts that cross midnight")
    check.set_defaults(func=cmd_validate)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
