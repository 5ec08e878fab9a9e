"""Command line front end for longarith.

Usage:
    longarith calc 10.5 + 20.25
    longarith calc -- -7.0 % 2.0
    longarith calc 3.5 "<<" 1 --digits 4
    longarith pi 50
    longarith repl

Configuration via environment variables (see longarith.config):
- LONGARITH_FRACTIONAL_BITS: precision of parsed operands (default: 32)
- LONGARITH_PI_PRECISION_BITS: working precision of the pi series (default: 256)
- LONGARITH_PI_DIGITS: digits printed by `pi` without an argument (default: 86)
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import TextIO

import structlog

from longarith import __version__
from longarith.calculator import evaluate, parse_expression
from longarith.config import ArithmeticConfig
from longarith.errors import FixedPointError
from longarith.models import CalculationRequest, Operator
from longarith.pi import pi_digits

logger = structlog.get_logger()

REPL_HELP = """Enter an expression as: LHS OP [RHS]
Operators:
  +   : addition
  -   : subtraction
  *   : multiplication
  /   : division
  %   : division with remainder
  <<  : shift left (RHS is a bit count)
  >>  : shift right (RHS is a bit count)
  ^   : XOR
  cmp : comparison
  bin : binary dump (no RHS)
  q   : quit
"""


def configure_logging(verbose: bool) -> None:
    """Route structlog output to the console at INFO (or DEBUG when verbose)."""
    log_level = logging.DEBUG if verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )


def build_parser(config: ArithmeticConfig) -> argparse.ArgumentParser:
    """Build the argument parser with calc, pi and repl subcommands."""
    parser = argparse.ArgumentParser(
        prog="longarith",
        description="Arbitrary-precision binary fixed-point calculator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    calc = subparsers.add_parser("calc", help="Evaluate LHS OP [RHS] once")
    calc.add_argument("lhs", help="Left operand, e.g. 10.5")
    calc.add_argument("operator", choices=[op.value for op in Operator], help="Operator token")
    calc.add_argument("rhs", nargs="?", help="Right operand, or bit count for << and >>")
    calc.add_argument(
        "--bits",
        type=int,
        default=config.fractional_bits,
        help=f"Fractional bits of each operand (default: {config.fractional_bits})",
    )
    calc.add_argument("--digits", type=int, default=None, help="Round output to N decimals")

    pi = subparsers.add_parser("pi", help="Print pi using the BBP series")
    pi.add_argument(
        "digits",
        type=int,
        nargs="?",
        default=config.pi_digits,
        help=f"Number of decimals (default: {config.pi_digits})",
    )
    pi.add_argument(
        "--precision",
        type=int,
        default=config.pi_precision_bits,
        help=f"Working precision in bits (default: {config.pi_precision_bits})",
    )

    repl = subparsers.add_parser("repl", help="Interactive calculator")
    repl.add_argument(
        "--bits",
        type=int,
        default=config.fractional_bits,
        help=f"Fractional bits of each operand (default: {config.fractional_bits})",
    )
    repl.add_argument("--digits", type=int, default=None, help="Round output to N decimals")
    return parser


def run_calc(args: argparse.Namespace, out: TextIO) -> int:
    """Evaluate one expression from the command line."""
    data: dict[str, object] = {
        "lhs": args.lhs,
        "operator": args.operator,
        "fractional_bits": args.bits,
        "max_digits": args.digits,
    }
    if args.rhs is not None:
        data["shift" if Operator(args.operator).is_shift else "rhs"] = args.rhs
    try:
        request = CalculationRequest.model_validate(data)
        lines = evaluate(request)
    except (FixedPointError, ValueError) as err:
        print(f"Error: {err}", file=out)
        return 1
    for line in lines:
        print(line, file=out)
    return 0


def run_pi(args: argparse.Namespace, out: TextIO) -> int:
    """Print pi and the time it took."""
    start = time.perf_counter()
    try:
        text = pi_digits(args.digits, args.precision)
    except ValueError as err:
        print(f"Error: {err}", file=out)
        return 1
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.debug("pi_computed", digits=args.digits, precision_bits=args.precision)
    print(text, file=out)
    print(f"Total time (in ms) {elapsed_ms:.0f}", file=out)
    return 0


def run_repl(
    fractional_bits: int, max_digits: int | None, stdin: TextIO, out: TextIO
) -> int:
    """Read expressions until 'q' or end of input, printing each result."""
    print("=== longarith interactive mode ===", file=out)
    print(REPL_HELP, file=out)
    while True:
        print("> ", end="", file=out, flush=True)
        line = stdin.readline()
        if not line:
            break
        line = line.strip()
        if line == "q":
            break
        if not line:
            continue
        if line in ("help", "?"):
            print(REPL_HELP, file=out)
            continue
        try:
            request = parse_expression(line, fractional_bits, max_digits)
            lines = evaluate(request)
        except (FixedPointError, ValueError) as err:
            print(f"Error: {err}", file=out)
            continue
        for result_line in lines:
            print(result_line, file=out)
    print("Done.", file=out)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the `longarith` console script."""
    config = ArithmeticConfig.from_env()
    args = build_parser(config).parse_args(argv)
    configure_logging(args.verbose)

    if args.command == "calc":
        return run_calc(args, sys.stdout)
    if args.command == "pi":
        return run_pi(args, sys.stdout)
    return run_repl(args.bits, args.digits, sys.stdin, sys.stdout)


if __name__ == "__main__":
    sys.exit(main())
