#!/usr/bin/env python3
"""
Consent Intake — RUT Checker
=============================

Checks company RUTs the same way the consent endpoint does.

Usage:
    python main.py 76.543.210-3                 # One RUT
    python main.py 12.345.678-5 76543210-K      # Several; exit 1 if any is invalid
"""

from __future__ import annotations

import argparse
import sys

from consent_intake import rut

# ─── ANSI Color Constants ───────────────────────────────────────────

_RED = "\033[91m"
_GREEN = "\033[92m"
_CYAN = "\033[96m"
_DIM = "\033[2m"
_BOLD = "\033[1m"
_RESET = "\033[0m"
_WIDTH = 60


# ─── Pretty Printer ─────────────────────────────────────────────────


def print_result(raw: str) -> bool:
    """Print one RUT's breakdown. Returns whether it is valid."""
    normalized = rut.normalize(raw)
    body, supplied = rut.split(raw)
    valid = rut.is_valid(raw)

    print(f"  Input:       {raw}")
    print(f"  Normalized:  {normalized or _DIM + '(empty)' + _RESET}")
    if body.isascii() and body.isdigit():
        print(f"  Check char:  supplied {_BOLD}{supplied}{_RESET}, expected {_BOLD}{rut.compute_check_char(body)}{_RESET}")
    if valid:
        print(f"  {_GREEN}{_BOLD}VALID{_RESET}")
    else:
        print(f"  {_RED}{_BOLD}INVALID{_RESET}")
    print(f"{'─' * _WIDTH}")
    return valid


# ─── Main ────────────────────────────────────────────────────────────


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Validate Chilean RUT check digits.")
    parser.add_argument("ruts", nargs="+", metavar="RUT", help="RUT, e.g. 76.543.210-3")
    args = parser.parse_args(argv)

    print(f"\n{'=' * _WIDTH}")
    print(f"{_BOLD}{_CYAN}  RUT CHECK{_RESET}")
    print(f"{'=' * _WIDTH}")

    results = [print_result(raw) for raw in args.ruts]
    return 0 if all(results) else 1


if __name__ == "__main__":
    sys.exit(main())
