"""Command-line IBAN check.

Reads one IBAN from the first argument (or stdin when it is missing or
``-``), prints the validation outcome and, for valid IBANs, the bank account
fields. Exit codes: 0 valid, 1 invalid, 2 missing or empty input.
"""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Optional, Sequence, TextIO

from iban_utils import Reason, decompose, decomposition_message, format_iban, normalize, validate, validation_message
from mcp_framework import log_interaction

EXIT_VALID = 0
EXIT_INVALID = 1
EXIT_NO_INPUT = 2

LOG_LEVEL = os.getenv("IBAN_LOG_LEVEL", "WARNING").upper()


def _log_level(name: str) -> int:
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="iban-check", description="Validate an IBAN and show its bank account fields.")
    parser.add_argument("iban", nargs="?", default="-", help="IBAN to check; '-' or omitted reads it from stdin")
    parser.add_argument("--json", action="store_true", help="print the result as one JSON object")
    return parser


def _read_input(value: str, stdin: TextIO) -> str:
    if value != "-":
        return value
    if stdin.isatty():
        return ""
    return stdin.readline().strip()


def _report(raw: str) -> tuple[dict, int]:
    result = validate(raw)
    report: dict = {
        "iban": format_iban(raw),
        "valid": result.is_valid,
        "reason": result.reason.value,
        "message": validation_message(result.reason),
    }
    if result.is_valid:
        account = decompose(raw)
        report.update(
            country_code=account.country_code,
            bank_code=account.bank_code,
            branch_code=account.branch_code,
            account_number=account.account_number,
            status=account.status.value,
            detail=decomposition_message(account.status),
        )
    return report, EXIT_VALID if result.is_valid else EXIT_INVALID


def _print_text(report: dict, out: TextIO) -> None:
    print(f"{report['reason']}: {report['message']}", file=out)
    if not report["valid"]:
        return
    print(f"IBAN:           {report['iban']}", file=out)
    print(f"Country code:   {report['country_code']}", file=out)
    print(f"Bank code:      {report['bank_code'] or 'Not available'}", file=out)
    if report["branch_code"]:
        print(f"Branch code:    {report['branch_code']}", file=out)
    print(f"Account number: {report['account_number'] or 'Not available'}", file=out)
    print(f"Status:         {report['status']} ({report['detail']})", file=out)


def main(argv: Optional[Sequence[str]] = None, *, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> int:
    logging.basicConfig(level=_log_level(LOG_LEVEL), format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    args = _build_parser().parse_args(argv)
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    raw = _read_input(args.iban, stdin)
    if not normalize(raw):
        log_interaction("cli_check", {"iban": raw}, {"exit_code": EXIT_NO_INPUT})
        print(f"{Reason.EMPTY.value}: {validation_message(Reason.EMPTY)}", file=sys.stderr)
        return EXIT_NO_INPUT

    report, exit_code = _report(raw)
    log_interaction("cli_check", {"iban": raw}, {**report, "exit_code": exit_code})

    if args.json:
        print(json.dumps(report, ensure_ascii=False), file=stdout)
    else:
        _print_text(report, stdout)
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
