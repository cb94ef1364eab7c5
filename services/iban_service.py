"""IBAN validation and decomposition tools for MCP."""
from __future__ import annotations

from typing import Any, Callable

from fastmcp import FastMCP
from pydantic import BaseModel

from iban_utils import (
    DecompositionStatus,
    Reason,
    country_of,
    decompose,
    decomposition_message,
    format_iban,
    normalize,
    validate,
    validation_message,
)
from mcp_framework import log_interaction


class IbanResult(BaseModel):
    valid: bool
    normalized_iban: str
    country: str | None = None
    reason: Reason
    message: str


class BankAccountInfo(BaseModel):
    valid: bool
    country_code: str
    bank_code: str
    branch_code: str
    account_number: str
    status: DecompositionStatus
    reason: Reason
    message: str


class FormattedIban(BaseModel):
    normalized_iban: str
    formatted_iban: str
    country: str


def _logged(action: str, iban: str, build: Callable[[], BaseModel]) -> Any:
    try:
        result = build()
    except Exception as exc:
        log_interaction(
            f"{action}_error",
            {"iban": iban},
            {"error": str(exc), "type": exc.__class__.__name__},
        )
        raise

    log_interaction(action, {"iban": iban}, result)
    return result


def check_iban(iban: str) -> IbanResult:
    outcome = validate(iban)
    return IbanResult(
        valid=outcome.is_valid,
        normalized_iban=outcome.normalized_iban,
        country=outcome.country_code or None,
        reason=outcome.reason,
        message=validation_message(outcome.reason),
    )


def decompose_iban(iban: str) -> BankAccountInfo:
    account = decompose(iban)
    return BankAccountInfo(
        valid=account.status is not DecompositionStatus.INVALID,
        country_code=account.country_code,
        bank_code=account.bank_code,
        branch_code=account.branch_code,
        account_number=account.account_number,
        status=account.status,
        reason=account.reason,
        message=decomposition_message(account.status),
    )


def describe_iban_format(iban: str) -> FormattedIban:
    return FormattedIban(
        normalized_iban=normalize(iban),
        formatted_iban=format_iban(iban),
        country=country_of(iban),
    )


def register_iban_service(mcp: FastMCP) -> None:
    """Register IBAN tools on the provided MCP instance."""

    @mcp.tool()
    def iban_check(iban: str) -> IbanResult:
        """
        Validate an IBAN and return a structured result.

        Args:
            iban: IBAN string (may contain spaces, dashes, lower/upper case)

        Returns:
            IbanResult: {valid, normalized_iban, country, reason, message}
        """
        return _logged("iban_check", iban, lambda: check_iban(iban))

    @mcp.tool()
    def iban_decompose(iban: str) -> BankAccountInfo:
        """
        Validate an IBAN and split it into bank code, branch code and account number.

        Countries without a known layout get a generic split and status "partial".
        """
        return _logged("iban_decompose", iban, lambda: decompose_iban(iban))

    @mcp.tool()
    def iban_format(iban: str) -> FormattedIban:
        """Return the IBAN normalized and grouped in blocks of four, without validating it."""
        return _logged("iban_format", iban, lambda: describe_iban_format(iban))
