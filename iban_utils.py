# iban_utils.py
"""Pure IBAN validation and decomposition engine.

Every function here is stateless and never raises on user input: failures
are reported as a :class:`Reason` value.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from iban_layouts import lookup_layout

MIN_IBAN_LENGTH = 15
MAX_IBAN_LENGTH = 34

_NON_ALNUM_RE = re.compile(r"[^A-Za-z0-9]")
_STRUCTURE_RE = re.compile(r"^[A-Z]{2}[0-9A-Z]{2,}$")


class Reason(str, Enum):
    VALID = "valid"
    EMPTY = "empty"
    TOO_SHORT = "too_short"
    TOO_LONG = "too_long"
    BAD_FORMAT = "bad_format"
    CHECKSUM_FAILED = "checksum_failed"


class DecompositionStatus(str, Enum):
    COMPLETE = "complete"
    PARTIAL = "partial"
    INVALID = "invalid"


_REASON_MESSAGES = {
    Reason.VALID: "Valid IBAN",
    Reason.EMPTY: "Please enter an IBAN",
    Reason.TOO_SHORT: "IBAN is too short",
    Reason.TOO_LONG: "IBAN is too long",
    Reason.BAD_FORMAT: "IBAN must start with a country code (2 letters)",
    Reason.CHECKSUM_FAILED: "Invalid IBAN.",
}

_STATUS_MESSAGES = {
    DecompositionStatus.COMPLETE: "Successfully extracted bank account information",
    DecompositionStatus.PARTIAL: "Partial information extracted due to unknown country format",
    DecompositionStatus.INVALID: "Invalid IBAN. Cannot extract account information.",
}


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    reason: Reason
    normalized_iban: str
    country_code: str


@dataclass(frozen=True)
class DecomposedAccount:
    country_code: str
    bank_code: str
    branch_code: str
    account_number: str
    status: DecompositionStatus
    reason: Reason


def normalize(raw: str | None) -> str:
    """Drop everything except ASCII letters and digits, then upper-case."""
    return _NON_ALNUM_RE.sub("", raw or "").upper()


def check_structure(iban: str) -> Reason:
    """
    Check emptiness, length bounds and the two-letter prefix, in that order.

    Expects a normalized IBAN. The first failing rule decides the reason.
    """
    if not iban:
        return Reason.EMPTY
    if len(iban) < MIN_IBAN_LENGTH:
        return Reason.TOO_SHORT
    if len(iban) > MAX_IBAN_LENGTH:
        return Reason.TOO_LONG
    if not _STRUCTURE_RE.match(iban):
        return Reason.BAD_FORMAT
    return Reason.VALID


def iban_to_numeric(iban: str) -> str:
    """
    Convert IBAN letters to numbers (A=10 ... Z=35) for the MOD97 check.
    """
    result = []
    for ch in iban:
        if "A" <= ch <= "Z":
            result.append(str(ord(ch) - 55))  # A -> 10, B -> 11, ...
        else:
            result.append(ch)
    return "".join(result)


def mod97(numeral: str) -> int:
    """
    Compute numeral % 97 one digit at a time, so the numeral may be of any length.
    numeral must be a string of digits.
    """
    remainder = 0
    for ch in numeral:
        remainder = (remainder * 10 + int(ch)) % 97
    return remainder


def verify_checksum(iban: str) -> bool:
    """ISO 7064 MOD 97-10 check of a structurally valid, normalized IBAN."""
    rearranged = iban[4:] + iban[:4]
    return mod97(iban_to_numeric(rearranged)) == 1


def country_of(raw: str | None) -> str:
    """
    First two characters of the trimmed, upper-cased input.

    No validation is done, so this also works on partial input.
    """
    if not raw or len(raw) < 2:
        return ""
    return raw.strip().upper()[:2]


def validate(raw: str | None) -> ValidationResult:
    """Normalize ``raw`` and run the structural and checksum checks."""
    iban = normalize(raw)
    reason = check_structure(iban)
    if reason is Reason.VALID and not verify_checksum(iban):
        reason = Reason.CHECKSUM_FAILED

    return ValidationResult(
        is_valid=reason is Reason.VALID,
        reason=reason,
        normalized_iban=iban,
        country_code=iban[:2],
    )


def is_valid_iban(raw: str | None) -> bool:
    return validate(raw).is_valid


def decompose(raw: str | None) -> DecomposedAccount:
    """
    Split a valid IBAN into bank code, branch code and account number.

    Countries without a registered layout (or with an unexpected length) get
    the generic split: four characters of bank code, the rest as account
    number. Invalid input is never sliced.
    """
    result = validate(raw)
    if not result.is_valid:
        return DecomposedAccount(
            country_code="",
            bank_code="",
            branch_code="",
            account_number="",
            status=DecompositionStatus.INVALID,
            reason=result.reason,
        )

    iban = result.normalized_iban
    layout = lookup_layout(result.country_code)

    if layout is not None and len(iban) == layout.length:
        bank_code = layout.slice(iban, layout.bank_code)
        branch_code = layout.slice(iban, layout.branch_code)
        account_number = layout.slice(iban, layout.account_number)
        status = DecompositionStatus.COMPLETE
    else:
        bank_code = iban[4:8]
        branch_code = ""
        account_number = iban[8:]
        status = DecompositionStatus.PARTIAL

    if not bank_code:
        status = DecompositionStatus.PARTIAL

    return DecomposedAccount(
        country_code=result.country_code,
        bank_code=bank_code,
        branch_code=branch_code,
        account_number=account_number,
        status=status,
        reason=result.reason,
    )


def format_iban(raw: str | None) -> str:
    """Normalize and group in blocks of four, e.g. ``DE89 3704 0044 ...``."""
    iban = normalize(raw)
    return " ".join(iban[i:i + 4] for i in range(0, len(iban), 4))


def validation_message(reason: Reason) -> str:
    return _REASON_MESSAGES[reason]


def decomposition_message(status: DecompositionStatus) -> str:
    return _STATUS_MESSAGES[status]
