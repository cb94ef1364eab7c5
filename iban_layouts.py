"""Country-specific BBAN layouts used to split a valid IBAN into its fields."""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

Span = tuple[int, int]

# Country code + two check digits precede the BBAN.
BBAN_OFFSET = 4


@dataclass(frozen=True)
class CountryLayout:
    """Field layout of one country's IBAN.

    Spans are half-open ``(start, end)`` offsets into the BBAN, i.e. relative
    to the first character after the four-character prefix. ``length`` is the
    total IBAN length including the prefix.
    """

    country_code: str
    length: int
    bank_code: Span
    account_number: Span
    branch_code: Optional[Span] = None

    def slice(self, iban: str, span: Optional[Span]) -> str:
        if span is None:
            return ""
        start, end = span
        return iban[BBAN_OFFSET + start:BBAN_OFFSET + end]


# Only the fields the engine extracts are listed; national check digits
# (FR, BE, ES, IT) are left out of every span.
_LAYOUTS = (
    CountryLayout("AT", 20, bank_code=(0, 5), account_number=(5, 16)),
    CountryLayout("BE", 16, bank_code=(0, 3), account_number=(3, 10)),
    CountryLayout("CH", 21, bank_code=(0, 5), account_number=(5, 17)),
    CountryLayout("DE", 22, bank_code=(0, 8), account_number=(8, 18)),
    CountryLayout("ES", 24, bank_code=(0, 4), branch_code=(4, 8), account_number=(10, 20)),
    CountryLayout("FR", 27, bank_code=(0, 5), branch_code=(5, 10), account_number=(10, 21)),
    CountryLayout("GB", 22, bank_code=(0, 4), branch_code=(4, 10), account_number=(10, 18)),
    CountryLayout("IT", 27, bank_code=(1, 6), branch_code=(6, 11), account_number=(11, 23)),
    CountryLayout("NL", 18, bank_code=(0, 4), account_number=(4, 14)),
)

COUNTRY_LAYOUTS: Mapping[str, CountryLayout] = MappingProxyType(
    {layout.country_code: layout for layout in _LAYOUTS}
)


def lookup_layout(country_code: str) -> CountryLayout | None:
    """Return the layout registered for ``country_code`` or ``None``."""
    return COUNTRY_LAYOUTS.get((country_code or "").upper())
