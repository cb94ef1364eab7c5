from __future__ import annotations

import pytest

from iban_layouts import BBAN_OFFSET, COUNTRY_LAYOUTS, lookup_layout


def test_required_countries_are_registered() -> None:
    de = lookup_layout("DE")
    assert (de.length, de.bank_code, de.branch_code, de.account_number) == (22, (0, 8), None, (8, 18))

    fr = lookup_layout("FR")
    assert (fr.length, fr.bank_code, fr.branch_code, fr.account_number) == (27, (0, 5), (5, 10), (10, 21))

    gb = lookup_layout("GB")
    assert (gb.length, gb.bank_code, gb.branch_code, gb.account_number) == (22, (0, 4), (4, 10), (10, 18))


def test_lookup_is_case_insensitive_and_missing_is_none() -> None:
    assert lookup_layout("gb") is lookup_layout("GB")
    assert lookup_layout("NO") is None
    assert lookup_layout("") is None


@pytest.mark.parametrize("code", sorted(COUNTRY_LAYOUTS))
def test_spans_fit_inside_the_bban(code: str) -> None:
    layout = COUNTRY_LAYOUTS[code]
    assert layout.country_code == code
    bban_length = layout.length - BBAN_OFFSET

    spans = [span for span in (layout.bank_code, layout.branch_code, layout.account_number) if span]
    for start, end in spans:
        assert 0 <= start < end <= bban_length
    for (_, prev_end), (next_start, _) in zip(spans, spans[1:]):
        assert prev_end <= next_start


def test_slice_uses_bban_relative_offsets() -> None:
    layout = lookup_layout("GB")
    iban = "GB29NWBK60161331926819"
    assert layout.slice(iban, layout.bank_code) == "NWBK"
    assert layout.slice(iban, None) == ""


def test_registry_is_read_only() -> None:
    with pytest.raises(TypeError):
        COUNTRY_LAYOUTS["XX"] = COUNTRY_LAYOUTS["DE"]  # type: ignore[index]
