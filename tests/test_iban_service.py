from __future__ import annotations

import json
import logging

import pytest

from iban_utils import DecompositionStatus, Reason
from services.iban_service import register_iban_service


class RecordingMCP:
    """Collects the functions registered through ``@mcp.tool()``."""

    def __init__(self) -> None:
        self.tools = {}

    def tool(self):
        def decorator(fn):
            self.tools[fn.__name__] = fn
            return fn

        return decorator


@pytest.fixture
def tools():
    mcp = RecordingMCP()
    register_iban_service(mcp)
    return mcp.tools


def test_registers_all_tools(tools) -> None:
    assert set(tools) == {"iban_check", "iban_decompose", "iban_format"}


def test_iban_check_valid(tools) -> None:
    result = tools["iban_check"]("de89 3704 0044 0532 0130 00")
    assert result.valid is True
    assert result.normalized_iban == "DE89370400440532013000"
    assert result.country == "DE"
    assert result.reason is Reason.VALID
    assert result.message == "Valid IBAN"


def test_iban_check_empty(tools) -> None:
    result = tools["iban_check"]("")
    assert result.valid is False
    assert result.country is None
    assert result.reason is Reason.EMPTY
    assert result.model_dump(mode="json")["reason"] == "empty"


def test_iban_decompose(tools) -> None:
    result = tools["iban_decompose"]("FR1420041010050500013M02606")
    assert result.valid is True
    assert result.status is DecompositionStatus.COMPLETE
    assert (result.bank_code, result.branch_code, result.account_number) == ("20041", "01005", "0500013M026")
    assert result.message == "Successfully extracted bank account information"


def test_iban_decompose_invalid(tools) -> None:
    result = tools["iban_decompose"]("GB28NWBK60161331926819")
    assert result.valid is False
    assert result.status is DecompositionStatus.INVALID
    assert result.reason is Reason.CHECKSUM_FAILED
    assert result.bank_code == ""


def test_iban_format(tools) -> None:
    result = tools["iban_format"]("gb29nwbk60161331926819")
    assert result.formatted_iban == "GB29 NWBK 6016 1331 9268 19"
    assert result.normalized_iban == "GB29NWBK60161331926819"
    assert result.country == "GB"


def test_tool_calls_are_logged(tools, caplog) -> None:
    caplog.set_level(logging.INFO, logger="uvicorn.error")
    tools["iban_check"]("NO9386011117947")

    entries = [json.loads(r.getMessage()) for r in caplog.records if r.name == "uvicorn.error"]
    assert entries[-1]["action"] == "iban_check"
    assert entries[-1]["input"] == {"iban": "NO9386011117947"}
    assert entries[-1]["output"]["valid"] is True


def test_tool_errors_are_logged_and_reraised(tools, caplog, monkeypatch) -> None:
    import services.iban_service as iban_service

    def boom(_iban):
        raise RuntimeError("engine down")

    monkeypatch.setattr(iban_service, "validate", boom)
    caplog.set_level(logging.INFO, logger="uvicorn.error")

    with pytest.raises(RuntimeError):
        tools["iban_check"]("DE89370400440532013000")

    entries = [json.loads(r.getMessage()) for r in caplog.records if r.name == "uvicorn.error"]
    assert entries[-1]["action"] == "iban_check_error"
    assert entries[-1]["output"] == {"error": "engine down", "type": "RuntimeError"}
