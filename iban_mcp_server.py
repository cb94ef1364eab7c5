# iban_mcp_server.py
"""Run the IBAN MCP application over streamable HTTP.

Host, port and log level come from ``IBAN_MCP_HOST``, ``IBAN_MCP_PORT`` and
``IBAN_MCP_LOG_LEVEL``; the endpoint is served at ``/mcp``.
"""
from __future__ import annotations

import os

import uvicorn

from app_mcp import http_app

HOST = os.getenv("IBAN_MCP_HOST", "127.0.0.1")
PORT = int(os.getenv("IBAN_MCP_PORT", "8000"))
LOG_LEVEL = os.getenv("IBAN_MCP_LOG_LEVEL", "info").lower()


def main() -> None:
    uvicorn.run(http_app, host=HOST, port=PORT, log_level=LOG_LEVEL)


if __name__ == "__main__":
    main()
