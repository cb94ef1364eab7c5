"""MCP application hosting the IBAN engine tools."""
from __future__ import annotations

import os

from mcp_framework import ServiceDefinition, attach_request_logger, create_mcp_server, log_interaction
from services import register_iban_service

APP_NAME = os.getenv("IBAN_MCP_APP_NAME", "iban-engine")

services = [
    ServiceDefinition(
        name="iban",
        description="Validate IBAN strings, format them and split them into bank account fields.",
        register=register_iban_service,
    ),
]

mcp, http_app = create_mcp_server(services, app_name=APP_NAME, json_response=True)
attach_request_logger(http_app)

log_interaction("startup", {"services": [service.name for service in services]}, {"app": APP_NAME})
