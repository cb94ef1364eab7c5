"""Reusable MCP services."""

from .iban_service import register_iban_service

__all__ = ["register_iban_service"]
