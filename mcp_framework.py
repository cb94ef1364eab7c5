"""Helpers for composing the FastMCP server and logging each interaction."""
from __future__ import annotations

import dataclasses
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Iterable

from fastmcp import FastMCP
from pydantic import BaseModel
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("uvicorn.error")


@dataclass
class ServiceDefinition:
    """Describe a service that can register tools on a FastMCP instance."""

    name: str
    description: str
    register: Callable[[FastMCP], None]


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _to_jsonable(dataclasses.asdict(value))
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(key): _to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(item) for item in value]
    return value


def log_interaction(action: str, input_data: Any, output_data: Any) -> None:
    """Emit one JSON line describing an interaction via the uvicorn logger.

    Pydantic models, dataclasses and enums are converted first. Anything else
    that json cannot handle is stringified so logging never breaks a call.
    """

    entry = {
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "action": action,
        "input": _to_jsonable(input_data),
        "output": _to_jsonable(output_data),
    }

    try:
        serialized = json.dumps(entry, ensure_ascii=False)
    except TypeError:
        serialized = json.dumps(entry, ensure_ascii=False, default=str)

    logger.info(serialized)


def create_mcp_server(
    services: Iterable[ServiceDefinition],
    *,
    app_name: str = "iban-engine",
    json_response: bool = True,
):
    """Create a FastMCP instance, register all services and build its HTTP app."""

    mcp = FastMCP(app_name)

    for service in services:
        service.register(mcp)

    app = mcp.http_app(json_response=json_response)
    return mcp, app


def _describe_request(request: Request, body: bytes) -> dict[str, Any]:
    info: dict[str, Any] = {
        "method": request.method,
        "path": request.url.path,
        "query": request.url.query,
        "client": request.client.host if request.client else None,
    }
    if not body:
        return info

    try:
        payload = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as exc:
        info["body_parse_error"] = str(exc)
        return info

    if isinstance(payload, dict):
        info["jsonrpc_method"] = payload.get("method")
        params = payload.get("params")
        if isinstance(params, dict):
            info["param_keys"] = sorted(params.keys())
            if isinstance(params.get("name"), str):
                info["tool"] = params["name"]
    return info


def attach_request_logger(app, *, action: str = "http_request") -> None:
    """Attach middleware that logs every HTTP request and its status code."""

    class RequestLoggerMiddleware(BaseHTTPMiddleware):
        async def dispatch(
            self, request: Request, call_next: RequestResponseEndpoint
        ) -> Response:
            request_info = _describe_request(request, await request.body())

            response: Response | None = None
            error_detail: dict[str, Any] | None = None

            try:
                response = await call_next(request)
                return response
            except Exception as exc:
                error_detail = {"error": str(exc), "type": exc.__class__.__name__}
                raise
            finally:
                output_data: dict[str, Any] = {
                    "status_code": response.status_code if response else None
                }
                if error_detail:
                    output_data.update(error_detail)
                log_interaction(action, request_info, output_data)

    app.add_middleware(RequestLoggerMiddleware)
