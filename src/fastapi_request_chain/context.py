"""RequestContext — per-request state threaded through every stage."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from starlette.requests import Request

from fastapi_request_chain.response import ResponseSink


@dataclass
class RequestContext:
    """Inbound request, its pre-read body, and the response sink stages write to."""

    request: Request
    body: bytes = b""
    response: ResponseSink = field(default_factory=ResponseSink)
    state: dict[str, Any] = field(default_factory=dict)
