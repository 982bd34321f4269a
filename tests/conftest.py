"""Shared pytest fixtures for fastapi-request-chain tests."""

from __future__ import annotations

from typing import Any

import pytest
from starlette.requests import Request

from fastapi_request_chain.context import RequestContext


@pytest.fixture
def make_request() -> Any:
    """Factory for creating mock Starlette Request objects."""

    def _make(
        method: str = "GET",
        path: str = "/",
        headers: dict[str, str] | None = None,
        query_string: str = "",
    ) -> Request:
        scope: dict[str, Any] = {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": query_string.encode(),
            "headers": [
                (k.lower().encode(), v.encode()) for k, v in (headers or {}).items()
            ],
            "root_path": "",
        }
        return Request(scope)

    return _make


@pytest.fixture
def make_ctx(make_request: Any) -> Any:
    """Factory for creating RequestContext objects around mock requests."""

    def _make(**request_kwargs: Any) -> RequestContext:
        return RequestContext(request=make_request(**request_kwargs))

    return _make
