"""Shared type aliases and protocols."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fastapi_request_chain.context import RequestContext
    from fastapi_request_chain.stage import Advance

# Plain callables wrapped by the middleware() and controller() adapters
MiddlewareFunc = Callable[["RequestContext", "Advance"], None]
ControllerFunc = Callable[["RequestContext"], None]
