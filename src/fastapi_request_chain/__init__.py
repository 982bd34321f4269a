"""FastAPI Request Chain - synchronous middleware chains with a terminal controller."""

from fastapi_request_chain.chain import Chain
from fastapi_request_chain.context import RequestContext
from fastapi_request_chain.endpoint import chain_endpoint
from fastapi_request_chain.exceptions import (
    ChainAlreadyStarted,
    ChainException,
    ResponseClosed,
)
from fastapi_request_chain.interceptor import DEFAULT_ERROR_BODY, ErrorInterceptor
from fastapi_request_chain.response import ResponseSink
from fastapi_request_chain.stage import (
    Advance,
    Controller,
    Middleware,
    Stage,
    StageKind,
    controller,
    middleware,
)
from fastapi_request_chain.trace import ChainTrace, TraceEntry

__all__ = [
    "DEFAULT_ERROR_BODY",
    "Advance",
    "Chain",
    "ChainAlreadyStarted",
    "ChainException",
    "ChainTrace",
    "Controller",
    "ErrorInterceptor",
    "Middleware",
    "RequestContext",
    "ResponseClosed",
    "ResponseSink",
    "Stage",
    "StageKind",
    "TraceEntry",
    "chain_endpoint",
    "controller",
    "middleware",
]
