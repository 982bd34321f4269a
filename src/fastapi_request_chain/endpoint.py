"""chain_endpoint() — factory producing Starlette/FastAPI endpoints that run a chain."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence

from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import Response

from fastapi_request_chain.chain import Chain
from fastapi_request_chain.context import RequestContext
from fastapi_request_chain.interceptor import ErrorInterceptor
from fastapi_request_chain.stage import Stage


def chain_endpoint(
    stages: Sequence[Stage],
    terminal: Stage,
    *,
    interceptor: ErrorInterceptor | None = None,
    debug: bool = False,
) -> Callable[[Request], Awaitable[Response]]:
    """Return an endpoint that dispatches a fresh chain for every request.

    The request body is read up front because stages are synchronous. The
    chain itself runs in the thread pool so a slow stage does not block the
    event loop.
    """
    stages = tuple(stages)
    interceptor = interceptor or ErrorInterceptor()

    async def endpoint(request: Request) -> Response:
        ctx = RequestContext(request=request, body=await request.body())
        chain = Chain(ctx, interceptor=interceptor, debug=debug)
        await run_in_threadpool(chain.attach, stages, terminal)
        ctx.response.close()
        return ctx.response.to_response()

    return endpoint
