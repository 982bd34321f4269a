"""
Basic usage example of fastapi-request-chain.

Demonstrates:
- Writing middleware and a terminal controller
- Mounting a chain as a FastAPI endpoint
- The generic error response produced when a stage raises
"""

import json

from fastapi import FastAPI

from fastapi_request_chain import (
    Advance,
    Controller,
    Middleware,
    RequestContext,
    chain_endpoint,
    middleware,
)

app = FastAPI(title="Basic Chain Example")


@middleware
def request_id(ctx: RequestContext, next: Advance) -> None:
    ctx.response.set_header("X-Request-Id", ctx.request.headers.get("x-request-id", "local"))
    next.advance()


class AuthMiddleware(Middleware):
    """Rejects requests without a bearer token."""

    def invoke(self, ctx: RequestContext, next: Advance) -> None:
        header = ctx.request.headers.get("authorization", "")
        if not header.startswith("Bearer "):
            # Surfaces to the client as a generic 500 error response
            raise PermissionError("missing credentials")
        ctx.state["token"] = header.removeprefix("Bearer ")
        next.advance()


class MeController(Controller):
    def invoke(self, ctx: RequestContext) -> None:
        ctx.response.set_content_type("application/json")
        ctx.response.write(json.dumps({"token": ctx.state["token"]}))


app.add_api_route("/me", chain_endpoint([request_id, AuthMiddleware()], MeController()))


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)

    # Test with:
    # curl -i http://localhost:8000/me
    # curl -i -H "Authorization: Bearer abc" http://localhost:8000/me
