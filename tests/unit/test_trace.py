"""Tests for ChainTrace, TraceEntry, and debug integration."""

from __future__ import annotations

from typing import Any

import pytest
from structlog.testing import capture_logs

from fastapi_request_chain.chain import Chain
from fastapi_request_chain.context import RequestContext
from fastapi_request_chain.stage import Advance, Controller, Middleware
from fastapi_request_chain.trace import ChainTrace, TraceEntry


class _Pass(Middleware):
    def invoke(self, ctx: RequestContext, next: Advance) -> None:
        next.advance()


class _Final(Controller):
    def invoke(self, ctx: RequestContext) -> None:
        ctx.response.write("ok")


class _Broken(Controller):
    def invoke(self, ctx: RequestContext) -> None:
        raise RuntimeError("boom")


class TestTraceEntry:
    def test_construction(self) -> None:
        entry = TraceEntry(
            stage_name="Auth",
            mode="CONTINUING",
            duration_ms=1.5,
            outcome="OK",
        )
        assert entry.stage_name == "Auth"
        assert entry.mode == "CONTINUING"
        assert entry.duration_ms == 1.5
        assert entry.outcome == "OK"
        assert entry.reason is None

    def test_frozen(self) -> None:
        entry = TraceEntry(
            stage_name="Auth", mode="TERMINAL", duration_ms=0.0, outcome="OK"
        )
        with pytest.raises(AttributeError):
            entry.stage_name = "other"  # type: ignore[misc]


class TestChainTrace:
    def test_defaults(self) -> None:
        trace = ChainTrace()
        assert trace.entries == []
        assert trace.outcome == "OK"
        assert trace.error is None


class TestDebugDispatch:
    def test_trace_not_recorded_without_debug(self, make_ctx: Any) -> None:
        ctx = make_ctx()
        chain = Chain(ctx)
        chain.attach([_Pass()], _Final())
        assert chain.trace is None
        assert "trace" not in ctx.state

    def test_successful_dispatch_is_traced(self, make_ctx: Any) -> None:
        ctx = make_ctx()
        chain = Chain(ctx, debug=True)
        chain.attach([_Pass(), _Pass()], _Final())
        trace = ctx.state["trace"]
        assert trace is chain.trace
        assert trace.outcome == "OK"
        # innermost stage returns first
        assert [(e.stage_name, e.mode) for e in trace.entries] == [
            ("_Final", "TERMINAL"),
            ("_Pass", "CONTINUING"),
            ("_Pass", "CONTINUING"),
        ]
        assert all(e.outcome == "OK" for e in trace.entries)
        assert all(e.duration_ms >= 0 for e in trace.entries)

    def test_failure_is_traced(self, make_ctx: Any) -> None:
        ctx = make_ctx()
        chain = Chain(ctx, debug=True)
        chain.attach([_Pass()], _Broken())
        trace = ctx.state["trace"]
        assert trace.outcome == "ERROR"
        assert isinstance(trace.error, RuntimeError)
        failed = trace.entries[0]
        assert failed.stage_name == "_Broken"
        assert failed.outcome == "FAILED"
        assert failed.reason == "boom"
        assert trace.entries[1].outcome == "OK"

    def test_unprintable_failure_does_not_escape(self, make_ctx: Any) -> None:
        class Unprintable(Exception):
            def __str__(self) -> str:
                raise RuntimeError("no str")

        class BrokenFirst(Controller):
            def invoke(self, ctx: RequestContext) -> None:
                raise Unprintable()

        ctx = make_ctx()
        with capture_logs():
            Chain(ctx, debug=True).use(BrokenFirst())
        entry = ctx.state["trace"].entries[0]
        assert entry.outcome == "FAILED"
        assert entry.reason == "<unprintable Unprintable>"
        assert ctx.response.status_code == 500

    def test_trace_keeps_first_error(self, make_ctx: Any) -> None:
        class Footer(Middleware):
            def invoke(self, ctx: RequestContext, next: Advance) -> None:
                next.advance()
                ctx.response.write("footer")

        ctx = make_ctx()
        Chain(ctx, debug=True).attach([Footer()], _Broken())
        trace = ctx.state["trace"]
        assert isinstance(trace.error, RuntimeError)
        assert [e.outcome for e in trace.entries] == ["FAILED", "FAILED"]

    def test_skipped_middleware_is_traced(self, make_ctx: Any) -> None:
        ctx = make_ctx()
        chain = Chain(ctx, debug=True)
        chain.attach([_Pass()], _Pass())
        assert ctx.state["trace"].entries[0].mode == "SKIPPED"
