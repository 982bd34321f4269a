"""Chain — ordered stage sequence and its synchronous dispatch engine."""

from __future__ import annotations

import time
from collections.abc import Sequence
from typing import Literal, cast

import structlog

from fastapi_request_chain.context import RequestContext
from fastapi_request_chain.exceptions import ChainAlreadyStarted, ResponseClosed
from fastapi_request_chain.interceptor import ErrorInterceptor
from fastapi_request_chain.stage import Controller, Middleware, Stage, StageKind
from fastapi_request_chain.trace import ChainTrace, TraceEntry

logger = structlog.get_logger(__name__)

_HEAD = -1

DispatchMode = Literal["CONTINUING", "TERMINAL", "SKIPPED"]


class _Cursor:
    """Advance handle bound to one position in a chain. Single-use."""

    __slots__ = ("_chain", "_position", "_used")

    def __init__(self, chain: Chain, position: int) -> None:
        self._chain = chain
        self._position = position
        self._used = False

    def advance(self) -> None:
        if self._used:
            logger.warning("advance_ignored", position=self._position)
            return
        self._used = True
        self._chain._dispatch(self._position)

    __call__ = advance


class Chain:
    """Per-request chain of stages.

    Build one per inbound request and start it with ``attach`` (or ``use``).
    Stages run synchronously in attachment order. Each node that has a
    successor is dispatched in continuing mode and receives an advance
    handle; the last node is dispatched in terminal mode. Any exception a
    stage raises is caught by the dispatch step that invoked it and handed to
    the interceptor; nothing propagates back to the caller.
    """

    def __init__(
        self,
        ctx: RequestContext,
        *,
        interceptor: ErrorInterceptor | None = None,
        debug: bool = False,
    ) -> None:
        self._ctx = ctx
        self._interceptor = interceptor or ErrorInterceptor()
        self._debug = debug
        self._nodes: tuple[Stage, ...] = ()
        self._head = _Cursor(self, _HEAD)
        self._started = False
        self._intercepted = False
        self._trace: ChainTrace | None = None

    @property
    def nodes(self) -> tuple[Stage, ...]:
        return self._nodes

    @property
    def trace(self) -> ChainTrace | None:
        return self._trace

    def attach(self, stages: Sequence[Stage], terminal: Stage) -> None:
        """Link ``stages`` followed by ``terminal`` and dispatch immediately."""
        if not stages:
            logger.warning("chain_empty", terminal=terminal.name)
            return
        self._start((*stages, terminal))

    def use(self, *stages: Stage) -> None:
        """Variadic form of ``attach``: the last argument is the terminal node."""
        if not stages:
            logger.warning("chain_empty", terminal=None)
            return
        self._start(stages)

    def advance(self) -> None:
        if not self._started:
            logger.debug("chain_exhausted", position=_HEAD)
            return
        self._head.advance()

    def _start(self, nodes: Sequence[Stage]) -> None:
        if self._started:
            raise ChainAlreadyStarted()
        self._started = True
        self._nodes = tuple(nodes)
        if self._debug:
            self._trace = ChainTrace()
            self._ctx.state["trace"] = self._trace
        self.advance()

    def _dispatch(self, position: int) -> None:
        index = position + 1
        if index >= len(self._nodes):
            logger.debug("chain_exhausted", position=position)
            return

        stage = self._nodes[index]
        mode: DispatchMode = "SKIPPED"
        started = time.perf_counter()
        try:
            mode = _dispatch_mode(stage, has_successor=index + 1 < len(self._nodes))
            if mode == "CONTINUING":
                cast(Middleware, stage).invoke(self._ctx, _Cursor(self, index))
            elif mode == "TERMINAL":
                cast(Controller, stage).invoke(self._ctx)
            else:
                logger.debug("stage_skipped", stage=stage.name, position=index)
        except Exception as exc:
            self._record(stage, mode, started, exc)
            if self._intercepted and isinstance(exc, ResponseClosed):
                # Post-processing after an already reported failure
                logger.debug("write_after_error", stage=stage.name, position=index)
                return
            self._intercepted = True
            self._interceptor.intercept(exc, self._ctx.response)
        else:
            self._record(stage, mode, started, None)

    def _record(
        self,
        stage: Stage,
        mode: DispatchMode,
        started: float,
        exc: Exception | None,
    ) -> None:
        if self._trace is None:
            return
        elapsed = (time.perf_counter() - started) * 1000
        self._trace.entries.append(
            TraceEntry(
                stage_name=stage.name,
                mode=mode,
                duration_ms=elapsed,
                outcome="OK" if exc is None else "FAILED",
                reason=None if exc is None else _describe(exc),
            )
        )
        if exc is not None:
            self._trace.outcome = "ERROR"
            if self._trace.error is None:
                self._trace.error = exc


def _dispatch_mode(stage: Stage, *, has_successor: bool) -> DispatchMode:
    """Pick the entry point for ``stage`` given its position.

    A controller always runs its own ``invoke(ctx)`` and never advances. A
    middleware in last position has no terminal entry point and is skipped.
    """
    if stage.kind is StageKind.TERMINAL:
        return "TERMINAL"
    if has_successor:
        return "CONTINUING"
    return "SKIPPED"


def _describe(exc: Exception) -> str:
    try:
        return str(exc)
    except Exception:
        return f"<unprintable {type(exc).__name__}>"
