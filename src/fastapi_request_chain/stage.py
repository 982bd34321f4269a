"""Stage variants — Middleware (continuing) and Controller (terminal)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import ClassVar, Protocol, runtime_checkable

from fastapi_request_chain._types import ControllerFunc, MiddlewareFunc
from fastapi_request_chain.context import RequestContext


class StageKind(Enum):
    """Which entry point a stage exposes."""

    CONTINUING = "continuing"
    TERMINAL = "terminal"


@runtime_checkable
class Advance(Protocol):
    """Handle given to a continuing stage to run the rest of the chain."""

    def advance(self) -> None: ...
    def __call__(self) -> None: ...


class Stage(ABC):
    """Base abstraction for every node in a chain."""

    kind: ClassVar[StageKind]

    @property
    def name(self) -> str:
        return type(self).__name__


class Middleware(Stage):
    """Continuing stage. Calls ``next.advance()`` to pass control on.

    Returning without advancing ends the chain; nothing after this stage runs.
    """

    kind = StageKind.CONTINUING

    @abstractmethod
    def invoke(self, ctx: RequestContext, next: Advance) -> None: ...


class Controller(Stage):
    """Terminal stage. Never receives an advance handle."""

    kind = StageKind.TERMINAL

    @abstractmethod
    def invoke(self, ctx: RequestContext) -> None: ...


class _FunctionMiddleware(Middleware):
    def __init__(self, func: MiddlewareFunc) -> None:
        self._func = func

    @property
    def name(self) -> str:
        return getattr(self._func, "__name__", type(self).__name__)

    def invoke(self, ctx: RequestContext, next: Advance) -> None:
        self._func(ctx, next)


class _FunctionController(Controller):
    def __init__(self, func: ControllerFunc) -> None:
        self._func = func

    @property
    def name(self) -> str:
        return getattr(self._func, "__name__", type(self).__name__)

    def invoke(self, ctx: RequestContext) -> None:
        self._func(ctx)


def middleware(func: MiddlewareFunc) -> Middleware:
    """Wrap ``func(ctx, next)`` as a continuing stage. Usable as a decorator."""
    return _FunctionMiddleware(func)


def controller(func: ControllerFunc) -> Controller:
    """Wrap ``func(ctx)`` as a terminal stage. Usable as a decorator."""
    return _FunctionController(func)
