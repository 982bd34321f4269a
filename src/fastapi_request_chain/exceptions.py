"""ChainException hierarchy for chain misuse and response sink errors."""

from __future__ import annotations


class ChainException(Exception):
    """Base for all chain exceptions."""


class ResponseClosed(ChainException):
    """Write attempted on a response sink that has already been finalized."""

    def __init__(self, detail: str = "Response already closed") -> None:
        super().__init__(detail)
        self.detail = detail


class ChainAlreadyStarted(ChainException):
    """A Chain was started twice. Chains are single-use, one per request."""

    def __init__(self, detail: str = "Chain already started") -> None:
        super().__init__(detail)
        self.detail = detail
