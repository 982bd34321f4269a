"""ErrorInterceptor — converts an uncaught stage failure into a generic error response."""

from __future__ import annotations

import structlog

from fastapi_request_chain.response import ResponseSink

logger = structlog.get_logger(__name__)

DEFAULT_ERROR_BODY = '{"error": "An error occurred."}'


class ErrorInterceptor:
    """Chain-wide failure policy.

    Replaces whatever the stages buffered with a fixed-shape error response.
    The failure itself is logged and never written to the client.
    ``intercept`` never raises.
    """

    def __init__(
        self,
        *,
        status_code: int = 500,
        media_type: str = "application/json",
        charset: str = "utf-8",
        body: str = DEFAULT_ERROR_BODY,
    ) -> None:
        self.status_code = status_code
        self.media_type = media_type
        self.charset = charset
        self.body = body

    def intercept(self, exc: Exception, sink: ResponseSink) -> None:
        logger.error("stage_failed", error_type=type(exc).__name__, exc_info=exc)

        try:
            if sink.closed:
                logger.warning("error_response_skipped", reason="response closed")
                return
            sink.reset()
            sink.set_status(self.status_code)
            sink.set_content_type(self.media_type)
            sink.set_charset(self.charset)
            sink.write(self.body)
            sink.close()
        except Exception as write_exc:
            logger.error(
                "error_response_failed",
                error_type=type(write_exc).__name__,
                exc_info=write_exc,
            )
