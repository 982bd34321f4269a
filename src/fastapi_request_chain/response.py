"""ResponseSink — buffered, closable outbound response."""

from __future__ import annotations

from starlette.responses import Response

from fastapi_request_chain.exceptions import ResponseClosed


class ResponseSink:
    """Outbound response written by stages and finalized by the transport.

    Status, content type, charset and headers may be overwritten until the sink
    is closed. Each ``write`` appends one chunk to the body; only ``reset()``
    discards it. Every mutation after ``close()`` raises ``ResponseClosed``.
    """

    def __init__(self) -> None:
        self.status_code: int = 200
        self.media_type: str | None = None
        self.charset: str = "utf-8"
        self.headers: dict[str, str] = {}
        self.chunks: list[bytes] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def body(self) -> bytes:
        return b"".join(self.chunks)

    def set_status(self, status_code: int) -> None:
        self._ensure_open()
        self.status_code = status_code

    def set_content_type(self, media_type: str) -> None:
        self._ensure_open()
        self.media_type = media_type

    def set_charset(self, charset: str) -> None:
        self._ensure_open()
        self.charset = charset

    def set_header(self, name: str, value: str) -> None:
        self._ensure_open()
        self.headers[name.lower()] = value

    def write(self, data: str | bytes) -> None:
        self._ensure_open()
        if isinstance(data, str):
            data = data.encode(self.charset)
        self.chunks.append(data)

    def reset(self) -> None:
        """Drop buffered body and headers. Status and content type are kept."""
        self._ensure_open()
        self.headers.clear()
        self.chunks.clear()

    def close(self) -> None:
        self._closed = True

    def to_response(self) -> Response:
        """Build the Starlette response carrying everything written so far."""
        response = Response(
            content=self.body,
            status_code=self.status_code,
            headers=self.headers,
        )
        if self.media_type is not None:
            content_type = self.media_type
            if content_type.startswith("text/") or content_type == "application/json":
                content_type += f"; charset={self.charset}"
            response.headers["content-type"] = content_type
        return response

    def _ensure_open(self) -> None:
        if self._closed:
            raise ResponseClosed()
