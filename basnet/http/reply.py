"""HTTP replies: status codes, headers, content and stock replies."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum


class Status(IntEnum):
    """The status codes a reply may carry."""

    OK = 200
    CREATED = 201
    ACCEPTED = 202
    NO_CONTENT = 204
    MULTIPLE_CHOICES = 300
    MOVED_PERMANENTLY = 301
    MOVED_TEMPORARILY = 302
    NOT_MODIFIED = 304
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    INTERNAL_SERVER_ERROR = 500
    NOT_IMPLEMENTED = 501
    BAD_GATEWAY = 502
    SERVICE_UNAVAILABLE = 503


_STATUS_LINES: dict[int, bytes] = {
    Status.OK: b"HTTP/1.0 200 OK\r\n",
    Status.CREATED: b"HTTP/1.0 201 Created\r\n",
    Status.ACCEPTED: b"HTTP/1.0 202 Accepted\r\n",
    Status.NO_CONTENT: b"HTTP/1.0 204 No Content\r\n",
    Status.MULTIPLE_CHOICES: b"HTTP/1.0 300 Multiple Choices\r\n",
    Status.MOVED_PERMANENTLY: b"HTTP/1.0 301 Moved Permanently\r\n",
    Status.MOVED_TEMPORARILY: b"HTTP/1.0 302 Moved Temporarily\r\n",
    Status.NOT_MODIFIED: b"HTTP/1.0 304 Not Modified\r\n",
    Status.BAD_REQUEST: b"HTTP/1.0 400 Bad Request\r\n",
    Status.UNAUTHORIZED: b"HTTP/1.0 401 Unauthorized\r\n",
    Status.FORBIDDEN: b"HTTP/1.0 403 Forbidden\r\n",
    Status.NOT_FOUND: b"HTTP/1.0 404 Not Found\r\n",
    Status.INTERNAL_SERVER_ERROR: b"HTTP/1.0 500 Internal Server Error\r\n",
    Status.NOT_IMPLEMENTED: b"HTTP/1.0 501 Not Implemented\r\n",
    Status.BAD_GATEWAY: b"HTTP/1.0 502 Bad Gateway\r\n",
    Status.SERVICE_UNAVAILABLE: b"HTTP/1.0 503 Service Unavailable\r\n",
}


def _page(title: str, heading: str) -> bytes:
    return (
        f"<html><head><title>{title}</title></head>"
        f"<body><h1>{heading}</h1></body></html>"
    ).encode("ascii")


_STOCK_CONTENT: dict[int, bytes] = {
    Status.OK: b"",
    Status.CREATED: _page("Created", "201 Created"),
    Status.ACCEPTED: _page("Accepted", "202 Accepted"),
    Status.NO_CONTENT: _page("No Content", "204 Content"),
    Status.MULTIPLE_CHOICES: _page("Multiple Choices", "300 Multiple Choices"),
    Status.MOVED_PERMANENTLY: _page("Moved Permanently", "301 Moved Permanently"),
    Status.MOVED_TEMPORARILY: _page("Moved Temporarily", "302 Moved Temporarily"),
    Status.NOT_MODIFIED: _page("Not Modified", "304 Not Modified"),
    Status.BAD_REQUEST: _page("Bad Request", "400 Bad Request"),
    Status.UNAUTHORIZED: _page("Unauthorized", "401 Unauthorized"),
    Status.FORBIDDEN: _page("Forbidden", "403 Forbidden"),
    Status.NOT_FOUND: _page("Not Found", "404 Not Found"),
    Status.INTERNAL_SERVER_ERROR: _page(
        "Internal Server Error", "500 Internal Server Error"
    ),
    Status.NOT_IMPLEMENTED: _page("Not Implemented", "501 Not Implemented"),
    Status.BAD_GATEWAY: _page("Bad Gateway", "502 Bad Gateway"),
    Status.SERVICE_UNAVAILABLE: _page(
        "Service Unavailable", "503 Service Unavailable"
    ),
}

_NAME_VALUE_SEPARATOR = b": "
_CRLF = b"\r\n"


def _status_line(status: int) -> bytes:
    return _STATUS_LINES.get(status, _STATUS_LINES[Status.INTERNAL_SERVER_ERROR])


def _stock_content(status: int) -> bytes:
    return _STOCK_CONTENT.get(status, _STOCK_CONTENT[Status.INTERNAL_SERVER_ERROR])


@dataclass
class Header:
    """One header line of a reply."""

    name: str
    value: str


@dataclass
class Reply:
    """A reply to be sent to a client."""

    status: int = Status.OK
    headers: list[Header] = field(default_factory=list)
    content: bytes = b""

    def reset(self) -> None:
        """Drop the content and headers."""
        self.content = b""
        self.headers.clear()

    def to_buffers(self) -> list[bytes]:
        """Return the reply as the sequence of byte chunks sent on the wire."""
        buffers = [_status_line(self.status)]
        for header in self.headers:
            buffers.extend(
                (
                    header.name.encode("latin-1"),
                    _NAME_VALUE_SEPARATOR,
                    header.value.encode("latin-1"),
                    _CRLF,
                )
            )
        buffers.append(_CRLF)
        buffers.append(self.content)
        return buffers

    def to_bytes(self) -> bytes:
        """Return the whole reply as one byte string."""
        return b"".join(self.to_buffers())

    @classmethod
    def stock_reply(cls, status: int) -> Reply:
        """Build a reply holding the standard HTML page for a status."""
        content = _stock_content(status)
        return cls(
            status=status,
            headers=[
                Header("Content-Length", str(len(content))),
                Header("Content-Type", "text/html"),
            ],
            content=content,
        )