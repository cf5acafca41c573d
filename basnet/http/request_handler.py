"""Serve files from a document root in answer to request URIs."""

from __future__ import annotations

import os
import string

from basnet.http.mime_types import extension_to_type
from basnet.http.reply import Header, Reply, Status

_HEX_DIGITS = frozenset(string.hexdigits)


def _parse_hex_prefix(chunk: str) -> int:
    """Read a hex number from the start of `chunk` the way a stream extractor does."""
    text = chunk.lstrip()
    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    digits = ""
    for ch in text:
        if ch not in _HEX_DIGITS:
            break
        digits += ch
    if not digits:
        raise ValueError(f"invalid percent escape: {chunk!r}")
    return sign * int(digits, 16)


def url_decode(text: str) -> str:
    """Decode percent escapes and '+' in a URL; raise ValueError if malformed."""
    out = bytearray()
    chars = iter(enumerate(text))
    for index, ch in chars:
        if ch == "%":
            chunk = text[index + 1 : index + 3]
            if len(chunk) < 2:
                raise ValueError("truncated percent escape")
            out.append(_parse_hex_prefix(chunk) & 0xFF)
            next(chars)
            next(chars)
        elif ch == "+":
            out += b" "
        else:
            out += ch.encode("utf-8", "surrogateescape")
    return out.decode("utf-8", "surrogateescape")


class RequestHandler:
    """Answers requests with files found under a document root."""

    def __init__(self, doc_root: str | os.PathLike[str]) -> None:
        self._doc_root = os.fspath(doc_root)

    @property
    def doc_root(self) -> str:
        return self._doc_root

    def handle_request(self, uri: str) -> Reply:
        """Produce the reply for a request URI."""
        try:
            path = url_decode(uri)
        except ValueError:
            return Reply.stock_reply(Status.BAD_REQUEST)

        if not path.startswith("/") or ".." in path:
            return Reply.stock_reply(Status.BAD_REQUEST)

        if path.endswith("/"):
            path += "index.html"

        last_slash = path.rfind("/")
        last_dot = path.rfind(".")
        extension = path[last_dot + 1 :] if last_dot > last_slash else ""

        try:
            with open(self._doc_root + path, "rb") as stream:
                content = stream.read()
        except OSError:
            return Reply.stock_reply(Status.NOT_FOUND)

        return Reply(
            status=Status.OK,
            headers=[
                Header("Content-Length", str(len(content))),
                Header("Content-Type", extension_to_type(extension)),
            ],
            content=content,
        )