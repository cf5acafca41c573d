"""A pool of reusable synchronous connection handlers and a client over it."""

from __future__ import annotations

import errno
import threading
import time
from typing import Callable, Optional, Protocol

from basnet.endpoints import Endpoint, EndpointGroup
from basnet.io_service_pool import IoService, IoServicePool

DEFAULT_INIT_SIZE = 10
DEFAULT_LOW_WATERMARK = 0
DEFAULT_HIGH_WATERMARK = 50
DEFAULT_INCREMENT = 5
DEFAULT_MAXIMUM = 500
DEFAULT_WAIT_MS = 500

DEFAULT_BUFFER_SIZE = 256
DEFAULT_TIMEOUT_MS = 30

_SHUTDOWN_ERRNOS = frozenset(
    code
    for code in (getattr(errno, "ESHUTDOWN", None), getattr(errno, "WSAESHUTDOWN", None))
    if code is not None
)


class Handler(Protocol):
    """What the pool needs from a handler: its last error and a way to clear it."""

    error: Optional[BaseException]

    def clear(self) -> None: ...


HandlerFactory = Callable[[IoService, Endpoint, Endpoint, int, int], Handler]


def _is_reusable(handler: Handler) -> bool:
    error = getattr(handler, "error", None)
    if error is None:
        return True
    return getattr(error, "errno", None) in _SHUTDOWN_ERRNOS


class HandlerPool:
    """Keeps idle handlers ready, growing on demand up to a maximum."""

    def __init__(
        self,
        io_pool: IoServicePool,
        endpoints: EndpointGroup,
        factory: HandlerFactory,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        init_size: int = DEFAULT_INIT_SIZE,
        low_watermark: int = DEFAULT_LOW_WATERMARK,
        high_watermark: int = DEFAULT_HIGH_WATERMARK,
        increment: int = DEFAULT_INCREMENT,
        maximum: int = DEFAULT_MAXIMUM,
        wait_ms: int = DEFAULT_WAIT_MS,
    ) -> None:
        if io_pool is None:
            raise ValueError("an io service pool is required")
        if timeout_ms == 0:
            raise ValueError("timeout_ms must not be zero")
        if init_size == 0:
            raise ValueError("init_size must not be zero")
        if low_watermark > init_size:
            raise ValueError("low_watermark must not exceed init_size")
        if high_watermark <= low_watermark:
            raise ValueError("high_watermark must exceed low_watermark")
        if maximum <= high_watermark:
            raise ValueError("maximum must exceed high_watermark")
        if increment == 0:
            raise ValueError("increment must not be zero")

        self._io_pool = io_pool
        self._endpoints = endpoints
        self._factory = factory
        self._buffer_size = buffer_size
        self._timeout_ms = timeout_ms
        self._init_size = init_size
        self._low_watermark = low_watermark
        self._high_watermark = high_watermark
        self._increment = increment
        self._maximum = maximum
        self._wait_ms = wait_ms
        self._cond = threading.Condition(threading.RLock())
        self._handlers: list[Handler] = []
        self._count = 0
        self._closed = True

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    @property
    def available(self) -> int:
        """Number of idle handlers currently held by the pool."""
        with self._cond:
            return len(self._handlers)

    def init(self) -> None:
        """Open the pool and create the preallocated handlers."""
        with self._cond:
            self._closed = False
            self._create(self._init_size)

    def close(self) -> None:
        """Close the pool and discard every idle handler."""
        with self._cond:
            if self._closed:
                return
            self._closed = True
            idle = self._handlers
            self._handlers = []
            for handler in reversed(idle):
                handler.clear()
                self._count -= 1

    def acquire(self) -> Optional[Handler]:
        """Take an idle handler, waiting up to the configured time; None if none."""
        deadline = time.monotonic() + self._wait_ms / 1000.0
        handler: Optional[Handler] = None
        with self._cond:
            while True:
                if self._closed:
                    break
                if len(self._handlers) <= self._low_watermark and self._count < self._maximum:
                    self._create(self._increment)
                if self._handlers:
                    handler = self._handlers.pop()
                if handler is not None or self._wait_ms == 0:
                    break
                remaining = deadline - time.monotonic()
                if remaining <= 0 or not self._cond.wait(remaining):
                    break
        return handler

    def release(self, handler: Handler) -> None:
        """Give a handler back; it is discarded if it cannot be kept."""
        if handler is None:
            raise ValueError("handler must not be None")
        with self._cond:
            if not self._push(handler):
                self._count -= 1

    def handler_count(self) -> int:
        """Number of live handlers, idle or in use."""
        with self._cond:
            return self._count

    def _make(self) -> Handler:
        peer, local = self._endpoints.next_pair()
        return self._factory(
            self._io_pool.get_io_service(),
            peer,
            local,
            self._buffer_size,
            self._timeout_ms,
        )

    def _push(self, handler: Handler) -> bool:
        if (
            self._closed
            or not _is_reusable(handler)
            or len(self._handlers) >= self._high_watermark
        ):
            handler.clear()
            return False
        self._handlers.append(handler)
        self._cond.notify()
        return True

    def _create(self, count: int) -> None:
        for _ in range(count):
            if self._push(self._make()):
                self._count += 1


class SyncClient:
    """Starts an optional io service pool and a handler pool together."""

    def __init__(self, pool: HandlerPool, io_pool: Optional[IoServicePool] = None) -> None:
        if pool is None:
            raise ValueError("a handler pool is required")
        self._pool = pool
        self._io_pool = io_pool
        self.start()

    def __enter__(self) -> SyncClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    @property
    def pool(self) -> HandlerPool:
        return self._pool

    def start(self) -> None:
        """Start the io service pool, if owned, and fill the handler pool."""
        if self._io_pool is not None:
            self._io_pool.start()
        self._pool.init()

    def stop(self) -> None:
        """Close the handler pool, then stop the io service pool, if owned."""
        self._pool.close()
        if self._io_pool is not None:
            self._io_pool.stop()

    def acquire(self) -> Optional[Handler]:
        """Take a handler from the pool."""
        return self._pool.acquire()