"""A pool of handler-dispatching services, each run by its own thread."""

from __future__ import annotations

import threading
from collections import deque
from typing import Callable

DEFAULT_INIT_SIZE = 4
DEFAULT_HIGH_WATERMARK = 32
DEFAULT_THREAD_LOAD = 100


class IoService:
    """A queue of handlers that `run` executes in order.

    `run` keeps waiting for new handlers while outstanding work exists and
    returns once the queue is empty and no work remains, or when stopped.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._queue: deque[Callable[[], object]] = deque()
        self._work = 0
        self._stopped = False

    @property
    def stopped(self) -> bool:
        with self._cond:
            return self._stopped

    def post(self, handler: Callable[[], object]) -> None:
        """Queue a handler for execution by `run`."""
        with self._cond:
            self._queue.append(handler)
            self._cond.notify()

    def run(self) -> int:
        """Execute handlers until out of work or stopped; return how many ran."""
        executed = 0
        while True:
            with self._cond:
                while not self._stopped and not self._queue and self._work > 0:
                    self._cond.wait()
                if self._stopped:
                    break
                if not self._queue:
                    self._stopped = True
                    self._cond.notify_all()
                    break
                handler = self._queue.popleft()
            handler()
            executed += 1
        return executed

    def stop(self) -> None:
        """Make `run` return as soon as possible, leaving queued handlers."""
        with self._cond:
            self._stopped = True
            self._cond.notify_all()

    def restart(self) -> None:
        """Clear the stopped state so that `run` may be called again."""
        with self._cond:
            self._stopped = False

    def add_work(self) -> None:
        """Register outstanding work that keeps `run` from returning."""
        with self._cond:
            self._work += 1

    def remove_work(self) -> None:
        """Release one unit of outstanding work."""
        with self._cond:
            if self._work == 0:
                raise RuntimeError("no outstanding work to remove")
            self._work -= 1
            if self._work == 0:
                self._cond.notify_all()


def _validate(init_size: int, high_watermark: int, thread_load: int) -> None:
    if init_size <= 0:
        raise ValueError("init_size must be positive")
    if high_watermark < init_size:
        raise ValueError("high_watermark must not be below init_size")
    if thread_load <= 0:
        raise ValueError("thread_load must be positive")


class IoServicePool:
    """A growable set of `IoService` objects, handed out round-robin."""

    def __init__(
        self,
        init_size: int = DEFAULT_INIT_SIZE,
        high_watermark: int = DEFAULT_HIGH_WATERMARK,
        thread_load: int = DEFAULT_THREAD_LOAD,
    ) -> None:
        _validate(init_size, high_watermark, thread_load)
        self._lock = threading.Lock()
        self._init_size = init_size
        self._high_watermark = high_watermark
        self._thread_load = thread_load
        self._services = [IoService() for _ in range(init_size)]
        self._threads: list[threading.Thread] = []
        self._works: list[IoService] = []
        self._next = 0
        self._blocked = False
        self._idle = True

    def __enter__(self) -> IoServicePool:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def configure(
        self,
        init_size: int = DEFAULT_INIT_SIZE,
        high_watermark: int = DEFAULT_HIGH_WATERMARK,
        thread_load: int = DEFAULT_THREAD_LOAD,
    ) -> IoServicePool:
        """Change the pool parameters; ignored while threads are running."""
        _validate(init_size, high_watermark, thread_load)
        if not self._threads:
            self._init_size = init_size
            self._high_watermark = high_watermark
            self._thread_load = thread_load
        return self

    def size(self) -> int:
        with self._lock:
            return len(self._services)

    @property
    def thread_load(self) -> int:
        return self._thread_load

    @property
    def started(self) -> bool:
        """Whether the services currently hold work, i.e. the pool is running."""
        with self._lock:
            return bool(self._works)

    def idle(self) -> bool:
        """True until some service has executed at least one handler."""
        with self._lock:
            return self._idle

    def run(self) -> None:
        """Start in blocking mode: return only after `stop` is called."""
        self.start(True)

    def start(self, blocked: bool = False) -> None:
        """Start one thread per service; with `blocked`, wait for them to exit."""
        if self._threads:
            return
        with self._lock:
            self._blocked = blocked
            while len(self._services) < self._init_size:
                self._services.append(IoService())
            del self._services[self._init_size:]
            self._idle = True
            for service in reversed(self._services):
                self._start_one(service)
        if self._blocked:
            self._wait()

    def stop(self, force: bool = False) -> None:
        """Let services finish their handlers; with `force`, stop them at once."""
        if not self._works:
            return
        with self._lock:
            for service in reversed(self._works):
                service.remove_work()
            self._works.clear()
        if force:
            for service in reversed(self._services):
                service.stop()
        if not self._blocked:
            self._wait()

    def get_io_service(self, load: int | None = None) -> IoService:
        """Return the next service; a `load` may first add a new running one."""
        with self._lock:
            if load is not None:
                threads_needed = load // self._thread_load
                count = len(self._services)
                if (
                    not self._blocked
                    and self._works
                    and self._threads
                    and threads_needed > count
                    and count < self._high_watermark
                ):
                    service = IoService()
                    self._services.append(service)
                    self._start_one(service)
                    self._next = count
            if self._next >= len(self._services):
                self._next = 0
            service = self._services[self._next]
            self._next += 1
            return service

    def _wait(self) -> None:
        while True:
            with self._lock:
                threads = list(self._threads)
            if not threads:
                return
            for thread in reversed(threads):
                thread.join()
            with self._lock:
                self._threads = [t for t in self._threads if t not in threads]

    def _run_service(self, service: IoService) -> None:
        if service.run():
            with self._lock:
                self._idle = False

    def _start_one(self, service: IoService) -> None:
        service.restart()
        service.add_work()
        self._works.append(service)
        thread = threading.Thread(target=self._run_service, args=(service,), daemon=True)
        self._threads.append(thread)
        thread.start()