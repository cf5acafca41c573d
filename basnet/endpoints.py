"""Endpoints and a round-robin group of peer/local endpoint pairs."""

from __future__ import annotations

import threading
from dataclasses import dataclass


@dataclass(frozen=True)
class Endpoint:
    """A TCP address and port; the default is the unspecified endpoint."""

    host: str = "0.0.0.0"
    port: int = 0

    def __str__(self) -> str:
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"


EndpointPair = tuple[Endpoint, Endpoint]


class EndpointGroup:
    """Holds (peer, local) endpoint pairs and hands them out in turn."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._pairs: list[EndpointPair] = []
        self._next = 0

    def add(self, peer: Endpoint, local: Endpoint | None = None) -> EndpointGroup:
        """Append a pair; a missing local endpoint means the unspecified one."""
        with self._lock:
            self._pairs.append((peer, local if local is not None else Endpoint()))
        return self

    def __len__(self) -> int:
        with self._lock:
            return len(self._pairs)

    def next_pair(self) -> EndpointPair:
        """Return the next pair round-robin, or a default pair if empty."""
        with self._lock:
            if len(self._pairs) == 1:
                return self._pairs[0]
            if not self._pairs:
                return (Endpoint(), Endpoint())
            if self._next >= len(self._pairs):
                self._next = 0
            pair = self._pairs[self._next]
            self._next += 1
            return pair

    def pair_at(self, index: int) -> EndpointPair:
        """Return the pair at `index`, or a default pair if out of range."""
        with self._lock:
            if 0 <= index < len(self._pairs):
                return self._pairs[index]
            return (Endpoint(), Endpoint())