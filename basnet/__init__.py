"""Thread-backed service pools, pooled client handlers, error counters and HTTP reply helpers."""

__version__ = "0.1.0"