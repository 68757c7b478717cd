"""UI-agnostic typing-simulation engine."""

__all__ = [
    "adapters",
    "buffer",
    "engine",
    "host",
    "runtime",
    "session",
]

__version__ = "0.1.0"
