"""Runtime services shared by every engine component."""

from . import telemetry

__all__ = ["telemetry"]
