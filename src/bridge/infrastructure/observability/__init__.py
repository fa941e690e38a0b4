"""Structured-logging probes shared by every layer of the bridge.

Code reports what happened (a store call failed, a key collided) through a
probe method; the probe decides how that becomes a structlog event.
"""

from infrastructure.observability.context import ObservationContext
from infrastructure.observability.probes import (
    ConnectionProbe,
    DefaultConnectionProbe,
)

__all__ = [
    "ConnectionProbe",
    "DefaultConnectionProbe",
    "ObservationContext",
]
