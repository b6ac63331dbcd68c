"""
Event system for asyncemit.

Exports the Emitter, its helpers, and the types they share.
"""

from asyncemit.core.event.emitter import Emitter
from asyncemit.core.event.metrics import EmitterMetrics, EmitterMetricsRecorder
from asyncemit.core.event.mixin import mixin
from asyncemit.core.event.scheduler import EmissionScheduler
from asyncemit.core.event.types import (
    EMITTER_METHODS,
    EmissionMode,
    Listener,
    Unsubscribe,
    WildcardListener,
)

__all__ = [
    "Emitter",
    "EmissionScheduler",
    "EmissionMode",
    "EmitterMetrics",
    "EmitterMetricsRecorder",
    "EMITTER_METHODS",
    "Listener",
    "WildcardListener",
    "Unsubscribe",
    "mixin",
]
