"""Action modules for enabling and disabling telemetry components."""

from .transitions import (
    TransitionEngine,
    create_transition_engine,
)

__all__ = [
    "TransitionEngine",
    "create_transition_engine",
]
