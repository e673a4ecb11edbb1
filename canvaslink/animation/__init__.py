"""Ancestor-chain highlight animation."""

from .scheduler import AsyncioScheduler, ManualScheduler, ManualTimer, Scheduler
from .sequencer import (
    AnimationSequence,
    AnimationSequencer,
    ElementKind,
    HighlightState,
    SequenceItem,
)

__all__ = [
    "AsyncioScheduler",
    "ManualScheduler",
    "ManualTimer",
    "Scheduler",
    "AnimationSequence",
    "AnimationSequencer",
    "ElementKind",
    "HighlightState",
    "SequenceItem",
]
