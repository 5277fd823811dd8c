"""
Event type definitions passed to completion callbacks.
"""
import time as _time
import uuid
from dataclasses import dataclass, field
from typing import Any


# Event type constants
class EventType:
    """Event type constants."""
    KEYFRAME_FINISHED = "keyframe.finished"
    SCHEDULE_FINISHED = "schedule.finished"


@dataclass
class ActionEvent:
    """Completion event handed to keyframe and schedule on_finish handlers."""
    event_type: str
    source: Any = None
    time: float = 0.0           # Playhead position in ms when the event fired
    cycle: int = 0              # Zero-based cycle index
    synthetic: bool = False     # Built by a backend that has no native event
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    timestamp: float = field(default_factory=_time.time)
    is_consumed: bool = False

    def consume(self):
        """Mark this event as consumed."""
        self.is_consumed = True
