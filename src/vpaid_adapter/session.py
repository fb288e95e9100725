"""
Ad Session Record

Keeps the lifecycle state of one ad impression together with the history of
its state transitions and dispatched events. Serializable for diagnostics.
"""

import json
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .log_config import get_context_logger


class AdState(str, Enum):
    """Lifecycle state of an ad unit."""

    UNSTARTED = "unstarted"
    LOADED = "loaded"
    PLAYING = "playing"
    PAUSED = "paused"
    STOPPED = "stopped"

    @property
    def started(self) -> bool:
        return self in (AdState.PLAYING, AdState.PAUSED)

    @property
    def terminal(self) -> bool:
        return self is AdState.STOPPED


@dataclass
class StateTransition:
    """One recorded state change."""

    timestamp: float
    from_state: AdState
    to_state: AdState
    operation: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "from_state": self.from_state.value,
            "to_state": self.to_state.value,
            "operation": self.operation,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StateTransition":
        return cls(
            timestamp=data["timestamp"],
            from_state=AdState(data["from_state"]),
            to_state=AdState(data["to_state"]),
            operation=data["operation"],
        )


@dataclass
class DispatchRecord:
    """One event handed to the event bus."""

    timestamp: float
    event: str
    delivered: bool

    def to_dict(self) -> dict[str, Any]:
        return {"timestamp": self.timestamp, "event": self.event, "delivered": self.delivered}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DispatchRecord":
        return cls(
            timestamp=data["timestamp"],
            event=data["event"],
            delivered=data.get("delivered", False),
        )


@dataclass
class AdSession:
    """
    Domain object representing a single ad impression.

    Attributes:
        session_id: Unique session identifier
        variant: Ad unit variant name
        state: Current lifecycle state
        transitions: State changes in order
        events: Dispatched events in order
        metadata: Additional session metadata
    """

    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    variant: str = ""
    state: AdState = AdState.UNSTARTED
    transitions: list[StateTransition] = field(default_factory=list)
    events: list[DispatchRecord] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    logger: Any = field(default=None, init=False, repr=False)

    def __post_init__(self):
        """Initialize logger after dataclass initialization."""
        if self.logger is None:
            self.logger = get_context_logger("ad_session")

    def transition(self, to_state: AdState, operation: str, timestamp: float) -> StateTransition:
        """Move to a new state and record the change."""
        record = StateTransition(
            timestamp=timestamp,
            from_state=self.state,
            to_state=to_state,
            operation=operation,
        )
        self.transitions.append(record)
        self.state = to_state
        self.logger.debug(
            "State transition",
            session_id=self.session_id,
            from_state=record.from_state.value,
            to_state=to_state.value,
            operation=operation,
        )
        return record

    def record_event(self, event: str, delivered: bool, timestamp: float) -> DispatchRecord:
        record = DispatchRecord(timestamp=timestamp, event=event, delivered=delivered)
        self.events.append(record)
        return record

    def event_names(self) -> list[str]:
        return [record.event for record in self.events]

    def count(self, event: str) -> int:
        return sum(1 for record in self.events if record.event == event)

    def time_in_session(self) -> float:
        """Seconds between the first and the last recorded transition."""
        if len(self.transitions) < 2:
            return 0.0
        return self.transitions[-1].timestamp - self.transitions[0].timestamp

    def to_dict(self) -> dict[str, Any]:
        """Serialize session to dictionary."""
        return {
            "session_id": self.session_id,
            "variant": self.variant,
            "state": self.state.value,
            "transitions": [t.to_dict() for t in self.transitions],
            "events": [e.to_dict() for e in self.events],
            "metadata": self.metadata,
        }

    def to_json(self) -> str:
        """Serialize session to JSON string."""
        return json.dumps(self.to_dict(), default=str)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AdSession":
        """Create session from dictionary."""
        return cls(
            session_id=data.get("session_id", str(uuid.uuid4())),
            variant=data.get("variant", ""),
            state=AdState(data.get("state", "unstarted")),
            transitions=[StateTransition.from_dict(t) for t in data.get("transitions", [])],
            events=[DispatchRecord.from_dict(e) for e in data.get("events", [])],
            metadata=data.get("metadata", {}),
        )

    @classmethod
    def from_json(cls, json_str: str) -> "AdSession":
        """Create session from JSON string."""
        return cls.from_dict(json.loads(json_str))


__all__ = [
    "AdState",
    "StateTransition",
    "DispatchRecord",
    "AdSession",
]
