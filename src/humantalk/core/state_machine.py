"""State machine for a single crash capture."""

from __future__ import annotations

from enum import Enum, auto
import logging


class CaptureState(Enum):
    IDLE = auto()
    CAPTURING = auto()
    SERIALIZING = auto()
    PERSISTED = auto()
    PERSIST_FAILED = auto()
    DONE = auto()


class CaptureEvent(Enum):
    START = auto()
    SNAPSHOT_DONE = auto()
    WRITE_OK = auto()
    WRITE_FAILED = auto()
    NO_STORE = auto()
    FINISH = auto()


_TRANSITIONS = {
    CaptureState.IDLE: {
        CaptureEvent.START: CaptureState.CAPTURING,
    },
    CaptureState.CAPTURING: {
        CaptureEvent.SNAPSHOT_DONE: CaptureState.SERIALIZING,
    },
    CaptureState.SERIALIZING: {
        CaptureEvent.WRITE_OK: CaptureState.PERSISTED,
        CaptureEvent.WRITE_FAILED: CaptureState.PERSIST_FAILED,
        CaptureEvent.NO_STORE: CaptureState.PERSIST_FAILED,
    },
    CaptureState.PERSISTED: {
        CaptureEvent.FINISH: CaptureState.DONE,
    },
    CaptureState.PERSIST_FAILED: {
        CaptureEvent.FINISH: CaptureState.DONE,
    },
}


class CaptureStateMachine:
    def __init__(self):
        self.state = CaptureState.IDLE
        self.history: list[CaptureState] = [self.state]

    def transition(self, event: CaptureEvent) -> CaptureState:
        next_state = _TRANSITIONS.get(self.state, {}).get(event, self.state)
        if next_state == self.state and event not in _TRANSITIONS.get(self.state, {}):
            logging.getLogger(__name__).warning(
                "Invalid capture transition: %s --%s--> %s", self.state, event, next_state
            )
        else:
            self.history.append(next_state)
        self.state = next_state
        return self.state
