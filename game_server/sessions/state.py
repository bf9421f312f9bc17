from enum import Enum
from typing import Dict, FrozenSet

from ..logger import get_logger

logger = get_logger("sessions.state")


class SessionState(Enum):
    CONNECTING = "CONNECTING"
    ACTIVE = "ACTIVE"
    CLOSING = "CLOSING"
    CLOSED = "CLOSED"


# Transições permitidas; CLOSED é terminal
ALLOWED_TRANSITIONS: Dict[SessionState, FrozenSet[SessionState]] = {
    SessionState.CONNECTING: frozenset({SessionState.ACTIVE, SessionState.CLOSING}),
    SessionState.ACTIVE: frozenset({SessionState.CLOSING}),
    SessionState.CLOSING: frozenset({SessionState.CLOSED}),
    SessionState.CLOSED: frozenset(),
}


def can_transition(current: SessionState, new_state: SessionState) -> bool:
    return new_state in ALLOWED_TRANSITIONS[current]


def log_state_change(previous_state: SessionState, new_state: SessionState, context: str = "") -> None:
    message = f"State change {previous_state.value} -> {new_state.value}"
    if context:
        message = f"{message} ({context})"
    logger.debug(message)
