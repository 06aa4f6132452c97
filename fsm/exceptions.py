"""Exceptions raised by the automata modules."""

from typing_extensions import *


class AutomatonError(Exception):
    """Base exception for all automaton errors."""

    pass


class InvalidStateError(AutomatonError, ValueError):
    """Raised when a state id does not belong to the automaton it is used with."""

    def __init__(self, state: Any, reason: str = "") -> None:
        self.state = state
        message = f"Invalid state: {state!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
