"""Error taxonomy and exit code contract."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    INVALID_ARGS = 2
    CONFIG_ERROR = 3
    RUNTIME_ERROR = 4
    TMUX_ERROR = 6
    VALIDATION_ERROR = 7
    NO_ACTIVE_PROCESS = 9
    SPAWN_FAILURE = 10
    INCONSISTENT_STATE = 11


@dataclass
class TermToggleError(Exception):
    message: str
    code: ExitCode = ExitCode.RUNTIME_ERROR
    hint: str = ""

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} Hint: {self.hint}"
        return self.message


@dataclass
class ValidationError(TermToggleError):
    """Bad or missing argument, rejected before any state changes."""

    code: ExitCode = ExitCode.VALIDATION_ERROR


@dataclass
class NoActiveProcess(TermToggleError):
    """Input was sent to a terminal whose process is absent or dead."""

    code: ExitCode = ExitCode.NO_ACTIVE_PROCESS


@dataclass
class SpawnFailure(TermToggleError):
    """The shell process could not be started; the terminal stays registered."""

    code: ExitCode = ExitCode.SPAWN_FAILURE


@dataclass
class InconsistentState(TermToggleError):
    """Windows report an open terminal that no registered entity owns."""

    code: ExitCode = ExitCode.INCONSISTENT_STATE


def user_facing_error(message: str, *, hint: str = "") -> str:
    message = message.rstrip(".")
    if hint:
        return f"Error: {message}. Next step: {hint}"
    return f"Error: {message}."
