"""Terminal pool domain models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final

TERMINAL_TYPE: Final = "termtoggle"
NO_WINDOW: Final = None


class Direction(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class TerminalState(str, Enum):
    UNCREATED = "uncreated"
    HIDDEN = "hidden"
    VISIBLE = "visible"
    DESTROYED = "destroyed"


@dataclass(frozen=True)
class SpawnedTerminal:
    buffer_id: str
    window_id: str
    process: str


@dataclass(frozen=True)
class TerminalEvent:
    terminal_id: int
    step: str
    message: str
