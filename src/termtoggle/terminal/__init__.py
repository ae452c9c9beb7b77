"""Terminal pool: registry, toggle state machine and command execution."""

from .controller import ToggleController
from .entity import Terminal, expand_directory
from .executor import CommandExecutor
from .host import BufferService, Host, ProcessService, WindowingService
from .matcher import WindowMatcher
from .models import NO_WINDOW, TERMINAL_TYPE, Direction, SpawnedTerminal, TerminalEvent, TerminalState
from .registry import TerminalRegistry

__all__ = [
    "BufferService",
    "CommandExecutor",
    "Direction",
    "expand_directory",
    "Host",
    "NO_WINDOW",
    "ProcessService",
    "SpawnedTerminal",
    "Terminal",
    "TERMINAL_TYPE",
    "TerminalEvent",
    "TerminalRegistry",
    "TerminalState",
    "ToggleController",
    "WindowingService",
    "WindowMatcher",
]
