"""Host services consumed by the terminal pool.

The pool never talks to a concrete windowing system. Window, buffer and
process handles are opaque strings owned by the host; the pool only stores
and passes them back.
"""

from __future__ import annotations

from typing import Protocol

from termtoggle.terminal.models import Direction, SpawnedTerminal


class WindowingService(Protocol):
    def list_windows(self) -> list[str]: ...

    def window_buffer(self, window_id: str) -> str: ...

    def window_is_valid(self, window_id: str | None) -> bool: ...

    def current_window(self) -> str: ...

    def focus_window(self, window_id: str) -> None: ...

    def split_window(self, buffer_id: str, *, size: int | None, direction: Direction) -> str: ...

    def hide_window(self, window_id: str) -> None: ...

    def resize_window(self, window_id: str, *, size: int, direction: Direction) -> None: ...

    def window_size(self, window_id: str, *, direction: Direction) -> int: ...

    def leave_input_mode(self, window_id: str) -> None: ...


class BufferService(Protocol):
    def buffer_type(self, buffer_id: str) -> str: ...

    def set_buffer_type(self, buffer_id: str, value: str, *, terminal_id: int, key: int) -> None: ...


class ProcessService(Protocol):
    def spawn(
        self,
        *,
        directory: str,
        shell: str,
        size: int | None,
        direction: Direction,
    ) -> SpawnedTerminal:
        """Start a shell in `directory` displayed in a new split."""
        ...

    def send(self, process: str, text: str) -> None: ...

    def is_alive(self, process: str) -> bool: ...


class Host(WindowingService, BufferService, ProcessService, Protocol):
    """Everything a terminal pool needs from its host application."""
