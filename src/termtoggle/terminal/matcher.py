"""Queries for which host windows currently display terminal buffers."""

from __future__ import annotations

from collections.abc import Callable

from termtoggle.terminal.host import Host
from termtoggle.terminal.models import NO_WINDOW, TERMINAL_TYPE

BufferPredicate = Callable[[str], bool]


class WindowMatcher:
    def __init__(self, host: Host, *, terminal_type: str = TERMINAL_TYPE) -> None:
        self._host = host
        self.terminal_type = terminal_type

    def is_terminal_buffer(self, buffer_id: str) -> bool:
        return self._host.buffer_type(buffer_id) == self.terminal_type

    def find_open_windows(self, predicate: BufferPredicate | None = None) -> tuple[bool, list[str]]:
        matches = predicate or self.is_terminal_buffer
        windows = [
            window
            for window in self._host.list_windows()
            if matches(self._host.window_buffer(window))
        ]
        return bool(windows), windows

    def windows_for_buffer(self, buffer_id: str | None) -> list[str]:
        if buffer_id is None:
            return []
        _, windows = self.find_open_windows(lambda buffer: buffer == buffer_id)
        return windows

    def window_is_valid(self, window_id: str | None) -> bool:
        if window_id is NO_WINDOW:
            return False
        return self._host.window_is_valid(window_id)
