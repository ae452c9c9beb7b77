"""Open/close/toggle decisions over the terminal pool."""

from __future__ import annotations

import logging as py_logging

from termtoggle.config import AppConfig
from termtoggle.errors import InconsistentState, ValidationError
from termtoggle.terminal.entity import Terminal, expand_directory
from termtoggle.terminal.host import Host
from termtoggle.terminal.matcher import WindowMatcher
from termtoggle.terminal.models import NO_WINDOW, Direction, TerminalEvent
from termtoggle.terminal.registry import TerminalRegistry

logger = py_logging.getLogger(__name__)


def validate_count(value: object, name: str = "count") -> int:
    # bool passes isinstance(int); `True` is never a terminal number.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(
            f"Invalid {name}: {value!r}",
            hint=f"{name} must be an integer.",
        )
    return value


def validate_size(value: object) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(
            f"Invalid size: {value!r}",
            hint="size must be a positive integer.",
        )
    return value


def validate_directory(value: object) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(
            f"Invalid directory: {value!r}",
            hint="dir must be a path string.",
        )
    return value


class ToggleController:
    def __init__(
        self,
        host: Host,
        *,
        shell: str = "/bin/sh",
        direction: Direction = Direction.HORIZONTAL,
        size: int | None = None,
        persist_size: bool = True,
        matcher: WindowMatcher | None = None,
    ) -> None:
        self.host = host
        self.shell = shell
        self.direction = direction
        self.default_size = size
        self.persist_size = persist_size
        self.matcher = matcher or WindowMatcher(host)
        self.registry = TerminalRegistry(self._new_terminal)
        self.origin_window: str | None = NO_WINDOW
        self._events: list[TerminalEvent] = []

    @classmethod
    def from_config(cls, host: Host, config: AppConfig) -> ToggleController:
        return cls(
            host,
            shell=config.resolved_shell(),
            direction=Direction(config.direction),
            size=config.size,
            persist_size=config.persist_size,
        )

    def list_events(self) -> list[TerminalEvent]:
        return list(self._events)

    def clear_events(self) -> None:
        self._events.clear()

    def reset(self) -> None:
        self.registry.reset()
        self.origin_window = NO_WINDOW
        logger.info("Terminal registry reset.")

    def toggle(
        self,
        count: int = 1,
        size: int | None = None,
        directory: str | None = None,
        *,
        current_window: str | None = None,
    ) -> Terminal | None:
        """Toggle terminal ``count``; a count of 1 or less uses the smart heuristic.

        Smart toggle opens terminal 1 when no terminal window is visible,
        otherwise it closes the highest-keyed terminal that is on screen.
        """
        validate_count(count)
        validate_size(size)
        validate_directory(directory)
        current = self._entry_window(current_window)
        if count > 1:
            return self._toggle_nth(count, size, directory, current)
        return self._smart_toggle(size, directory, current)

    def open(
        self,
        key: int,
        size: int | None = None,
        directory: str | None = None,
        *,
        current_window: str | None = None,
    ) -> Terminal:
        validate_count(key, "id")
        validate_size(size)
        validate_directory(directory)
        terminal, created = self.registry.get_or_create(key, expand_directory(directory))
        self.update_origin_window(terminal.window_id, self._entry_window(current_window))
        return terminal.open(size, created=created)

    def close(self, key: int, *, current_window: str | None = None) -> Terminal:
        validate_count(key, "id")
        terminal, _ = self.registry.get_or_create(key, expand_directory(None))
        self.update_origin_window(terminal.window_id, self._entry_window(current_window))
        terminal.close()
        if self.matcher.window_is_valid(self.origin_window):
            self.host.focus_window(self.origin_window)
        return terminal

    def update_origin_window(self, terminal_window: str | None, current_window: str) -> None:
        if current_window != terminal_window:
            self.origin_window = current_window

    def on_process_started(
        self,
        buffer_id: str,
        process: str,
        *,
        window_id: str | None = NO_WINDOW,
        terminal_id: int | None = None,
        key: int | None = None,
        directory: str | None = None,
    ) -> Terminal:
        """Attach a started process to its registry entry, creating the entry if needed.

        ``key`` is the registry key the terminal was opened under and defaults
        to ``terminal_id``; a known ``terminal_id`` is kept as the entity id.
        """
        if key is None:
            key = terminal_id
        owner = self.registry.find_by_buffer(buffer_id)
        if owner is None and key is not None and key in self.registry:
            owner = (key, self.registry.get(key))
        if owner is not None:
            _, terminal = owner
            if terminal.process is None:
                terminal.bind(buffer_id, process, window_id)
            terminal.resize()
            return terminal

        if terminal_id is None:
            terminal, _ = self.registry.get_or_create(
                key if key is not None else self.registry.next_id(),
                expand_directory(directory),
            )
        else:
            terminal = self.registry.restore(key, terminal_id, expand_directory(directory))
        terminal.bind(buffer_id, process, window_id)
        return terminal

    def on_last_window_closing(self, buffer_id: str, window_count: int) -> bool:
        if window_count != 1 or not self.matcher.is_terminal_buffer(buffer_id):
            return False
        owner = self.registry.find_by_buffer(buffer_id)
        if owner is None:
            return False
        _, terminal = owner
        terminal.window_id = NO_WINDOW
        self._record(terminal.id, "last-window", "Dropped window reference before host reuse.")
        return True

    def _toggle_nth(self, key: int, size: int | None, directory: str | None, current: str) -> Terminal:
        terminal, _ = self.registry.get_or_create(key, expand_directory(directory))
        self.update_origin_window(terminal.window_id, current)
        if self.matcher.window_is_valid(terminal.window_id):
            return self.close(key, current_window=current)
        return self.open(key, size, directory, current_window=current)

    def _smart_toggle(self, size: int | None, directory: str | None, current: str) -> Terminal | None:
        any_open, _ = self.matcher.find_open_windows()
        if not any_open:
            return self.open(1, size, directory, current_window=current)

        keys = self.registry.keys_descending()
        try:
            target = self._find_visible_key(keys)
        except InconsistentState as exc:
            logger.warning("Smart toggle fallback: %s", exc)
            if not keys:
                return None
            target = keys[0]
            self._record(target, "inconsistent-state", exc.message)
        self._sync_window(self.registry.get(target))
        return self.close(target, current_window=current)

    def _sync_window(self, terminal: Terminal | None) -> None:
        if terminal is None:
            return
        windows = self.matcher.windows_for_buffer(terminal.buffer_id)
        if windows and terminal.window_id not in windows:
            terminal.window_id = windows[0]

    def _find_visible_key(self, keys: list[int]) -> int:
        for key in keys:
            terminal = self.registry.get(key)
            if terminal is not None and self.matcher.windows_for_buffer(terminal.buffer_id):
                return key
        raise InconsistentState(
            "Terminal windows are open but no registered terminal owns them.",
            hint="Closing the highest numbered terminal instead.",
        )

    def _entry_window(self, current_window: str | None) -> str:
        if current_window is not None:
            return current_window
        return self.host.current_window()

    def _new_terminal(self, terminal_id: int, directory: str) -> Terminal:
        return Terminal(
            terminal_id,
            host=self.host,
            directory=directory,
            shell=self.shell,
            direction=self.direction,
            size=self.default_size,
            persist_size=self.persist_size,
            recorder=self._record,
        )

    def _record(self, terminal_id: int, step: str, message: str) -> None:
        self._events.append(TerminalEvent(terminal_id=terminal_id, step=step, message=message))
        logger.info("terminal-event terminal=%s step=%s message=%s", terminal_id, step, message)
