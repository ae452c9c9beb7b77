"""A single addressable terminal: identity, process handle and window binding."""

from __future__ import annotations

import logging as py_logging
import os
import shlex
from collections.abc import Callable

from termtoggle.errors import NoActiveProcess, SpawnFailure, TermToggleError
from termtoggle.terminal.host import Host
from termtoggle.terminal.models import NO_WINDOW, TERMINAL_TYPE, Direction, TerminalState

logger = py_logging.getLogger(__name__)

EventRecorder = Callable[[int, str, str], None]


def expand_directory(path: str | None) -> str:
    if not path or not path.strip():
        return os.getcwd()
    return os.path.abspath(os.path.expanduser(path.strip()))


class Terminal:
    def __init__(
        self,
        id: int,
        *,
        host: Host,
        directory: str,
        shell: str = "/bin/sh",
        direction: Direction = Direction.HORIZONTAL,
        size: int | None = None,
        persist_size: bool = True,
        recorder: EventRecorder | None = None,
    ) -> None:
        self.id = id
        # Registry key this terminal is stored under; differs from id for out-of-order keys.
        self.key = id
        self.directory = directory
        self.shell = shell
        self.direction = direction
        self.size = size
        self.persist_size = persist_size
        self.process: str | None = None
        self.buffer_id: str | None = None
        self.window_id: str | None = NO_WINDOW
        self._host = host
        self._recorder = recorder

    def __repr__(self) -> str:
        return (
            f"Terminal(id={self.id}, key={self.key}, directory={self.directory!r}, "
            f"buffer_id={self.buffer_id!r}, window_id={self.window_id!r})"
        )

    def is_open(self) -> bool:
        if not self._host.window_is_valid(self.window_id):
            return False
        return self._host.window_buffer(self.window_id) == self.buffer_id

    def is_alive(self) -> bool:
        return self.process is not None and self._host.is_alive(self.process)

    def state(self) -> TerminalState:
        if self.process is None:
            return TerminalState.UNCREATED
        if not self._host.is_alive(self.process):
            return TerminalState.DESTROYED
        if self.is_open():
            return TerminalState.VISIBLE
        return TerminalState.HIDDEN

    def bind(self, buffer_id: str, process: str, window_id: str | None = NO_WINDOW) -> None:
        self.buffer_id = buffer_id
        self.process = process
        self.window_id = window_id
        self._record("bind", f"Bound buffer {buffer_id} process {process}.")

    def open(self, size: int | None = None, *, created: bool = False) -> Terminal:
        if size is not None:
            self.size = size
        if self.is_open():
            if size is not None:
                self.resize(size)
            self._host.focus_window(self.window_id)
            self._record("focus", "Terminal already visible; focused.")
            return self

        if created or self.process is None:
            self._spawn()
            return self

        if not self._host.is_alive(self.process):
            raise NoActiveProcess(
                f"Terminal {self.id} process has exited.",
                hint="Reset the terminal pool to start a fresh shell.",
            )
        self.window_id = self._host.split_window(self.buffer_id, size=self.size, direction=self.direction)
        self._record("open", f"Terminal shown in window {self.window_id}.")
        return self

    def close(self) -> Terminal:
        if self.is_open():
            window = self.window_id
            if self.persist_size:
                self.size = self._host.window_size(window, direction=self.direction)
            self._host.hide_window(window)
            self._record("close", f"Terminal hidden from window {window}.")
        self.window_id = NO_WINDOW
        return self

    def toggle(self) -> Terminal:
        if self.is_open():
            return self.close()
        return self.open()

    def resize(self, size: int | None = None) -> None:
        target = size if size is not None else self.size
        if target is None or not self.is_open():
            return
        self._host.resize_window(self.window_id, size=target, direction=self.direction)
        self.size = target

    def change_directory(self, path: str) -> bool:
        directory = expand_directory(path)
        self.directory = directory
        if not self.is_alive():
            logger.warning("Cannot change directory terminal=%s dir=%s: no running process", self.id, directory)
            self._record("cd-failed", f"No running process to move into {directory}.")
            return False
        self._host.send(self.process, f"cd {shlex.quote(directory)}\n")
        self._record("cd", f"Changed directory to {directory}.")
        return True

    def send(self, text: str) -> None:
        if not self.is_alive():
            raise NoActiveProcess(
                f"Terminal {self.id} has no running process.",
                hint="Open the terminal before sending commands.",
            )
        self._host.send(self.process, text + "\n")

    def clear(self) -> None:
        self.send("clear")

    def _spawn(self) -> None:
        try:
            spawned = self._host.spawn(
                directory=self.directory,
                shell=self.shell,
                size=self.size,
                direction=self.direction,
            )
        except TermToggleError as exc:
            self._record("spawn-failed", exc.message)
            raise SpawnFailure(
                f"Failed to start terminal {self.id}.",
                hint=exc.hint or exc.message,
            ) from exc
        except Exception as exc:
            self._record("spawn-failed", str(exc))
            raise SpawnFailure(
                f"Failed to start terminal {self.id}.",
                hint=str(exc) or "Check the configured shell.",
            ) from exc

        self.buffer_id = spawned.buffer_id
        self.window_id = spawned.window_id
        self.process = spawned.process
        self._host.set_buffer_type(spawned.buffer_id, TERMINAL_TYPE, terminal_id=self.id, key=self.key)
        self._record("spawn", f"Started {self.shell} in {self.directory}.")

    def _record(self, step: str, message: str) -> None:
        if self._recorder is not None:
            self._recorder(self.id, step, message)
        else:
            logger.debug("terminal-event terminal=%s step=%s message=%s", self.id, step, message)
