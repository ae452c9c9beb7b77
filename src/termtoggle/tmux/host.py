"""tmux implementation of the terminal pool host services.

A terminal's buffer, window and process are all the same tmux pane. The pane
is "visible" while it sits in the client's current tmux window; hiding breaks
it out into a detached stash window so the shell keeps running.
"""

from __future__ import annotations

import logging as py_logging
import os
import shutil
import subprocess
from collections.abc import Callable
from dataclasses import dataclass

from termtoggle.errors import ExitCode, TermToggleError
from termtoggle.terminal.models import Direction, SpawnedTerminal
from termtoggle.tmux.commands import (
    STASH_WINDOW_NAME,
    build_current_pane_query,
    build_dead_query,
    build_discover_command,
    build_focus_command,
    build_hide_command,
    build_leave_copy_mode_command,
    build_list_panes_command,
    build_resize_command,
    build_send_keys_commands,
    build_show_command,
    build_size_query,
    build_spawn_command,
    build_stash_command,
    build_tag_commands,
    build_type_query,
    build_window_names_query,
)

logger = py_logging.getLogger(__name__)

Runner = Callable[..., subprocess.CompletedProcess]


@dataclass(frozen=True)
class TaggedPane:
    pane_id: str
    terminal_id: int
    key: int
    directory: str
    visible: bool


def tmux_available() -> bool:
    return shutil.which("tmux") is not None


def in_tmux() -> bool:
    return bool(os.environ.get("TMUX"))


def _subcommand(command: list[str]) -> str:
    args = command[3:] if command[1:2] == ["-L"] else command[1:]
    return args[0] if args else "command"


class TmuxHost:
    def __init__(self, *, socket: str = "", runner: Runner = subprocess.run) -> None:
        self.socket = socket
        self._runner = runner

    def list_windows(self) -> list[str]:
        output = self._output(build_list_panes_command(socket=self.socket))
        return [line.strip() for line in output.splitlines() if line.strip()]

    def window_buffer(self, window_id: str) -> str:
        return window_id

    def window_is_valid(self, window_id: str | None) -> bool:
        if not window_id:
            return False
        return window_id in self.list_windows()

    def current_window(self) -> str:
        return self._output(build_current_pane_query(socket=self.socket))

    def focus_window(self, window_id: str) -> None:
        self._run(build_focus_command(window_id, socket=self.socket))

    def split_window(self, buffer_id: str, *, size: int | None, direction: Direction) -> str:
        self._run(build_show_command(buffer_id, size=size, direction=direction, socket=self.socket))
        return buffer_id

    def hide_window(self, window_id: str) -> None:
        if STASH_WINDOW_NAME in self.window_names():
            result = self._run(build_stash_command(window_id, socket=self.socket), check=False)
            if result.returncode == 0:
                return
            logger.debug(
                "Joining stash window failed pane=%s stderr=%s",
                window_id,
                (result.stderr or "").strip()[:200],
            )
        self._run(build_hide_command(window_id, socket=self.socket))

    def window_names(self) -> list[str]:
        output = self._output(build_window_names_query(socket=self.socket))
        return [line.strip() for line in output.splitlines() if line.strip()]

    def resize_window(self, window_id: str, *, size: int, direction: Direction) -> None:
        self._run(build_resize_command(window_id, size=size, direction=direction, socket=self.socket))

    def window_size(self, window_id: str, *, direction: Direction) -> int:
        output = self._output(build_size_query(window_id, direction=direction, socket=self.socket))
        try:
            return int(output)
        except ValueError as exc:
            raise TermToggleError(
                f"Unexpected pane size from tmux: {output!r}",
                code=ExitCode.TMUX_ERROR,
                hint="Check the tmux version (3.0+ required).",
            ) from exc

    def leave_input_mode(self, window_id: str) -> None:
        self._run(build_leave_copy_mode_command(window_id, socket=self.socket), check=False)

    def buffer_type(self, buffer_id: str) -> str:
        result = self._run(build_type_query(buffer_id, socket=self.socket), check=False)
        if result.returncode != 0:
            return ""
        return (result.stdout or "").strip()

    def set_buffer_type(self, buffer_id: str, value: str, *, terminal_id: int, key: int) -> None:
        commands = build_tag_commands(buffer_id, value=value, terminal_id=terminal_id, key=key, socket=self.socket)
        for command in commands:
            self._run(command)

    def spawn(
        self,
        *,
        directory: str,
        shell: str,
        size: int | None,
        direction: Direction,
    ) -> SpawnedTerminal:
        command = build_spawn_command(
            directory=directory,
            shell=shell,
            size=size,
            direction=direction,
            socket=self.socket,
        )
        pane_id = self._output(command)
        if not pane_id:
            raise TermToggleError(
                "tmux did not report the new pane id.",
                code=ExitCode.TMUX_ERROR,
                hint="Retry after checking `tmux split-window -P` works.",
            )
        logger.debug("Spawned pane=%s shell=%s dir=%s", pane_id, shell, directory)
        return SpawnedTerminal(buffer_id=pane_id, window_id=pane_id, process=pane_id)

    def send(self, process: str, text: str) -> None:
        for command in build_send_keys_commands(process, text, socket=self.socket):
            self._run(command)

    def is_alive(self, process: str) -> bool:
        result = self._run(build_dead_query(process, socket=self.socket), check=False)
        if result.returncode != 0:
            return False
        return (result.stdout or "").strip() == "0"

    def discover(self) -> list[TaggedPane]:
        """List panes tagged with a terminal id, ordered by that id."""
        output = self._output(build_discover_command(socket=self.socket))
        visible = set(self.list_windows())
        panes: list[TaggedPane] = []
        for line in output.splitlines():
            parts = line.split("\t")
            if len(parts) != 4:
                continue
            pane_id, raw_id, raw_key, directory = parts
            if not raw_id.strip().isdigit():
                continue
            terminal_id = int(raw_id)
            # Panes tagged before keys were stored live under their id.
            key = int(raw_key) if raw_key.strip().isdigit() else terminal_id
            panes.append(
                TaggedPane(
                    pane_id=pane_id.strip(),
                    terminal_id=terminal_id,
                    key=key,
                    directory=directory,
                    visible=pane_id.strip() in visible,
                )
            )
        return sorted(panes, key=lambda pane: pane.terminal_id)

    def _output(self, command: list[str]) -> str:
        return (self._run(command).stdout or "").strip()

    def _run(self, command: list[str], *, check: bool = True) -> subprocess.CompletedProcess:
        logger.debug("Running tmux command=%s", command)
        try:
            result = self._runner(command, capture_output=True, text=True, check=False)
        except OSError as exc:
            raise TermToggleError(
                "tmux could not be executed.",
                code=ExitCode.TMUX_ERROR,
                hint=str(exc) or "Install tmux and run inside a tmux session.",
            ) from exc
        if check and result.returncode != 0:
            stderr = (result.stderr or "").strip()
            logger.debug("tmux command failed code=%s stderr=%s", result.returncode, stderr[:200])
            raise TermToggleError(
                f"tmux {_subcommand(command)} failed.",
                code=ExitCode.TMUX_ERROR,
                hint=stderr or "Run termtoggle inside a tmux session.",
            )
        return result
