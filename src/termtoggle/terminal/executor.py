"""Run a command line inside a numbered terminal."""

from __future__ import annotations

import logging as py_logging

from termtoggle.errors import ValidationError
from termtoggle.terminal.controller import ToggleController, validate_count, validate_directory, validate_size
from termtoggle.terminal.entity import Terminal, expand_directory

logger = py_logging.getLogger(__name__)


class CommandExecutor:
    def __init__(self, controller: ToggleController) -> None:
        self.controller = controller

    def exec(
        self,
        cmd: str,
        key: int = 1,
        size: int | None = None,
        directory: str | None = None,
        *,
        current_window: str | None = None,
    ) -> Terminal:
        if not isinstance(cmd, str) or not cmd.strip():
            raise ValidationError(
                "A command is required.",
                hint="Pass the command as cmd='ls -l'.",
            )
        validate_count(key, "id")
        validate_size(size)
        validate_directory(directory)

        host = self.controller.host
        origin = current_window if current_window is not None else host.current_window()
        key = max(key, 1)
        requested_dir = expand_directory(directory) if directory else None

        registry = self.controller.registry
        terminal, created = registry.get_or_create(key, requested_dir or expand_directory(None))
        if not self.controller.matcher.window_is_valid(terminal.window_id):
            self.controller.open(key, size, directory, current_window=origin)

        # open() may have re-registered the key; never reuse the first lookup.
        terminal = registry.get(key) or terminal
        if not created and requested_dir and terminal.directory != requested_dir:
            terminal.change_directory(requested_dir)

        terminal.clear()
        terminal.send(cmd)
        logger.info("Executed command in terminal=%s key=%s", terminal.id, key)

        if self.controller.matcher.window_is_valid(origin):
            host.focus_window(origin)
            host.leave_input_mode(origin)
        return terminal
