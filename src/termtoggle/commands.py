"""User-facing command surface over the terminal pool.

Every entry point reports failures as a single message and returns an exit
code instead of raising.
"""

from __future__ import annotations

import logging as py_logging
from collections.abc import Callable

from termtoggle.args import parse_arguments
from termtoggle.config import AppConfig
from termtoggle.errors import ExitCode, TermToggleError, ValidationError, user_facing_error
from termtoggle.terminal import NO_WINDOW, CommandExecutor, Host, ToggleController

logger = py_logging.getLogger(__name__)

Notifier = Callable[[str, str], None]

EXEC_USAGE = "exec requires a cmd specified using the syntax cmd='ls -l' e.g. exec cmd='ls -l'"


def log_notifier(message: str, level: str) -> None:
    logger.log(py_logging.ERROR if level == "error" else py_logging.INFO, "%s", message)


class TerminalCommands:
    def __init__(
        self,
        controller: ToggleController,
        executor: CommandExecutor | None = None,
        *,
        notify: Notifier | None = None,
    ) -> None:
        self.controller = controller
        self.executor = executor or CommandExecutor(controller)
        self._notify = notify or log_notifier

    @classmethod
    def from_config(cls, host: Host, config: AppConfig, *, notify: Notifier | None = None) -> TerminalCommands:
        return cls(ToggleController.from_config(host, config), notify=notify)

    def toggle(self, count: int = 1, size: int | None = None, directory: str | None = None) -> ExitCode:
        return self._guard(lambda: self.controller.toggle(count, size, directory))

    def open(self, key: int, size: int | None = None, directory: str | None = None) -> ExitCode:
        return self._guard(lambda: self.controller.open(key, size, directory))

    def close(self, key: int) -> ExitCode:
        return self._guard(lambda: self.controller.close(key))

    def exec(self, cmd: str, key: int = 1, size: int | None = None, directory: str | None = None) -> ExitCode:
        return self._guard(lambda: self.executor.exec(cmd, key, size, directory))

    def toggle_command(self, args: str, count: int = 1) -> ExitCode:
        def action() -> None:
            parsed = parse_arguments(args)
            self.controller.toggle(count, parsed.size, parsed.dir)

        return self._guard(action)

    def exec_command(self, args: str, count: int = 1) -> ExitCode:
        if not isinstance(args, str) or "cmd" not in args:
            self._notify(EXEC_USAGE, "error")
            return ExitCode.VALIDATION_ERROR

        def action() -> None:
            parsed = parse_arguments(args)
            if parsed.cmd is None:
                raise ValidationError("Missing cmd argument.", hint=EXEC_USAGE)
            self.executor.exec(parsed.cmd, count, parsed.size, parsed.dir)

        return self._guard(action)

    def on_process_started(
        self,
        buffer_id: str,
        process: str,
        *,
        window_id: str | None = NO_WINDOW,
        terminal_id: int | None = None,
        key: int | None = None,
        directory: str | None = None,
    ) -> ExitCode:
        return self._guard(
            lambda: self.controller.on_process_started(
                buffer_id,
                process,
                window_id=window_id,
                terminal_id=terminal_id,
                key=key,
                directory=directory,
            )
        )

    def on_last_window_closing(self, buffer_id: str, window_count: int) -> bool:
        try:
            return self.controller.on_last_window_closing(buffer_id, window_count)
        except TermToggleError as exc:
            self._report(exc)
            return False

    def _guard(self, action: Callable[[], object]) -> ExitCode:
        try:
            action()
        except TermToggleError as exc:
            self._report(exc)
            return exc.code
        return ExitCode.SUCCESS

    def _report(self, exc: TermToggleError) -> None:
        logger.error(
            "Handled TermToggleError (code=%s): %s",
            int(exc.code),
            exc.message,
            exc_info=logger.isEnabledFor(py_logging.DEBUG),
        )
        self._notify(user_facing_error(exc.message, hint=exc.hint), "error")
