"""Public CLI contract and entrypoint."""

from __future__ import annotations

import argparse
import logging as py_logging
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

from .args import parse_argument_list
from .commands import TerminalCommands
from .config import AppConfig, load_config
from .errors import ExitCode, TermToggleError, user_facing_error
from .logging import configure_logging, default_log_path
from .terminal import NO_WINDOW, Host
from .tmux.host import TmuxHost, in_tmux, tmux_available

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")

HostFactory = Callable[[AppConfig], Host]


def _log_level_type(value: str) -> str:
    normalized = value.upper()
    if normalized == "WARNING":
        normalized = "WARN"
    if normalized not in _VALID_LOG_LEVELS:
        accepted = ", ".join(_VALID_LOG_LEVELS)
        raise argparse.ArgumentTypeError(f"--log-level must be one of: {accepted}")
    return normalized


def _terminal_id_type(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("terminal id must be an integer") from exc
    if number < 1:
        raise argparse.ArgumentTypeError("terminal id must be 1 or greater")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="termtoggle")
    parser.add_argument("--config", type=Path, default=None)
    parser.add_argument("--log-level", type=_log_level_type, default=None)
    parser.add_argument("--log-file", type=Path, default=None)
    subparsers = parser.add_subparsers(dest="command", required=True)

    toggle = subparsers.add_parser("toggle", help="Open or close a terminal")
    toggle.add_argument("tokens", nargs="*", metavar="[COUNT] [key=value]")

    open_parser = subparsers.add_parser("open", help="Open terminal ID")
    open_parser.add_argument("id", type=_terminal_id_type)
    open_parser.add_argument("tokens", nargs="*", metavar="key=value")

    close = subparsers.add_parser("close", help="Hide terminal ID")
    close.add_argument("id", type=_terminal_id_type)

    exec_parser = subparsers.add_parser("exec", help="Run cmd=... in a terminal")
    exec_parser.add_argument("tokens", nargs="*", metavar="[COUNT] key=value")

    subparsers.add_parser("list", help="List registered terminals")
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def split_count(tokens: Sequence[str]) -> tuple[int, list[str]]:
    """Peel an optional leading terminal count off the argument tokens."""
    remaining = list(tokens)
    if remaining and remaining[0].isdigit():
        return int(remaining.pop(0)), remaining
    return 1, remaining


def default_host(config: AppConfig) -> Host:
    if not config.tmux_socket and not in_tmux():
        raise TermToggleError(
            "termtoggle must run inside a tmux session.",
            code=ExitCode.TMUX_ERROR,
            hint="Start tmux first or set tmux_socket in the config.",
        )
    if not tmux_available():
        raise TermToggleError(
            "tmux executable was not found.",
            code=ExitCode.TMUX_ERROR,
            hint="Install tmux and make sure it is on PATH.",
        )
    return TmuxHost(socket=config.tmux_socket)


def print_notifier(message: str, level: str) -> None:
    print(message, file=sys.stderr if level == "error" else sys.stdout)


def rehydrate(commands: TerminalCommands, host: object) -> int:
    discover = getattr(host, "discover", None)
    if discover is None:
        return 0
    panes = discover()
    for pane in panes:
        commands.on_process_started(
            pane.pane_id,
            pane.pane_id,
            window_id=pane.pane_id if pane.visible else NO_WINDOW,
            terminal_id=pane.terminal_id,
            key=pane.key,
            directory=pane.directory,
        )
    return len(panes)


def run_command(namespace: argparse.Namespace, commands: TerminalCommands) -> int:
    if namespace.command == "toggle":
        count, rest = split_count(namespace.tokens)
        parsed = parse_argument_list(rest)
        return int(commands.toggle(count, parsed.size, parsed.dir))
    if namespace.command == "open":
        parsed = parse_argument_list(namespace.tokens)
        return int(commands.open(namespace.id, parsed.size, parsed.dir))
    if namespace.command == "close":
        return int(commands.close(namespace.id))
    if namespace.command == "exec":
        count, rest = split_count(namespace.tokens)
        if not any(token.startswith("cmd=") for token in rest):
            return int(commands.exec_command("", count))
        parsed = parse_argument_list(rest)
        return int(commands.exec(parsed.cmd or "", count, parsed.size, parsed.dir))

    for key, terminal in sorted(commands.controller.registry.all().items()):
        print(f"{key}\t{terminal.id}\t{terminal.state().value}\t{terminal.directory}")
    return int(ExitCode.SUCCESS)


def main(
    argv: Sequence[str] | None = None,
    *,
    host_factory: HostFactory | None = None,
) -> int:
    log_path = default_log_path()
    logger = configure_logging(log_file=log_path)
    parser = build_parser()
    try:
        namespace = parser.parse_args(argv)
    except SystemExit as exc:
        if exc.code not in (None, 0):
            logger.warning("Argument parsing failed with exit code %s", exc.code)
        return int(exc.code or 0)

    config = load_config(namespace.config)
    if namespace.log_file is not None:
        log_path = namespace.log_file.expanduser()
    logger = configure_logging(level=namespace.log_level or config.log_level, log_file=log_path)

    try:
        host = (host_factory or default_host)(config)
        commands = TerminalCommands.from_config(host, config, notify=print_notifier)
        restored = rehydrate(commands, host)
        logger.debug("Rehydrated %s terminal(s); running command=%s", restored, namespace.command)
        return run_command(namespace, commands)
    except TermToggleError as exc:
        logger.error(
            "Handled TermToggleError (code=%s): %s",
            int(exc.code),
            exc.message,
            exc_info=logger.isEnabledFor(py_logging.DEBUG),
        )
        print(user_facing_error(exc.message, hint=exc.hint), file=sys.stderr)
        return int(exc.code)
    except Exception:
        logger.exception("Unhandled exception in CLI entrypoint")
        print(user_facing_error("Unexpected runtime failure", hint=f"Inspect logs: {log_path}"), file=sys.stderr)
        return int(ExitCode.RUNTIME_ERROR)


def run(argv: Sequence[str] | None = None) -> int:
    return main(argv)
