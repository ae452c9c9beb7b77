"""tmux argv builders for showing, hiding and driving terminal panes."""

from __future__ import annotations

from termtoggle.errors import ValidationError
from termtoggle.terminal.models import Direction

TYPE_OPTION = "@termtoggle_type"
ID_OPTION = "@termtoggle_id"
KEY_OPTION = "@termtoggle_key"
STASH_WINDOW_NAME = "termtoggle-stash"
PANE_ID_FORMAT = "#{pane_id}"
DISCOVER_FORMAT = "#{pane_id}\t#{" + ID_OPTION + "}\t#{" + KEY_OPTION + "}\t#{pane_current_path}"
WINDOW_NAME_FORMAT = "#{window_name}"


def _tmux(socket: str, *args: str) -> list[str]:
    if socket:
        return ["tmux", "-L", socket, *args]
    return ["tmux", *args]


def validate_pane_id(pane_id: str) -> str:
    if not pane_id.startswith("%") or not pane_id[1:].isdigit():
        raise ValidationError(
            f"Invalid tmux pane id: {pane_id!r}",
            hint="Pane ids look like %3.",
        )
    return pane_id


def validate_split_size(size: int | None) -> int | None:
    if size is not None and size <= 0:
        raise ValidationError(
            f"Invalid split size: {size}",
            hint="Use a positive row or column count.",
        )
    return size


def _split_flags(direction: Direction, size: int | None) -> list[str]:
    # tmux names splits by the divider: -v stacks panes, -h puts them side by side.
    flags = ["-v" if direction == Direction.HORIZONTAL else "-h"]
    if size is not None:
        flags.extend(["-l", str(size)])
    return flags


def build_spawn_command(
    *,
    directory: str,
    shell: str,
    size: int | None,
    direction: Direction,
    socket: str = "",
) -> list[str]:
    validate_split_size(size)
    if not shell.strip():
        raise ValidationError("Shell command cannot be empty.", hint="Set shell in the config.")
    return _tmux(
        socket,
        "split-window",
        "-P",
        "-F",
        PANE_ID_FORMAT,
        "-c",
        directory,
        *_split_flags(direction, size),
        shell,
    )


def build_show_command(
    pane_id: str,
    *,
    size: int | None,
    direction: Direction,
    socket: str = "",
) -> list[str]:
    validate_split_size(size)
    return _tmux(socket, "join-pane", "-s", validate_pane_id(pane_id), *_split_flags(direction, size))


def build_hide_command(pane_id: str, *, socket: str = "") -> list[str]:
    """Break the pane out into a new detached stash window."""
    return _tmux(socket, "break-pane", "-d", "-s", validate_pane_id(pane_id), "-n", STASH_WINDOW_NAME)


def build_stash_command(pane_id: str, *, socket: str = "") -> list[str]:
    """Move the pane into the existing stash window of the current session."""
    return _tmux(socket, "join-pane", "-d", "-s", validate_pane_id(pane_id), "-t", f":{STASH_WINDOW_NAME}")


def build_window_names_query(*, socket: str = "") -> list[str]:
    return _tmux(socket, "list-windows", "-F", WINDOW_NAME_FORMAT)


def build_resize_command(pane_id: str, *, size: int, direction: Direction, socket: str = "") -> list[str]:
    validate_split_size(size)
    axis = "-y" if direction == Direction.HORIZONTAL else "-x"
    return _tmux(socket, "resize-pane", "-t", validate_pane_id(pane_id), axis, str(size))


def build_size_query(pane_id: str, *, direction: Direction, socket: str = "") -> list[str]:
    field = "#{pane_height}" if direction == Direction.HORIZONTAL else "#{pane_width}"
    return _tmux(socket, "display-message", "-p", "-t", validate_pane_id(pane_id), field)


def build_send_keys_commands(pane_id: str, text: str, *, socket: str = "") -> list[list[str]]:
    target = validate_pane_id(pane_id)
    lines = text.split("\n")
    trailing_newline = lines[-1] == ""
    if trailing_newline:
        lines.pop()

    commands: list[list[str]] = []
    for index, line in enumerate(lines):
        if line:
            commands.append(_tmux(socket, "send-keys", "-t", target, "-l", line))
        if index < len(lines) - 1 or trailing_newline:
            commands.append(_tmux(socket, "send-keys", "-t", target, "Enter"))
    return commands


def build_tag_commands(
    pane_id: str,
    *,
    value: str,
    terminal_id: int,
    key: int,
    socket: str = "",
) -> list[list[str]]:
    target = validate_pane_id(pane_id)
    return [
        _tmux(socket, "set-option", "-p", "-t", target, TYPE_OPTION, value),
        _tmux(socket, "set-option", "-p", "-t", target, ID_OPTION, str(terminal_id)),
        _tmux(socket, "set-option", "-p", "-t", target, KEY_OPTION, str(key)),
    ]


def build_type_query(pane_id: str, *, socket: str = "") -> list[str]:
    return _tmux(socket, "show-options", "-p", "-q", "-v", "-t", validate_pane_id(pane_id), TYPE_OPTION)


def build_dead_query(pane_id: str, *, socket: str = "") -> list[str]:
    return _tmux(socket, "display-message", "-p", "-t", validate_pane_id(pane_id), "#{pane_dead}")


def build_list_panes_command(*, socket: str = "") -> list[str]:
    return _tmux(socket, "list-panes", "-F", PANE_ID_FORMAT)


def build_discover_command(*, socket: str = "") -> list[str]:
    return _tmux(socket, "list-panes", "-a", "-F", DISCOVER_FORMAT)


def build_current_pane_query(*, socket: str = "") -> list[str]:
    return _tmux(socket, "display-message", "-p", PANE_ID_FORMAT)


def build_focus_command(pane_id: str, *, socket: str = "") -> list[str]:
    return _tmux(socket, "select-pane", "-t", validate_pane_id(pane_id))


def build_leave_copy_mode_command(pane_id: str, *, socket: str = "") -> list[str]:
    return _tmux(socket, "copy-mode", "-q", "-t", validate_pane_id(pane_id))
