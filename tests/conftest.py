from __future__ import annotations

import logging as py_logging
from pathlib import Path

import pytest

from termtoggle.terminal import Direction, SpawnedTerminal, ToggleController

DEFAULT_SPLIT = 10


class FakeHost:
    """In-memory windowing/buffer/process host.

    ``win-0`` is the editor window the user starts in; every spawn or split
    adds a new window and focuses it, like a real split would.
    """

    def __init__(self) -> None:
        self.windows: dict[str, str] = {"win-0": "buf-0"}
        self.buffer_types: dict[str, str] = {}
        self.buffer_tags: dict[str, tuple[int, int]] = {}
        self.alive: dict[str, bool] = {}
        self.sizes: dict[str, int] = {}
        self.sent: list[tuple[str, str]] = []
        self.spawn_calls: list[dict[str, object]] = []
        self.focus_calls: list[str] = []
        self.input_mode_exits: list[str] = []
        self.current = "win-0"
        self.fail_spawn = False
        self._counter = 0

    def _next(self, prefix: str) -> str:
        self._counter += 1
        return f"{prefix}-{self._counter}"

    def list_windows(self) -> list[str]:
        return list(self.windows)

    def window_buffer(self, window_id: str) -> str:
        return self.windows[window_id]

    def window_is_valid(self, window_id: str | None) -> bool:
        return window_id is not None and window_id in self.windows

    def current_window(self) -> str:
        return self.current

    def focus_window(self, window_id: str) -> None:
        self.focus_calls.append(window_id)
        self.current = window_id

    def split_window(self, buffer_id: str, *, size: int | None, direction: Direction) -> str:
        window = self._next("win")
        self.windows[window] = buffer_id
        self.sizes[window] = size or DEFAULT_SPLIT
        self.current = window
        return window

    def hide_window(self, window_id: str) -> None:
        del self.windows[window_id]
        if self.current == window_id:
            self.current = "win-0"

    def resize_window(self, window_id: str, *, size: int, direction: Direction) -> None:
        self.sizes[window_id] = size

    def window_size(self, window_id: str, *, direction: Direction) -> int:
        return self.sizes.get(window_id, DEFAULT_SPLIT)

    def leave_input_mode(self, window_id: str) -> None:
        self.input_mode_exits.append(window_id)

    def buffer_type(self, buffer_id: str) -> str:
        return self.buffer_types.get(buffer_id, "")

    def set_buffer_type(self, buffer_id: str, value: str, *, terminal_id: int, key: int) -> None:
        self.buffer_types[buffer_id] = value
        self.buffer_tags[buffer_id] = (terminal_id, key)

    def spawn(
        self,
        *,
        directory: str,
        shell: str,
        size: int | None,
        direction: Direction,
    ) -> SpawnedTerminal:
        self.spawn_calls.append({"directory": directory, "shell": shell, "size": size, "direction": direction})
        if self.fail_spawn:
            raise RuntimeError("shell not found")
        buffer_id = self._next("buf")
        process = self._next("proc")
        window = self.split_window(buffer_id, size=size, direction=direction)
        self.alive[process] = True
        return SpawnedTerminal(buffer_id=buffer_id, window_id=window, process=process)

    def send(self, process: str, text: str) -> None:
        self.sent.append((process, text))

    def is_alive(self, process: str) -> bool:
        return self.alive.get(process, False)

    def kill(self, process: str) -> None:
        self.alive[process] = False

    def sent_text(self) -> list[str]:
        return [text for _, text in self.sent]


@pytest.fixture(autouse=True)
def _reset_package_logger() -> None:
    # configure_logging() detaches the package logger from root, which hides records from caplog.
    logger = py_logging.getLogger("termtoggle")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(py_logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def controller(host: FakeHost) -> ToggleController:
    return ToggleController(host, shell="/bin/bash", size=None)


@pytest.hookimpl(trylast=True)
def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    del config
    for item in items:
        path = Path(str(getattr(item, "path", item.fspath)))
        if "tmux" in path.parts:
            item.add_marker(pytest.mark.tmux)
        if "property" in path.parts:
            item.add_marker(pytest.mark.property)
