from __future__ import annotations

import logging as py_logging

import pytest

from termtoggle.config import AppConfig
from termtoggle.errors import ValidationError
from termtoggle.terminal import NO_WINDOW, TERMINAL_TYPE, Direction, TerminalState, ToggleController


def test_smart_toggle_with_nothing_open_opens_terminal_one(controller, host) -> None:
    terminal = controller.toggle(1)

    assert controller.registry.all() == {1: terminal}
    assert terminal.id == 1
    assert terminal.state() == TerminalState.VISIBLE


def test_smart_toggle_closes_highest_visible_terminal(controller, host) -> None:
    first = controller.open(1)
    second = controller.open(2)
    third = controller.open(3)
    controller.close(1)

    closed = controller.toggle(1)

    assert closed is third
    assert third.window_id is NO_WINDOW
    assert second.state() == TerminalState.VISIBLE
    assert first.state() == TerminalState.HIDDEN


def test_smart_toggle_skips_hidden_high_terminals(controller, host) -> None:
    controller.open(1)
    controller.open(2)
    controller.close(2)

    closed = controller.toggle(0)

    assert closed is controller.registry.get(1)
    assert list(host.windows) == ["win-0"]


def test_smart_toggle_open_then_close_round_trip(controller) -> None:
    opened = controller.toggle()
    closed = controller.toggle()

    assert opened is closed
    assert closed.window_id is NO_WINDOW
    assert closed.state() == TerminalState.HIDDEN


def test_explicit_toggle_creates_with_sequential_id_and_size(controller, host) -> None:
    terminal = controller.toggle(2, 15)

    assert list(controller.registry.all()) == [2]
    assert terminal.id == 1
    assert terminal.state() == TerminalState.VISIBLE
    assert host.spawn_calls[0]["size"] == 15


def test_explicit_toggle_closes_visible_terminal(controller) -> None:
    controller.toggle(2, 15)

    terminal = controller.toggle(2)

    assert terminal.window_id is NO_WINDOW
    assert len(controller.registry) == 1


def test_smart_toggle_falls_back_to_highest_key_on_inconsistent_state(controller, host, caplog) -> None:
    controller.open(1)
    controller.close(1)
    host.windows["win-foreign"] = "buf-foreign"
    host.buffer_types["buf-foreign"] = TERMINAL_TYPE

    with caplog.at_level(py_logging.WARNING, logger="termtoggle"):
        target = controller.toggle()

    assert target is controller.registry.get(1)
    assert "Smart toggle fallback" in caplog.text
    assert [event.step for event in controller.list_events()][-1] == "inconsistent-state"
    assert "win-foreign" in host.windows


def test_smart_toggle_with_foreign_windows_and_empty_registry_does_nothing(controller, host) -> None:
    host.windows["win-foreign"] = "buf-foreign"
    host.buffer_types["buf-foreign"] = TERMINAL_TYPE

    assert controller.toggle() is None
    assert controller.registry.all() == {}


def test_smart_toggle_rebinds_stale_window_before_closing(controller, host) -> None:
    terminal = controller.open(1)
    terminal.window_id = "win-stale"

    controller.toggle()

    assert terminal.window_id is NO_WINDOW
    assert all(buffer != terminal.buffer_id for buffer in host.windows.values())


def test_close_returns_focus_to_origin_window(controller, host) -> None:
    terminal = controller.open(1, current_window="win-0")
    assert host.current == terminal.window_id

    controller.close(1, current_window=terminal.window_id)

    assert controller.origin_window == "win-0"
    assert host.focus_calls[-1] == "win-0"


def test_close_unknown_terminal_registers_hidden_entry(controller, host) -> None:
    terminal = controller.close(4)

    assert controller.registry.all() == {4: terminal}
    assert terminal.state() == TerminalState.UNCREATED
    assert host.spawn_calls == []


def test_open_expands_directory(controller, host, monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))

    terminal = controller.open(1, directory="~/project")

    assert terminal.directory == str(tmp_path / "project")
    assert host.spawn_calls[0]["directory"] == str(tmp_path / "project")


@pytest.mark.parametrize(
    ("kwargs", "message"),
    [
        ({"count": "2"}, "count"),
        ({"count": True}, "count"),
        ({"count": 2, "size": 0}, "size"),
        ({"count": 2, "size": "15"}, "size"),
        ({"count": 2, "directory": 5}, "directory"),
    ],
)
def test_toggle_validates_before_mutating(controller, host, kwargs: dict[str, object], message: str) -> None:
    with pytest.raises(ValidationError) as exc:
        controller.toggle(**kwargs)

    assert message in exc.value.message
    assert controller.registry.all() == {}
    assert host.spawn_calls == []


def test_on_process_started_registers_unknown_buffer(controller, host) -> None:
    terminal = controller.on_process_started("buf-x", "proc-x", window_id="win-x", terminal_id=1, directory="/srv")

    assert controller.registry.all() == {1: terminal}
    assert (terminal.buffer_id, terminal.process, terminal.window_id) == ("buf-x", "proc-x", "win-x")
    assert terminal.directory == "/srv"


def test_on_process_started_restores_aliased_terminal_under_its_key(controller, host) -> None:
    host.windows["win-x"] = "buf-x"
    host.buffer_types["buf-x"] = TERMINAL_TYPE
    host.alive["proc-x"] = True

    restored = controller.on_process_started("buf-x", "proc-x", window_id="win-x", terminal_id=1, key=2)
    toggled = controller.toggle(2, current_window="win-0")

    assert toggled is restored
    assert (restored.key, restored.id) == (2, 1)
    assert controller.registry.all() == {2: restored}
    assert restored.window_id is NO_WINDOW
    assert host.spawn_calls == []


def test_on_process_started_without_id_uses_next_sequential_key(controller) -> None:
    controller.open(1)

    terminal = controller.on_process_started("buf-x", "proc-x")

    assert controller.registry.get(2) is terminal
    assert terminal.id == 2


def test_on_process_started_refetches_existing_entry(controller, host) -> None:
    terminal = controller.open(1, 9)
    host.sizes[terminal.window_id] = 3

    again = controller.on_process_started(terminal.buffer_id, terminal.process, window_id=terminal.window_id)

    assert again is terminal
    assert len(controller.registry) == 1
    assert host.sizes[terminal.window_id] == 9


def test_on_process_started_binds_process_to_pending_entry(controller, host) -> None:
    pending = controller.close(1)
    host.windows["win-x"] = "buf-x"

    terminal = controller.on_process_started("buf-x", "proc-x", window_id="win-x", terminal_id=1)

    assert terminal is pending
    assert terminal.process == "proc-x"
    assert terminal.window_id == "win-x"


def test_on_last_window_closing_clears_terminal_window(controller, host) -> None:
    terminal = controller.open(1)

    assert controller.on_last_window_closing(terminal.buffer_id, 1) is True
    assert terminal.window_id is NO_WINDOW


def test_on_last_window_closing_ignores_other_cases(controller, host) -> None:
    terminal = controller.open(1)

    assert controller.on_last_window_closing(terminal.buffer_id, 2) is False
    assert controller.on_last_window_closing("buf-0", 1) is False
    assert terminal.window_id is not NO_WINDOW


def test_reset_forgets_terminals(controller) -> None:
    controller.open(1)

    controller.reset()

    assert controller.registry.all() == {}
    assert controller.origin_window is NO_WINDOW


def test_events_are_logged_and_listed(controller, caplog) -> None:
    with caplog.at_level(py_logging.INFO, logger="termtoggle"):
        controller.toggle()
        controller.toggle()

    assert [(event.terminal_id, event.step) for event in controller.list_events()] == [(1, "spawn"), (1, "close")]
    assert "terminal-event terminal=1 step=spawn" in caplog.text

    controller.clear_events()
    assert controller.list_events() == []


def test_from_config_applies_terminal_defaults(host) -> None:
    controller = ToggleController.from_config(
        host,
        AppConfig(size=20, direction="vertical", shell="/bin/zsh", persist_size=False),
    )

    terminal = controller.open(1)

    assert host.spawn_calls[0] == {
        "directory": terminal.directory,
        "shell": "/bin/zsh",
        "size": 20,
        "direction": Direction.VERTICAL,
    }
    assert terminal.persist_size is False
