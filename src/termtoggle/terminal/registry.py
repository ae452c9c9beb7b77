"""Sparse, key-addressed collection of terminals."""

from __future__ import annotations

import logging as py_logging
from collections.abc import Callable

from termtoggle.terminal.entity import Terminal

logger = py_logging.getLogger(__name__)

TerminalFactory = Callable[[int, str], Terminal]


class TerminalRegistry:
    """Source of truth for which terminals exist.

    Entries are stored under the key the caller asked for, while a new
    terminal's own ``id`` is always ``len(registry) + 1``. Under sequential
    use the two agree; out-of-order keys (asking for 3 before 2 exists)
    yield a terminal whose ``id`` differs from its key.
    """

    def __init__(self, factory: TerminalFactory) -> None:
        self._factory = factory
        self._terminals: dict[int, Terminal] = {}

    def __len__(self) -> int:
        return len(self._terminals)

    def __contains__(self, key: object) -> bool:
        return key in self._terminals

    def next_id(self) -> int:
        return len(self._terminals) + 1

    def get(self, key: int) -> Terminal | None:
        return self._terminals.get(key)

    def get_or_create(self, key: int, directory: str) -> tuple[Terminal, bool]:
        existing = self._terminals.get(key)
        if existing is not None:
            return existing, False
        return self._store(key, self._factory(self.next_id(), directory)), True

    def restore(self, key: int, terminal_id: int, directory: str) -> Terminal:
        """Re-register a terminal that already carries an id, e.g. one found in a running host."""
        existing = self._terminals.get(key)
        if existing is not None:
            return existing
        return self._store(key, self._factory(terminal_id, directory))

    def _store(self, key: int, terminal: Terminal) -> Terminal:
        terminal.key = key
        self._terminals[key] = terminal
        if terminal.id != key:
            logger.debug("Registered terminal id=%s under key=%s", terminal.id, key)
        return terminal

    def find_by_buffer(self, buffer_id: str) -> tuple[int, Terminal] | None:
        for key, terminal in self._terminals.items():
            if terminal.buffer_id == buffer_id:
                return key, terminal
        return None

    def keys_descending(self) -> list[int]:
        return sorted(self._terminals, reverse=True)

    def all(self) -> dict[int, Terminal]:
        return dict(self._terminals)

    def reset(self) -> None:
        self._terminals.clear()
