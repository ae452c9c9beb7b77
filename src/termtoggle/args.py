"""Decoder for `key=value key2='quoted value'` command arguments."""

from __future__ import annotations

import logging as py_logging
import shlex
from dataclasses import dataclass

from typing_extensions import TypedDict

from termtoggle.errors import ValidationError

logger = py_logging.getLogger(__name__)

_KNOWN_KEYS = ("size", "dir", "cmd")


class RawTermArgs(TypedDict, total=False):
    size: str
    dir: str
    cmd: str


@dataclass(frozen=True)
class TermArgs:
    size: int | None = None
    dir: str | None = None
    cmd: str | None = None


def split_arguments(args: str) -> RawTermArgs:
    """Split an argument string into known keys; quotes are honoured for every value."""
    try:
        tokens = shlex.split(args)
    except ValueError as exc:
        raise ValidationError(
            f"Unbalanced quotes in arguments: {args}",
            hint="Quote values like cmd='git status'.",
        ) from exc

    raw = RawTermArgs()
    for token in tokens:
        key, sep, value = token.partition("=")
        if not sep or not key:
            logger.debug("Ignoring bare argument token=%s", token)
            continue
        if key not in _KNOWN_KEYS:
            logger.debug("Ignoring unknown argument key=%s", key)
            continue
        raw[key] = value  # type: ignore[literal-required]
    return raw


def _parse_size(value: str) -> int:
    try:
        size = int(value)
    except ValueError as exc:
        raise ValidationError(
            f"Invalid size: {value}",
            hint="size must be a positive integer.",
        ) from exc
    if size <= 0:
        raise ValidationError(
            f"Invalid size: {value}",
            hint="size must be a positive integer.",
        )
    return size


def parse_arguments(args: str | None) -> TermArgs:
    if not args or not args.strip():
        return TermArgs()
    raw = split_arguments(args)
    size = _parse_size(raw["size"]) if "size" in raw else None
    directory = raw.get("dir") or None
    cmd = raw.get("cmd")
    return TermArgs(size=size, dir=directory, cmd=cmd)


def parse_argument_list(values: list[str]) -> TermArgs:
    """Join already-split CLI tokens back into one decodable argument string."""
    return parse_arguments(" ".join(shlex.quote(value) for value in values))
