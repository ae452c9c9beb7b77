from __future__ import annotations

import pytest

from termtoggle.args import TermArgs, parse_argument_list, parse_arguments, split_arguments
from termtoggle.errors import ExitCode, ValidationError


def test_parses_size_dir_and_quoted_cmd() -> None:
    parsed = parse_arguments("size=15 dir=~/dotfiles cmd='git commit -v'")

    assert parsed == TermArgs(size=15, dir="~/dotfiles", cmd="git commit -v")


def test_double_quotes_are_supported_for_any_key() -> None:
    parsed = parse_arguments('cmd="echo hi" dir="/tmp/with space"')

    assert parsed.cmd == "echo hi"
    assert parsed.dir == "/tmp/with space"


@pytest.mark.parametrize("args", [None, "", "   "])
def test_empty_arguments_decode_to_defaults(args: str | None) -> None:
    assert parse_arguments(args) == TermArgs()


def test_unknown_keys_and_bare_tokens_are_ignored() -> None:
    raw = split_arguments("size=3 colour=red stray")

    assert raw == {"size": "3"}


@pytest.mark.parametrize("value", ["abc", "0", "-4", "1.5"])
def test_invalid_size_is_rejected(value: str) -> None:
    with pytest.raises(ValidationError) as exc:
        parse_arguments(f"size={value}")

    assert exc.value.code == ExitCode.VALIDATION_ERROR


def test_unbalanced_quotes_are_rejected() -> None:
    with pytest.raises(ValidationError):
        parse_arguments("cmd='ls -l")


def test_empty_dir_is_treated_as_missing() -> None:
    assert parse_arguments("dir=").dir is None


def test_argument_list_preserves_values_with_spaces() -> None:
    parsed = parse_argument_list(["cmd=git status --short", "size=8"])

    assert parsed == TermArgs(size=8, cmd="git status --short")
