"""Redirecting a command's standard input and output: '>', '>>', '<' and '<<'."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from contextlib import suppress
from itertools import takewhile

from .builtins import run_command
from .environment import Environment
from .lexer import expand_variables, next_operator, restore_characters

HEREDOC_FILE = ".heredoc"
_OPERATOR_CHARS = "|><"
_OUTPUT_MODE = 0o664
_HEREDOC_MODE = 0o600
_NO_SUCH_FILE = "-minishel: %s: Arquivo ou diretório inexistente"
_REDIRECTIONS = frozenset({">", ">>", "<", "<<"})


def _is_operator_word(word: str) -> bool:
    return word[:1] != "" and word[0] in _OPERATOR_CHARS


def _operand(args: list[str], first_char: str) -> str | None:
    """Return the word after the first word starting with ``first_char``."""
    for index, word in enumerate(args):
        if word.startswith(first_char):
            if index + 1 < len(args):
                return restore_characters([args[index + 1]])[0]
            return None
    return None


def _flush(stream) -> None:
    with suppress(AttributeError, ValueError, OSError):
        stream.flush()


def _point_stdout_at(fd: int) -> None:
    current = sys.stdout
    _flush(current)
    os.dup2(fd, 1)
    encoding = getattr(current, "encoding", None) or "utf-8"
    sys.stdout = open(1, "w", encoding=encoding, closefd=False)


def _heredoc_opener(path: str, flags: int) -> int:
    return os.open(path, flags, _HEREDOC_MODE)


class Redirection:
    """Keep the shell's standard input and output, and put them back on exit."""

    def __enter__(self) -> Redirection:
        self._stdout = sys.stdout
        _flush(self._stdout)
        self._saved_fds = (os.dup(0), os.dup(1))
        return self

    def __exit__(self, exc_type, exc, traceback) -> bool:
        current = sys.stdout
        if current is not self._stdout:
            with suppress(ValueError, OSError):
                current.close()
        else:
            _flush(current)
        saved_in, saved_out = self._saved_fds
        os.dup2(saved_in, 0)
        os.dup2(saved_out, 1)
        os.close(saved_in)
        os.close(saved_out)
        sys.stdout = self._stdout
        return False


def redirect_output(args: list[str], append: bool) -> None:
    """Send standard output to the file after the first '>' word.

    The file is truncated unless ``append`` is set. A file that cannot be
    opened leaves the output where it was.
    """
    target = _operand(args, ">")
    if target is None:
        return
    flags = os.O_WRONLY | os.O_CREAT | (os.O_APPEND if append else os.O_TRUNC)
    try:
        fd = os.open(target, flags, _OUTPUT_MODE)
    except OSError:
        return
    try:
        _point_stdout_at(fd)
    finally:
        os.close(fd)


def redirect_input(args: list[str]) -> None:
    """Take standard input from the file after the first '<' word."""
    target = _operand(args, "<")
    if target is None:
        return
    try:
        fd = os.open(target, os.O_RDONLY)
    except OSError:
        print(_NO_SUCH_FILE % target)
        return
    try:
        os.dup2(fd, 0)
    finally:
        os.close(fd)


def heredoc(
    args: list[str],
    env: Environment,
    read_line: Callable[[str], str | None] | None = None,
) -> None:
    """Read lines up to the delimiter after '<<' and make them standard input.

    Each line has its variables expanded. Reading also stops at end of input.
    """
    delimiter = _operand(args, "<")
    read = read_line if read_line is not None else input
    with open(HEREDOC_FILE, "w", encoding="utf-8", opener=_heredoc_opener) as handle:
        while True:
            try:
                line = read("> ")
            except EOFError:
                break
            if line is None or line == delimiter:
                break
            handle.write(expand_variables(line, env) + "\n")
    fd = os.open(HEREDOC_FILE, os.O_RDONLY)
    try:
        os.dup2(fd, 0)
    finally:
        os.close(fd)


def command_words(args: list[str]) -> list[str]:
    """Return the words before the first operator, with quoted characters restored."""
    return restore_characters(list(takewhile(lambda word: not _is_operator_word(word), args)))


def _apply_redirections(args: list[str], env: Environment) -> str | None:
    operator = None
    index = 0
    while index + 1 < len(args) and not args[index].startswith("|"):
        rest = args[index:]
        operator = next_operator(rest)
        if operator == ">":
            redirect_output(rest, append=False)
        elif operator == ">>":
            redirect_output(rest, append=True)
        elif operator == "<":
            redirect_input(rest)
        elif operator == "<<":
            heredoc(rest, env)
        while index + 1 < len(args) and not _is_operator_word(args[index]):
            index += 1
        index += 1
    return operator


def run_redirections(line: str, args: list[str], env: Environment) -> None:
    """Apply the redirections in ``args``, run the command, then restore the streams."""
    words = command_words(args)
    operator = None
    try:
        with Redirection():
            operator = _apply_redirections(args, env)
            if operator in _REDIRECTIONS and words:
                run_command(line, words, env)
    finally:
        if operator in _REDIRECTIONS:
            with suppress(FileNotFoundError):
                os.unlink(HEREDOC_FILE)