"""Command history kept in memory, in the line editor and in a file."""

from __future__ import annotations

import os
from collections.abc import Iterator
from typing import IO

try:
    import readline as _readline
except ImportError:  # pragma: no cover - platforms without GNU readline
    _readline = None

DEFAULT_HISTORY_FILE = ".minishell_history"
_CHUNK_SIZE = 100
_FILE_MODE = 0o664
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


def _history_opener(path: str, flags: int) -> int:
    return os.open(path, flags, _FILE_MODE)


def read_lines(stream: IO[str]) -> Iterator[str]:
    """Yield the lines of ``stream``, each with its '\\n' if it had one.

    Only '\\n' ends a line; the text after the last one is yielded as it is.
    """
    rest = ""
    while True:
        chunk = stream.read(_CHUNK_SIZE)
        if not chunk:
            break
        rest += chunk
        while (end := rest.find("\n")) != -1:
            yield rest[: end + 1]
            rest = rest[end + 1:]
    if rest:
        yield rest


class History:
    """The lines typed so far, stored in a file that outlives the shell."""

    def __init__(self, path: str | os.PathLike[str] = DEFAULT_HISTORY_FILE) -> None:
        self.path = path
        self.entries: list[str] = []

    def _remember(self, line: str) -> None:
        self.entries.append(line)
        if _readline is not None:
            _readline.add_history(line)

    def load(self) -> list[str]:
        """Read the history file into memory and return the lines it gave.

        The last character of every line is dropped, as a line is expected to
        end with '\\n'. A missing file gives no lines.
        """
        try:
            handle = open(self.path, encoding=_ENCODING, errors=_ERRORS, newline="")
        except OSError:
            return []
        with handle:
            loaded = [line[:-1] for line in read_lines(handle)]
        for line in loaded:
            self._remember(line)
        return loaded

    def add(self, line: str | None) -> None:
        """Remember ``line`` and append it to the history file."""
        if line is None:
            return
        self._remember(line)
        with open(
            self.path,
            "a",
            encoding=_ENCODING,
            errors=_ERRORS,
            newline="",
            opener=_history_opener,
        ) as handle:
            handle.write(line + "\n")