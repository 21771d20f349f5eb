"""Shell variables: the full variable list and the exported subset."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

_WHITESPACE = "\t\n\v\f\r "
_STATUS_PREFIX = "?="


def _is_identifier_char(char: str) -> bool:
    return char == "_" or ("0" <= char <= "9") or ("A" <= char <= "Z") or ("a" <= char <= "z")


def compare_variable(entry: str, name: str | None) -> bool:
    """Tell whether ``entry`` ("NAME=value") matches the variable ``name``.

    The name is compared only up to its first character that cannot be part
    of an identifier, and only as far as both strings reach.
    """
    if name is None:
        return False
    for entry_char, name_char in zip(entry, name):
        if not _is_identifier_char(name_char):
            break
        if entry_char != name_char:
            return False
    return True


def has_metacharacter(word: str) -> bool:
    """Tell whether the part of ``word`` before '=' holds a non-identifier character."""
    for char in word.partition("=")[0]:
        if (
            char <= "/"
            or ":" <= char <= "@"
            or "[" <= char <= "^"
            or char == "`"
            or char >= "{"
        ):
            return True
    return False


def is_declaration(word: str | None) -> bool:
    """Tell whether ``word`` is a variable assignment such as ``NAME=value``."""
    if word is None or (word and word[0].isascii() and word[0].isdigit()):
        return False
    if has_metacharacter(word):
        return False
    return "=" in word


def variable_name(word: str | None) -> str | None:
    """Return the part of ``word`` before its first '='."""
    if word is None:
        return None
    return word.partition("=")[0]


def parse_int(text: str) -> int:
    """Read a leading decimal integer the way ``atoi`` does; 0 if there is none."""
    text = text.lstrip(_WHITESPACE)
    sign = 1
    if text.startswith("-"):
        sign = -1
        text = text[1:]
    elif text.startswith("+"):
        text = text[1:]
    result = 0
    for char in text:
        if not ("0" <= char <= "9"):
            break
        result = result * 10 + ord(char) - ord("0")
    return result * sign


@dataclass(eq=False)
class _Entry:
    text: str


class Environment:
    """Ordered shell variables, some of which are exported to child programs."""

    def __init__(self, initial: Mapping[str, str] | Iterable[str] = ()) -> None:
        if isinstance(initial, Mapping):
            texts = [f"{key}={value}" for key, value in initial.items()]
        else:
            texts = list(initial)
        self._entries: list[_Entry] = [_Entry(text) for text in texts]
        self._exported: list[_Entry] = list(self._entries)
        self._entries.append(_Entry(f"{_STATUS_PREFIX}0"))

    def _find(self, name: str | None) -> _Entry | None:
        if name is None:
            return None
        if name == "?":
            for entry in self._entries:
                if entry.text.startswith(_STATUS_PREFIX):
                    return entry
        for entry in self._entries:
            if compare_variable(entry.text, name):
                return entry
        return None

    def lookup(self, name: str | None) -> str | None:
        """Return the whole ``NAME=value`` entry for ``name``, or None."""
        entry = self._find(name)
        return entry.text if entry else None

    def get(self, name: str | None) -> str | None:
        """Return the value of ``name``, or None when it is not set."""
        text = self.lookup(name)
        if text is None:
            return None
        return text.partition("=")[2]

    def set_status(self, status: int) -> None:
        """Record ``status`` as the value of ``$?``."""
        for entry in self._entries:
            if entry.text.startswith(_STATUS_PREFIX):
                entry.text = f"{_STATUS_PREFIX}{status}"

    def status(self) -> int:
        """Return the value of ``$?`` as an integer."""
        value = self.get("?")
        return parse_int(value) if value is not None else 0

    def assign(self, declarations: Iterable[str]) -> None:
        """Set each ``NAME=value`` word, replacing an existing variable in place."""
        for word in declarations:
            entry = self._find(variable_name(word))
            if entry is not None:
                entry.text = word
            else:
                self._entries.append(_Entry(word))

    def export(self, name: str | None) -> None:
        """Mark the variable ``name`` as exported, if it exists."""
        entry = self._find(name)
        if entry is not None and not any(item is entry for item in self._exported):
            self._exported.append(entry)

    def unset(self, name: str | None) -> None:
        """Remove the first variable matching ``name``."""
        for index, entry in enumerate(self._exported):
            if compare_variable(entry.text, name):
                del self._exported[index]
                break
        for index, entry in enumerate(self._entries):
            if compare_variable(entry.text, name):
                del self._entries[index]
                break

    def exported(self) -> list[str]:
        """Return the exported variables as ``NAME=value`` strings."""
        return [entry.text for entry in self._exported]

    def entries(self) -> list[str]:
        """Return every variable, in order, as ``NAME=value`` strings."""
        return [entry.text for entry in self._entries]