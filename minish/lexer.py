"""Turning an input line into words: quoting, operator spacing, checks and expansion."""

from __future__ import annotations

import string

from .environment import Environment

# Stand-ins for characters whose special meaning a quote has switched off.
_SINGLE_QUOTE = "\ue001"
_DOUBLE_QUOTE = "\ue002"
_DOLLAR = "\ue003"
_GREATER = "\ue004"
_PIPE = "\ue005"
_LESS = "\ue006"

_QUOTED_OPERATORS = {">": _GREATER, "|": _PIPE, "<": _LESS}
_RESTORE = str.maketrans({_DOLLAR: "$", _GREATER: ">", _PIPE: "|", _LESS: "<"})
_DROP_QUOTES = str.maketrans({_SINGLE_QUOTE: None, _DOUBLE_QUOTE: None})

_OPERATORS = "|><"
_BLANKS = " \t"
_IDENTIFIER = frozenset(string.ascii_letters + string.digits + "_")


class ShellSyntaxError(Exception):
    """An operator stands where the grammar does not allow it."""

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(
            f"-minishell: erro de sintaxe próximo ao token inesperado `{token}'"
        )


def _has_closing_quote(line: str, start: int, quote: str) -> bool:
    return line.find(quote, start + 1) != -1


def _mark(char: str, single: int, double: int) -> str:
    quoted = single == 1 or double == 1
    if char == "\t" and single == 0 and double == 0:
        return " "
    if char == " " and quoted:
        return "\t"
    if char == "'" and double == 0 and single != 0:
        return _SINGLE_QUOTE
    if char == '"' and single == 0 and double != 0:
        return _DOUBLE_QUOTE
    if char == "$" and single == 1:
        return _DOLLAR
    if char in _QUOTED_OPERATORS and quoted:
        return _QUOTED_OPERATORS[char]
    return char


def mark_quotes(line: str) -> str:
    """Mark the quotes that pair up and the characters they protect.

    Blanks inside quotes become tabs, so that splitting keeps them inside one
    word; tabs outside quotes become spaces. An unpaired quote stays literal.
    """
    single = 0
    double = 0
    marked = []
    for index, char in enumerate(line):
        if char == "'" and double == 0 and (
            single == 1 or _has_closing_quote(line, index, "'")
        ):
            single += 1
        elif char == '"' and single == 0 and (
            double == 1 or _has_closing_quote(line, index, '"')
        ):
            double += 1
        marked.append(_mark(char, single, double))
        if single == 2:
            single = 0
        elif double == 2:
            double = 0
    return "".join(marked)


def remove_quotes(line: str) -> str:
    """Drop the quote characters that :func:`mark_quotes` found paired."""
    return line.translate(_DROP_QUOTES)


def restore_characters(args: list[str]) -> list[str]:
    """Give quoted '$', '>', '|' and '<' their ordinary characters back."""
    return [word.translate(_RESTORE) for word in args]


def separate_operators(line: str) -> str:
    """Put a space between each run of operators and the words around it."""
    pieces = []
    for char, following in zip(line, line[1:] + "\0"):
        pieces.append(char)
        if char not in _BLANKS and char not in _OPERATORS and following in _OPERATORS:
            pieces.append(" ")
        elif (
            char in _OPERATORS
            and following not in _BLANKS
            and following not in _OPERATORS
            and following != "\0"
        ):
            pieces.append(" ")
    return "".join(pieces)


def split_words(line: str, sep: str) -> list[str]:
    """Split ``line`` on runs of ``sep``, leaving out empty words."""
    return [word for word in line.split(sep) if word]


def _second(word: str) -> str:
    return word[1:2]


def _check_pipe(word: str, following: str) -> None:
    if following[:1] and following[0] in _OPERATORS:
        raise ShellSyntaxError(word[0])
    if _second(word) and _second(word) in _OPERATORS:
        raise ShellSyntaxError(word[0])


def _check_redirect(word: str, following: str, forbidden: str) -> None:
    if following[:1] and following[0] in forbidden:
        raise ShellSyntaxError(following[0])
    if _second(word) and _second(word) in forbidden:
        raise ShellSyntaxError(word[0])


def check_operators(args: list[str]) -> None:
    """Raise :class:`ShellSyntaxError` at the first misplaced operator."""
    for index, word in enumerate(args):
        first = word[:1]
        if index + 1 == len(args):
            if first and first in _OPERATORS:
                raise ShellSyntaxError("newline")
            return
        following = args[index + 1]
        if first == "|":
            _check_pipe(word, following)
        elif first == ">":
            _check_redirect(word, following, "|<")
        elif first == "<":
            _check_redirect(word, following, "|>")


def _has_dollar_sign(word: str) -> bool:
    return any(char == "$" for char in word[:-1])


def _expand_all(word: str, env: Environment) -> str:
    out = []
    index = 0
    length = len(word)
    while index < length:
        char = word[index]
        if char == "$":
            rest = word[index + 1:]
            value = env.get(rest)
            if value is not None:
                out.append(value)
            if rest.startswith("?"):
                index += 1
            else:
                while index + 1 < length and word[index + 1] in _IDENTIFIER:
                    index += 1
        else:
            out.append(char)
        index += 1
    return "".join(out)


def expand_variables(word: str, env: Environment) -> str:
    """Replace ``$NAME`` and ``$?`` in ``word`` with their values.

    When the first variable named in the word is unknown, the word is cut
    off at its first '$'.
    """
    if not _has_dollar_sign(word):
        return word
    first = word.index("$")
    if env.lookup(word[first + 1:]) is None:
        return word[:first]
    return _expand_all(word, env)


def parse_line(line: str | None, env: Environment) -> list[str] | None:
    """Turn an input line into words, or None when it holds nothing to run.

    Quoted operators and '$' in the result are still marked; pass the words
    through :func:`restore_characters` before running them.
    """
    if not line:
        return None
    prepared = separate_operators(remove_quotes(mark_quotes(line)))
    words = split_words(prepared, " ")
    check_operators(words)
    if not words:
        return None
    return [expand_variables(word.replace("\t", " "), env) for word in words]


def contains_operator(args: list[str], operator: str) -> bool:
    """Tell whether any word holds the unquoted character ``operator``."""
    return any(operator in word for word in args)


def next_operator(args: list[str]) -> str | None:
    """Return the first operator word: '|', '>', '>>', '<' or '<<'; else None."""
    for word in args:
        first, second = word[:1], _second(word)
        if first == "|" and not second:
            return "|"
        if first == ">" and not second:
            return ">"
        if first == ">" and second == ">":
            return ">>"
        if first == "<" and not second:
            return "<"
        if first == "<" and second == "<":
            return "<<"
    return None