"""The interactive loop: read a line, parse it, run it."""

from __future__ import annotations

import os
import signal
import sys
from collections.abc import Iterable, Mapping
from contextlib import suppress

from .builtins import ShellExit, run_command
from .environment import Environment
from .history import History
from .lexer import ShellSyntaxError, contains_operator, parse_line, restore_characters
from .pipeline import run_pipeline
from .redirection import run_redirections

try:
    import readline as _readline
except ImportError:  # pragma: no cover - platforms without GNU readline
    _readline = None

PROMPT = "minishell: "


def handle_signal(signum, frame) -> None:
    """Answer Ctrl-C by moving to a fresh line instead of stopping."""
    sys.stdout.write("\n")
    with suppress(AttributeError, ValueError, OSError):
        sys.stdout.flush()
    if _readline is not None:
        with suppress(Exception):
            _readline.redisplay()


def init_shell(
    environ: Mapping[str, str] | Iterable[str],
    history: History | None = None,
) -> Environment:
    """Load the history, build the variables and install the signal handlers."""
    if history is not None:
        history.load()
    env = Environment(environ)
    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGQUIT, signal.SIG_IGN)
    return env


def execute_command(line: str, args: list[str], env: Environment) -> None:
    """Run parsed words as a pipeline, a redirected command or a simple command."""
    if contains_operator(args, "|"):
        run_pipeline(line, args, env)
    elif contains_operator(args, ">") or contains_operator(args, "<"):
        run_redirections(line, args, env)
    else:
        run_command(line, restore_characters(args), env)


def main(argv: list[str] | None = None) -> int:
    """Read and run commands until 'exit' or end of input; return the exit status."""
    history = History()
    env = init_shell(dict(os.environ), history)
    while True:
        try:
            line = input(PROMPT)
        except EOFError:
            print("exit")
            return env.status()
        if not line:
            continue
        history.add(line)
        try:
            args = parse_line(line, env)
        except ShellSyntaxError as exc:
            print(exc)
            continue
        if not args:
            continue
        try:
            execute_command(line, args, env)
        except ShellExit as exc:
            return exc.status


if __name__ == "__main__":
    sys.exit(main())