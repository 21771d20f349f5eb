"""Running commands joined by '|', each in its own process."""

from __future__ import annotations

import os
import sys
from contextlib import suppress

from .builtins import ShellExit, run_command
from .environment import Environment
from .lexer import contains_operator, restore_characters
from .redirection import run_redirections


def _is_pipe(word: str) -> bool:
    return word.startswith("|")


def count_pipes(args: list[str]) -> int:
    """Return how many words start with '|'."""
    return sum(1 for word in args if _is_pipe(word))


def pipeline_segment(args: list[str], index: int) -> list[str]:
    """Return the words of the ``index``-th command of a pipeline, counting from 0."""
    segment: list[str] = []
    current = 0
    for word in args:
        if _is_pipe(word):
            current += 1
            if current > index:
                break
        elif current == index:
            segment.append(word)
    return segment


def _flush_standard_streams() -> None:
    for stream in (sys.stdout, sys.stderr):
        with suppress(AttributeError, ValueError, OSError):
            stream.flush()


def _connect(index: int, pipes: list[tuple[int, int]]) -> None:
    """Wire the process's standard input and output to its neighbours' pipes."""
    if index > 0:
        os.dup2(pipes[index - 1][0], 0)
    if index < len(pipes):
        os.dup2(pipes[index][1], 1)
    for read_end, write_end in pipes:
        os.close(read_end)
        os.close(write_end)
    encoding = getattr(sys.stdout, "encoding", None) or "utf-8"
    sys.stdout = open(1, "w", encoding=encoding, closefd=False)
    sys.stdin = open(0, "r", encoding=encoding, closefd=False)


def _execute_segment(line: str, segment: list[str], env: Environment) -> None:
    if not segment:
        return
    if contains_operator(segment, ">") or contains_operator(segment, "<"):
        run_redirections(line, segment, env)
    else:
        run_command(line, restore_characters(segment), env)


def _run_child(
    index: int,
    pipes: list[tuple[int, int]],
    line: str,
    args: list[str],
    env: Environment,
) -> None:
    status = 1
    try:
        _connect(index, pipes)
        _execute_segment(line, pipeline_segment(args, index), env)
        status = env.status()
    except ShellExit as exc:
        status = exc.status
    except BaseException:  # a child must never return into the shell's loop
        status = 1
    finally:
        _flush_standard_streams()
        os._exit(status & 0xFF)


def run_pipeline(line: str, args: list[str], env: Environment) -> None:
    """Run every command of the pipeline at once and wait for all of them.

    Each command runs in a child process, so variables it sets do not reach
    the shell.
    """
    n_pipes = count_pipes(args)
    pipes = [os.pipe() for _ in range(n_pipes)]
    children = []
    _flush_standard_streams()
    for index in range(n_pipes + 1):
        pid = os.fork()
        if pid == 0:
            _run_child(index, pipes, line, args, env)
        children.append(pid)
    for read_end, write_end in pipes:
        os.close(read_end)
        os.close(write_end)
    for pid in children:
        with suppress(ChildProcessError):
            os.waitpid(pid, 0)