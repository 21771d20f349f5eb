"""Locating and starting external programs."""

from __future__ import annotations

import os
import stat
import subprocess
import sys

from .environment import Environment
from .lexer import split_words

_PERMISSION_DENIED = "-minishell: %s: Permissão negada"
_IS_DIRECTORY = "-minishell: %s: É um diretório"
_NO_SUCH_FILE = "-minishell: %s: Arquivo ou diretório inexistente"
_NOT_FOUND = "%s: comando não encontrado"


def _stat(path: str) -> os.stat_result | None:
    try:
        return os.stat(path)
    except (OSError, ValueError):
        return None


def _report(message: str, arg: str, status: int, env: Environment) -> None:
    print(message % arg, flush=True)
    env.set_status(status)


def build_path(directory: str | None, name: str | None) -> str | None:
    """Join a directory and a file name with '/'; None if either is missing."""
    if directory is None or name is None:
        return None
    return f"{directory}/{name}"


def find_program(path: list[str] | None, name: str) -> str:
    """Return the file to run for ``name``, or an empty string when none exists.

    ``name`` itself is used when it names an existing file; otherwise each
    directory of ``path`` is tried in order.
    """
    if _stat(name) is not None:
        return name
    for directory in path or ():
        candidate = build_path(directory, name)
        if candidate is not None and _stat(candidate) is not None:
            return candidate
    return ""


def report_exec_error(path_file: str, args: list[str], env: Environment) -> int:
    """Print why ``path_file`` could not be run, record the status and return it."""
    info = _stat(path_file) if path_file else None
    command = args[0]
    if path_file and not os.access(path_file, os.X_OK):
        _report(_PERMISSION_DENIED, path_file, 126, env)
    elif info is not None and stat.S_ISDIR(info.st_mode):
        _report(_IS_DIRECTORY, path_file, 126, env)
    elif command.startswith(".") and info is None:
        _report(_NO_SUCH_FILE, command, 127, env)
    elif not path_file and not command.startswith("."):
        _report(_NOT_FOUND, command, 127, env)
    return env.status()


def _child_environment(env: Environment) -> dict[str, str]:
    child = {}
    for text in env.exported():
        name, _, value = text.partition("=")
        child[name] = value
    return child


def exec_program(args: list[str], env: Environment) -> int:
    """Run ``args`` as an external program, wait for it and return ``$?``."""
    search = env.get("PATH")
    path = split_words(search, ":") if search is not None else None
    path_file = find_program(path, args[0])
    if not path_file:
        return report_exec_error(path_file, args, env)
    sys.stdout.flush()
    try:
        completed = subprocess.run(
            args,
            executable=path_file,
            env=_child_environment(env),
            check=False,
        )
    except (OSError, ValueError):
        return report_exec_error(path_file, args, env)
    if completed.returncode >= 0:
        env.set_status(completed.returncode)
    return env.status()