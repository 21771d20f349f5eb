"""The commands the shell runs itself, and dispatch between them and programs."""

from __future__ import annotations

import os
import stat

from .environment import Environment, has_metacharacter, is_declaration, variable_name
from .executor import exec_program

_BLANKS = " \t"


class ShellExit(Exception):
    """The shell is to stop with the given exit status."""

    def __init__(self, status: int) -> None:
        self.status = status
        super().__init__(f"exit {status}")


def error_message(message: str, arg: str, status: int, env: Environment) -> None:
    """Print ``message`` with ``arg`` filled in and record ``status`` as ``$?``."""
    print(message % arg)
    env.set_status(status)


def echo(args: list[str], env: Environment) -> None:
    """Print the arguments separated by spaces; ``-n`` drops the newline."""
    words = args[1:]
    end = "\n"
    if words and words[0].startswith("-n"):
        end = ""
        words = words[1:]
    print(" ".join(words), end=end)
    env.set_status(0)


def _stat(path: str) -> os.stat_result | None:
    try:
        return os.stat(path)
    except (OSError, ValueError):
        return None


def _target_of(line: str) -> str:
    index = 0
    while index < len(line) and line[index] not in _BLANKS:
        index += 1
    while index < len(line) and line[index] in _BLANKS:
        index += 1
    return line[index:]


def cd(line: str, env: Environment) -> None:
    """Change to the directory named after the first word of ``line``."""
    env.set_status(0)
    target = _target_of(line)
    info = _stat(target)
    if info is not None and stat.S_ISDIR(info.st_mode) and not os.access(target, os.X_OK):
        error_message("-minishel: cd: %s: Permissão negada", target, 1, env)
    elif info is not None and not stat.S_ISDIR(info.st_mode):
        error_message("-minishell: cd: %s: Não é um diretório", target, 1, env)
    else:
        try:
            os.chdir(target)
        except (OSError, ValueError):
            error_message(
                "-minishell: cd: %s: Arquivo ou diretório inexistente", target, 1, env
            )
    try:
        current = os.getcwd()
    except OSError:
        return
    env.assign([f"PWD={current}"])


def pwd(env: Environment) -> None:
    """Print the working directory."""
    try:
        current = os.getcwd()
    except OSError:
        return
    print(current)
    env.set_status(0)


def export(args: list[str], env: Environment) -> None:
    """Set and export each ``NAME=value`` argument, or export existing names."""
    env.set_status(0)
    for word in args[1:]:
        name = word
        if is_declaration(word):
            env.assign([word])
            name = variable_name(word)
        elif (word[:1].isascii() and word[:1].isdigit()) or has_metacharacter(word):
            error_message(
                "-minishell: export: `%s': não é um identificador válido", word, 1, env
            )
        env.export(name)


def unset(args: list[str], env: Environment) -> None:
    """Remove each variable named among the arguments."""
    env.set_status(0)
    for word in args:
        env.unset(word)


def print_env(env: Environment) -> None:
    """Print the exported variables, one per line."""
    for text in env.exported():
        print(text)
    env.set_status(0)


def exit_shell(env: Environment) -> None:
    """Stop the shell with the last recorded status."""
    raise ShellExit(env.status())


def run_command(line: str, args: list[str], env: Environment) -> None:
    """Run one simple command: a declaration, a builtin or a program."""
    command = args[0]
    if is_declaration(command):
        env.assign(word for word in args if "=" in word)
    elif command == "echo":
        echo(args, env)
    elif command == "cd":
        cd(line, env)
    elif command == "pwd":
        pwd(env)
    elif command == "export":
        export(args, env)
    elif command == "unset":
        unset(args, env)
    elif command == "env":
        print_env(env)
    elif command == "exit":
        exit_shell(env)
    else:
        exec_program(args, env)