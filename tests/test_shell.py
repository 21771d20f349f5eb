import signal

import pytest

from minish.environment import Environment
from minish.history import History
from minish.lexer import parse_line
from minish.shell import PROMPT, execute_command, handle_signal, init_shell, main


@pytest.fixture
def keep_signals():
    saved_int = signal.getsignal(signal.SIGINT)
    saved_quit = signal.getsignal(signal.SIGQUIT)
    yield
    signal.signal(signal.SIGINT, saved_int)
    signal.signal(signal.SIGQUIT, saved_quit)


def _feed(monkeypatch, lines):
    pending = iter(lines)
    prompts = []

    def fake_input(prompt=""):
        prompts.append(prompt)
        try:
            return next(pending)
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr("builtins.input", fake_input)
    return prompts


def test_init_shell_builds_environment(tmp_path, keep_signals):
    history_file = tmp_path / "hist"
    history_file.write_text("ls\npwd\n")
    history = History(history_file)
    env = init_shell({"HOME": "/home/user"}, history)
    assert env.get("HOME") == "/home/user"
    assert env.status() == 0
    assert history.entries == ["ls", "pwd"]
    assert signal.getsignal(signal.SIGINT) is handle_signal
    assert signal.getsignal(signal.SIGQUIT) == signal.SIG_IGN


def test_handle_signal_prints_newline(capsys):
    handle_signal(signal.SIGINT, None)
    assert capsys.readouterr().out == "\n"


def test_execute_simple_command(capsys):
    env = Environment({"NAME": "world"})
    line = "echo hello $NAME"
    execute_command(line, parse_line(line, env), env)
    assert capsys.readouterr().out == "hello world\n"


def test_execute_quoted_operator_is_literal(capsys):
    env = Environment({})
    line = "echo 'a|b'"
    execute_command(line, parse_line(line, env), env)
    assert capsys.readouterr().out == "a|b\n"


def test_execute_redirection(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    env = Environment({})
    line = "echo saved > out.txt"
    execute_command(line, parse_line(line, env), env)
    assert env.status() == 0
    assert (tmp_path / "out.txt").read_text() == "saved\n"


def test_main_runs_until_exit(tmp_path, monkeypatch, keep_signals):
    monkeypatch.chdir(tmp_path)
    prompts = _feed(monkeypatch, ["A=5", "", "echo $A > out.txt", "exit"])
    assert main() == 0
    assert (tmp_path / "out.txt").read_text() == "5\n"
    assert prompts == [PROMPT] * 4
    assert (tmp_path / ".minishell_history").read_text() == "A=5\necho $A > out.txt\nexit\n"


def test_main_end_of_input_prints_exit(tmp_path, monkeypatch, capsys, keep_signals):
    monkeypatch.chdir(tmp_path)
    _feed(monkeypatch, [])
    assert main() == 0
    assert capsys.readouterr().out == "exit\n"


def test_main_reports_syntax_error_and_continues(tmp_path, monkeypatch, capsys, keep_signals):
    monkeypatch.chdir(tmp_path)
    _feed(monkeypatch, ["echo |", "echo after"])
    main()
    out = capsys.readouterr().out
    assert "-minishell: erro de sintaxe próximo ao token inesperado `newline'" in out
    assert "after\n" in out


def test_main_returns_last_status(tmp_path, monkeypatch, keep_signals):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("PATH", str(tmp_path))
    _feed(monkeypatch, ["no_such_program_here", "exit"])
    assert main() == 127