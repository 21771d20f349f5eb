import os
import stat
import sys

from minish.environment import Environment
from minish.executor import build_path, exec_program, find_program, report_exec_error


def _make_file(directory, name, executable=True):
    path = directory / name
    path.write_text("#!/bin/sh\n")
    mode = stat.S_IRUSR | stat.S_IWUSR
    if executable:
        mode |= stat.S_IXUSR
    path.chmod(mode)
    return path


def test_build_path_joins_with_slash(tmp_path):
    assert build_path(str(tmp_path), "prog") == os.path.join(str(tmp_path), "prog")


def test_build_path_missing_part():
    assert build_path(None, "prog") is None
    assert build_path("dir", None) is None


def test_find_program_searches_directories(tmp_path):
    first = tmp_path / "first"
    second = tmp_path / "second"
    first.mkdir()
    second.mkdir()
    _make_file(second, "prog")
    assert find_program([str(first), str(second)], "prog") == f"{second}/prog"


def test_find_program_first_directory_wins(tmp_path):
    first = tmp_path / "first"
    second = tmp_path / "second"
    first.mkdir()
    second.mkdir()
    _make_file(first, "prog")
    _make_file(second, "prog")
    assert find_program([str(first), str(second)], "prog") == f"{first}/prog"


def test_find_program_direct_path(tmp_path):
    target = _make_file(tmp_path, "prog")
    assert find_program(None, str(target)) == str(target)


def test_find_program_not_found(tmp_path):
    assert find_program([str(tmp_path)], "missing-program") == ""
    assert find_program(None, "missing-program") == ""


def test_report_command_not_found(capsys):
    env = Environment({})
    status = report_exec_error("", ["nosuchcmd"], env)
    assert status == 127
    assert env.status() == 127
    assert capsys.readouterr().out == "nosuchcmd: comando não encontrado\n"


def test_report_directory(tmp_path, capsys):
    env = Environment({})
    status = report_exec_error(str(tmp_path), [str(tmp_path)], env)
    assert status == 126
    assert capsys.readouterr().out == f"-minishell: {tmp_path}: É um diretório\n"


def test_report_permission_denied(tmp_path, capsys):
    target = _make_file(tmp_path, "prog", executable=False)
    env = Environment({})
    status = report_exec_error(str(target), [str(target)], env)
    if os.access(str(target), os.X_OK):
        # Running as a user that bypasses permission bits.
        assert status == 0
    else:
        assert status == 126
        assert capsys.readouterr().out == f"-minishell: {target}: Permissão negada\n"


def test_report_relative_missing(capsys):
    env = Environment({})
    status = report_exec_error("", ["./nothing-here"], env)
    assert status == 127
    assert capsys.readouterr().out == (
        "-minishell: ./nothing-here: Arquivo ou diretório inexistente\n"
    )


def test_exec_program_records_exit_status():
    env = Environment({})
    status = exec_program([sys.executable, "-c", "import sys; sys.exit(4)"], env)
    assert status == 4
    assert env.status() == 4


def test_exec_program_passes_exported_variables():
    env = Environment({"FOO": "bar"})
    code = "import os, sys; sys.exit(0 if os.environ.get('FOO') == 'bar' else 1)"
    env.set_status(9)
    assert exec_program([sys.executable, "-c", code], env) == 0


def test_exec_program_unexported_variable_not_passed():
    env = Environment({})
    env.assign(["HIDDEN=1"])
    code = "import os, sys; sys.exit(1 if 'HIDDEN' in os.environ else 0)"
    assert exec_program([sys.executable, "-c", code], env) == 0


def test_exec_program_missing_command(tmp_path, capsys):
    env = Environment({"PATH": str(tmp_path)})
    status = exec_program(["missing-program"], env)
    assert status == 127
    assert capsys.readouterr().out == "missing-program: comando não encontrado\n"