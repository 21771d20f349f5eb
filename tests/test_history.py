import io

from minish.history import History, read_lines


def test_add_appends_line_to_file(tmp_path):
    path = tmp_path / "history"
    history = History(path)
    history.add("ls -l")
    history.add("echo hi")
    assert path.read_text(encoding="utf-8") == "ls -l\necho hi\n"
    assert history.entries == ["ls -l", "echo hi"]


def test_add_none_writes_nothing(tmp_path):
    path = tmp_path / "history"
    history = History(path)
    history.add(None)
    assert not path.exists()
    assert history.entries == []


def test_load_missing_file_gives_nothing(tmp_path):
    history = History(tmp_path / "absent")
    assert history.load() == []
    assert history.entries == []


def test_round_trip_between_sessions(tmp_path):
    path = tmp_path / "history"
    first = History(path)
    for line in ["cd /tmp", "", "echo 'a b'"]:
        first.add(line)
    second = History(path)
    assert second.load() == ["cd /tmp", "", "echo 'a b'"]
    assert second.entries == ["cd /tmp", "", "echo 'a b'"]


def test_load_drops_last_character_of_unterminated_line(tmp_path):
    path = tmp_path / "history"
    path.write_text("abc\nxyz", encoding="utf-8")
    assert History(path).load() == ["abc", "xy"]


def test_read_lines_keeps_newlines():
    assert list(read_lines(io.StringIO("a\nb"))) == ["a\n", "b"]


def test_read_lines_empty_stream():
    assert list(read_lines(io.StringIO(""))) == []


def test_read_lines_long_line_across_chunks():
    text = "x" * 250 + "\n" + "y" * 30 + "\n"
    lines = list(read_lines(io.StringIO(text)))
    assert "".join(lines) == text
    assert len(lines) == 2


def test_read_lines_only_newline_ends_a_line():
    lines = list(read_lines(io.StringIO("a\rb\n")))
    assert lines == ["a\rb\n"]