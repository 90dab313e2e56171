import pytest

from portcheck.utils.tty import ask, confirm, tty_paths

def _paths(tmp_path, answer):
    r = tmp_path / "tty-in"
    w = tmp_path / "tty-out"
    r.write_text(answer, encoding="utf-8")
    return str(r), str(w)

@pytest.mark.parametrize("answer,expected", [
    ("y\n", True), ("YES\n", True), (" yes \n", True),
    ("n\n", False), ("\n", False), ("", False), ("yep\n", False),
])
def test_confirm(tmp_path, answer, expected):
    assert confirm("Kill? [y/N] ", _paths(tmp_path, answer)) is expected

def test_prompt_goes_to_terminal(tmp_path):
    r, w = _paths(tmp_path, "y\n")
    assert ask("Kill 1 process(es)? ", (r, w)) == "y\n"
    with open(w, encoding="utf-8") as f:
        assert f.read() == "Kill 1 process(es)? "

def test_ignores_stdin(tmp_path, monkeypatch):
    import io
    monkeypatch.setattr("sys.stdin", io.StringIO("y\n"))
    assert confirm("? ", _paths(tmp_path, "n\n")) is False

def test_no_terminal(tmp_path):
    with pytest.raises(OSError):
        ask("? ", (str(tmp_path / "missing"), str(tmp_path / "out")))

def test_tty_paths_posix(monkeypatch):
    monkeypatch.setattr("os.name", "posix")
    assert tty_paths() == ("/dev/tty", "/dev/tty")
