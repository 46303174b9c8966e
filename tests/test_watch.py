import io
import subprocess
import sys
import threading
import time
from pathlib import Path

import pytest

from drillrunner.exercise import Exercise, Mode
from drillrunner.watch import WatchShell, WatchStatus, watch


def fake_run(args, **kwargs):
    if args[0] == "rustc":
        source = Path(next(a for a in args if str(a).endswith(".rs"))).read_text(
            encoding="utf-8"
        )
        code = 1 if "broken" in source else 0
        return subprocess.CompletedProcess(args, code, b"", b"error" if code else b"")
    return subprocess.CompletedProcess(args, 0, b"", b"")


class _SlowQuit:
    """Standard input that types 'quit' after a delay."""

    def __init__(self, delay):
        self._delay = delay
        self._sent = False

    def readline(self):
        if self._sent:
            return ""
        time.sleep(self._delay)
        self._sent = True
        return "quit\n"


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(subprocess, "run", fake_run)
    (tmp_path / "exercises").mkdir()
    return tmp_path


def _exercise(root, name, body):
    relative = Path("exercises") / f"{name}.rs"
    (root / relative).write_text(body, encoding="utf-8")
    return Exercise(name=name, path=relative, mode=Mode.COMPILE, hint=f"hint for {name}")


def test_hint_prints_current_hint(capsys):
    shell = WatchShell("Hello!")
    shell.handle("hint\n")
    assert capsys.readouterr().out == "Hello!\n"


def test_hint_without_hint_prints_nothing(capsys):
    shell = WatchShell()
    shell.handle("hint")
    assert capsys.readouterr().out == ""


def test_hint_can_be_replaced(capsys):
    shell = WatchShell("first")
    shell.hint = "second"
    shell.handle("  hint  ")
    assert capsys.readouterr().out == "second\n"


def test_quit_sets_flag(capsys):
    shell = WatchShell()
    shell.handle("quit")
    assert shell.should_quit.is_set()
    assert capsys.readouterr().out == "Bye!\n"


def test_clear_prints_escape(capsys):
    WatchShell().handle("clear")
    assert capsys.readouterr().out == "\x1b[2J\x1b[1;1H\n"


def test_help_lists_commands(capsys):
    WatchShell().handle("help")
    out = capsys.readouterr().out
    assert "  quit   - quits watch mode" in out
    assert "  !<cmd> - executes a command, like `!rustc --explain E0381`" in out


def test_unknown_command(capsys):
    WatchShell().handle("  foo  \n")
    assert capsys.readouterr().out == "unknown command: foo\n"


def test_bang_without_command(capsys):
    WatchShell().handle("!")
    assert capsys.readouterr().out == "no command provided\n"


def test_bang_runs_command(monkeypatch, capsys):
    calls = []

    def recording_run(args, **kwargs):
        calls.append(list(args))
        return subprocess.CompletedProcess(args, 0)

    monkeypatch.setattr(subprocess, "run", recording_run)
    shell = WatchShell()
    shell.handle("!rustc --explain E0381")
    assert calls == [["rustc", "--explain", "E0381"]]
    assert capsys.readouterr().out == ""
    assert not shell.should_quit.is_set()


def test_bang_reports_failure(monkeypatch, capsys):
    def failing_run(args, **kwargs):
        raise FileNotFoundError("nope")

    monkeypatch.setattr(subprocess, "run", failing_run)
    WatchShell().handle("!bogus arg")
    assert capsys.readouterr().out == "failed to execute command `bogus arg`: nope\n"


def test_start_reads_until_end_of_input(capsys):
    shell = WatchShell("Hello!", io.StringIO("hint\nquit\n"))
    thread = shell.start()
    thread.join(timeout=5)
    assert not thread.is_alive()
    assert shell.should_quit.is_set()
    out = capsys.readouterr().out
    assert out.startswith("Welcome to watch mode!")
    assert "Hello!\n" in out
    assert out.endswith("Bye!\n")


def test_watch_requires_exercises_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(FileNotFoundError):
        watch([], False, False)


def test_watch_finishes_when_everything_passes(workspace):
    exercises = [_exercise(workspace, "intro1", "fn main() {}\n")]
    assert watch(exercises, False, False) is WatchStatus.FINISHED


def test_watch_unfinished_after_quit(workspace, monkeypatch, capsys):
    exercises = [_exercise(workspace, "intro1", "broken\n")]
    monkeypatch.setattr(sys, "stdin", io.StringIO("quit\n"))
    assert watch(exercises, False, False) is WatchStatus.UNFINISHED
    assert "Bye!" in capsys.readouterr().out


def test_watch_reverifies_on_change(workspace, monkeypatch):
    exercises = [_exercise(workspace, "intro1", "broken\n")]
    monkeypatch.setattr(sys, "stdin", _SlowQuit(15))
    fixer = threading.Timer(
        1.5,
        lambda: (workspace / "exercises" / "intro1.rs").write_text(
            "fn main() {}\n", encoding="utf-8"
        ),
    )
    fixer.start()
    try:
        status = watch(exercises, False, False)
    finally:
        fixer.cancel()
    assert status is WatchStatus.FINISHED