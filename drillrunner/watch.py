"""Watch mode: re-verify exercises whenever their files change."""

from __future__ import annotations

import itertools
import os
import queue
import subprocess
import sys
import threading
from enum import Enum, auto
from pathlib import Path
from typing import IO, Iterable, Iterator

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from drillrunner.exercise import Exercise
from drillrunner.verify import ExerciseFailed, verify

_EXERCISES_DIR = Path("./exercises")
_DEBOUNCE_SECONDS = 1.0
_POLL_SECONDS = 1.0

_HELP = (
    "Commands available to you in watch mode:\n"
    "  hint   - prints the current exercise's hint\n"
    "  clear  - clears the screen\n"
    "  quit   - quits watch mode\n"
    "  !<cmd> - executes a command, like `!rustc --explain E0381`\n"
    "  help   - displays this help message\n"
    "\n"
    "Watch mode automatically re-evaluates the current exercise\n"
    "when you edit a file's contents."
)


class WatchStatus(Enum):
    """How watch mode ended."""

    FINISHED = auto()
    UNFINISHED = auto()


class WatchShell:
    """The interactive command reader that runs alongside watch mode."""

    def __init__(self, hint: str | None = None, input_stream: IO[str] | None = None) -> None:
        self._lock = threading.Lock()
        self._hint = hint
        self._input = input_stream
        self.should_quit = threading.Event()

    @property
    def hint(self) -> str | None:
        with self._lock:
            return self._hint

    @hint.setter
    def hint(self, value: str | None) -> None:
        with self._lock:
            self._hint = value

    def handle(self, line: str) -> None:
        """Carry out one command line typed by the user."""
        command = line.strip()
        if command == "hint":
            hint = self.hint
            if hint is not None:
                print(hint)
        elif command == "clear":
            print("\x1b[2J\x1b[1;1H")
        elif command == "quit":
            self.should_quit.set()
            print("Bye!")
        elif command == "help":
            print(_HELP)
        elif command.startswith("!"):
            cmd = command[1:]
            parts = cmd.split()
            if not parts:
                print("no command provided")
                return
            try:
                subprocess.run(parts, check=False)
            except OSError as exc:
                print(f"failed to execute command `{cmd}`: {exc}")
        else:
            print(f"unknown command: {command}")

    def start(self) -> threading.Thread:
        """Print the greeting and read commands on a background thread."""
        print(
            "Welcome to watch mode! You can type 'help' to get an overview "
            "of the commands you can use here."
        )
        thread = threading.Thread(target=self._read_commands, daemon=True)
        thread.start()
        return thread

    def _read_commands(self) -> None:
        stream = self._input if self._input is not None else sys.stdin
        while True:
            try:
                line = stream.readline()
            except (OSError, ValueError) as exc:
                print(f"error reading command: {exc}")
                return
            if not line:
                return
            self.handle(line)


class _ChangeCollector(FileSystemEventHandler):
    def __init__(self, changes: queue.Queue[str]) -> None:
        super().__init__()
        self._changes = changes

    def _record(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._changes.put(os.fsdecode(event.src_path))

    def on_created(self, event: FileSystemEvent) -> None:
        self._record(event)

    def on_modified(self, event: FileSystemEvent) -> None:
        self._record(event)


def _clear_screen() -> None:
    print("\x1bc")


def _ends_with(path: Path, suffix: Path) -> bool:
    parts = tuple(part for part in Path(suffix).parts if part != ".")
    if not parts:
        return True
    return len(parts) <= len(path.parts) and path.parts[-len(parts):] == parts


def _next_changes(changes: queue.Queue[str]) -> list[str]:
    try:
        collected = [changes.get(timeout=_POLL_SECONDS)]
    except queue.Empty:
        return []
    while True:
        try:
            collected.append(changes.get(timeout=_DEBOUNCE_SECONDS))
        except queue.Empty:
            break
    return list(dict.fromkeys(collected))


def _reverify(
    changed: Path,
    exercises: list[Exercise],
    verbose: bool,
    success_hints: bool,
    shell: WatchShell,
) -> bool:
    filepath = changed.resolve()
    matched = next((e for e in exercises if _ends_with(filepath, e.path)), None)
    pending: Iterator[Exercise] = itertools.chain(
        [matched] if matched is not None else [],
        (e for e in exercises if not e.looks_done() and not _ends_with(filepath, e.path)),
    )
    num_done = sum(1 for e in exercises if e.looks_done())
    _clear_screen()
    try:
        verify(pending, (num_done, len(exercises)), verbose, success_hints)
    except ExerciseFailed as failed:
        shell.hint = failed.exercise.hint
        return False
    return True


def watch(exercises: Iterable[Exercise], verbose: bool, success_hints: bool) -> WatchStatus:
    """Verify the exercises, then re-verify on every change until done or the user quits."""
    exercises = list(exercises)
    if not _EXERCISES_DIR.is_dir():
        raise FileNotFoundError(f"cannot watch {_EXERCISES_DIR}: no such directory")

    changes: queue.Queue[str] = queue.Queue()
    observer = Observer()
    observer.schedule(_ChangeCollector(changes), str(_EXERCISES_DIR), recursive=True)
    observer.start()
    try:
        _clear_screen()
        try:
            verify(exercises, (0, len(exercises)), verbose, success_hints)
            return WatchStatus.FINISHED
        except ExerciseFailed as failed:
            shell = WatchShell(failed.exercise.hint)
        shell.start()

        while True:
            for changed in _next_changes(changes):
                path = Path(changed)
                if path.suffix == ".rs" and path.exists():
                    if _reverify(path, exercises, verbose, success_hints, shell):
                        return WatchStatus.FINISHED
            if shell.should_quit.is_set():
                return WatchStatus.UNFINISHED
    finally:
        observer.stop()
        observer.join()