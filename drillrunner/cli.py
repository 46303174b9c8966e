"""Command-line entry point: argument parsing and the subcommands."""

from __future__ import annotations

import argparse
import subprocess
import sys
from pathlib import Path
from typing import Iterable, Sequence

from drillrunner.checklist import cicv_verify
from drillrunner.exercise import Exercise, load_exercises
from drillrunner.project import RustAnalyzerProject
from drillrunner.run import reset, run
from drillrunner.ui import emoji
from drillrunner.verify import ExerciseFailed, verify
from drillrunner.watch import WatchStatus, watch

VERSION = "5.5.1"
INFO_FILE = "info.toml"

WELCOME = """       welcome to...

   +-------------------------------+
   |    d r i l l r u n n e r      |
   +-------------------------------+"""

DEFAULT_OUT = """Thanks for installing drillrunner!

Is this your first time? Don't worry, these exercises are made for beginners.
Before you start, here are a few notes on how things work:

1. You solve exercises. Each one usually contains a syntax error that makes it
   fail to compile or to pass its tests; sometimes it is a logic error instead.
   Whatever the error, your job is to find it and fix it. Once the exercise
   compiles and passes, you can move on to the next one.
2. In watch mode (recommended) the first exercise is checked right away. The
   error message you see at once is part of the exercise: open the file in an
   editor and start your detective work!
3. If you're stuck, type 'hint' in watch mode, or run
   `drillrunner hint exercise_name`.
4. To get editor support through rust-analyzer, run `drillrunner lsp`.

Got all that? Great! Run `drillrunner watch` to get the first exercise.
Make sure to have your editor open!"""

FINISH_LINE = """+----------------------------------------------------+
|          You made it to the finish line!           |
+----------------------------------------------------+

We hope you enjoyed working through the exercises!
If you noticed any issues, please don't hesitate to report them.
You can also contribute exercises of your own to help others learn.

Before reporting an issue or contributing, please read the contributing
guidelines that come with the exercises."""


class ExerciseNotFound(LookupError):
    """No exercise matches the requested name."""


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def find_exercise(name: str, exercises: Sequence[Exercise]) -> Exercise:
    """Find an exercise by name; "next" picks the first unfinished one."""
    if name == "next":
        found = next((e for e in exercises if not e.looks_done()), None)
        if found is None:
            raise ExerciseNotFound(
                "🎉 Congratulations! You have done all the exercises!\n"
                "🔚 There are no more exercises to do next!"
            )
        return found
    found = next((e for e in exercises if e.name == name), None)
    if found is None:
        raise ExerciseNotFound(f"No exercise found for '{name}'!")
    return found


def list_exercises(
    exercises: Sequence[Exercise],
    paths: bool,
    names: bool,
    filter: str | None,
    unsolved: bool,
    solved: bool,
) -> int:
    """Print the exercises and a progress line; return how many are done."""
    if not paths and not names:
        print(f"{'Name':<17}\t{'Path':<46}\t{'Status':<7}")
    filters = [f for f in (filter or "").lower().split(",") if f.strip()]
    done_count = 0
    for exercise in exercises:
        fname = str(exercise.path)
        matches = any(f in exercise.name or f in fname for f in filters)
        done = exercise.looks_done()
        if done:
            done_count += 1
        status = "Done" if done else "Pending"
        wanted = (done and solved) or (not done and unsolved) or (not solved and not unsolved)
        if wanted and (matches or filter is None):
            if paths:
                print(fname)
            elif names:
                print(exercise.name)
            else:
                print(f"{exercise.name:<17}\t{fname:<46}\t{status:<7}")
    total = len(exercises)
    percentage = done_count / total * 100.0 if total else float("nan")
    print(
        f"Progress: You completed {done_count} / {total} exercises ({percentage:.1f} %)."
    )
    return done_count


def rustc_exists() -> bool:
    """True when `rustc --version` can be started and succeeds."""
    try:
        result = subprocess.run(
            ["rustc", "--version"], stdout=subprocess.DEVNULL, check=False
        )
    except OSError:
        return False
    return result.returncode == 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = _Parser(
        prog="drillrunner",
        description="A collection of small exercises to get you used to writing and reading code",
    )
    parser.add_argument(
        "--nocapture", action="store_true", help="show outputs from the test exercises"
    )
    parser.add_argument(
        "-v", "--version", action="store_true", help="show the executable version"
    )
    sub = parser.add_subparsers(dest="command", metavar="<command>")

    sub.add_parser("verify", help="verifies all exercises according to the recommended order")
    watch_parser = sub.add_parser("watch", help="reruns `verify` when files were edited")
    watch_parser.add_argument(
        "--success-hints", action="store_true", help="show hints on success"
    )
    for name, text in (
        ("run", "runs/tests a single exercise"),
        ("reset", 'resets a single exercise using "git stash -- <filename>"'),
        ("hint", "returns a hint for the given exercise"),
    ):
        command = sub.add_parser(name, help=text)
        command.add_argument("name", help="the name of the exercise")

    list_parser = sub.add_parser("list", help="lists the available exercises")
    list_parser.add_argument(
        "-p", "--paths", action="store_true", help="show only the paths of the exercises"
    )
    list_parser.add_argument(
        "-n", "--names", action="store_true", help="show only the names of the exercises"
    )
    list_parser.add_argument(
        "-f",
        "--filter",
        default=None,
        help="a string to match exercise names; comma separated patterns are acceptable",
    )
    list_parser.add_argument(
        "-u", "--unsolved", action="store_true", help="display only exercises not yet solved"
    )
    list_parser.add_argument(
        "-s", "--solved", action="store_true", help="display only exercises that have been solved"
    )
    sub.add_parser("lsp", help="enable rust-analyzer for exercises")
    sub.add_parser("cicvverify", help="grade all exercises and write a JSON report")
    return parser


def _lsp() -> int:
    project = RustAnalyzerProject()
    try:
        project.get_sysroot_src()
    except OSError:
        print("Couldn't find toolchain path, do you have `rustc` installed?")
        return 1
    project.exercises_to_json()
    if not project.crates:
        print("Failed find any exercises, make sure you're in the exercises folder")
    else:
        try:
            project.write_to_disk()
        except OSError:
            print("Failed to write rust-project.json to disk for rust-analyzer")
            return 0
        print("Successfully generated rust-project.json")
        print(
            "rust-analyzer will now parse exercises, restart your language server or editor"
        )
    return 0


def _watch(exercises: Iterable[Exercise], verbose: bool, success_hints: bool) -> int:
    try:
        status = watch(exercises, verbose, success_hints)
    except OSError as exc:
        print(f"Error: Could not watch your progress. Error message was {exc!r}.")
        print(
            "Most likely you've run out of disk space or your 'inotify limit' has been reached."
        )
        return 1
    if status is WatchStatus.FINISHED:
        mark = emoji("🎉", "★")
        print(f"{mark} All exercises completed! {mark}")
        print(f"\n{FINISH_LINE}\n")
    else:
        print("We hope you're enjoying the exercises!")
        print(
            "If you want to continue working on the exercises at a later point, "
            "you can simply run `drillrunner watch` again"
        )
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line; return the process exit status."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else (0 if exc.code is None else 1)

    if args.version:
        print(f"v{VERSION}")
        return 0

    if args.command is None:
        print(f"\n{WELCOME}\n")

    if not Path(INFO_FILE).exists():
        print(f"{sys.argv[0]} must be run from the exercises directory")
        print("Try changing into the directory that holds info.toml first!")
        return 1

    if not rustc_exists():
        print("We cannot find `rustc`.")
        print("Try running `rustc --version` to diagnose your problem.")
        print("For instructions on how to install the compiler, check the README.")
        return 1

    exercises = load_exercises(INFO_FILE)
    verbose = args.nocapture

    if args.command is None:
        print(f"{DEFAULT_OUT}\n")
        return 0

    try:
        match args.command:
            case "list":
                try:
                    list_exercises(
                        exercises,
                        args.paths,
                        args.names,
                        args.filter,
                        args.unsolved,
                        args.solved,
                    )
                except BrokenPipeError:
                    return 0
            case "run":
                run(find_exercise(args.name, exercises), verbose)
            case "reset":
                reset(find_exercise(args.name, exercises))
            case "hint":
                print(find_exercise(args.name, exercises).hint)
            case "verify":
                verify(exercises, (0, len(exercises)), verbose, False)
            case "cicvverify":
                try:
                    cicv_verify(exercises, True)
                except OSError as exc:
                    print(f"Failed to write the check result: {exc}")
                    return 1
            case "lsp":
                return _lsp()
            case "watch":
                return _watch(exercises, verbose, args.success_hints)
    except ExerciseNotFound as exc:
        print(exc)
        return 1
    except ExerciseFailed:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())