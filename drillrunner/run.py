"""Running a single exercise and resetting it."""

from __future__ import annotations

import subprocess

from drillrunner.exercise import Exercise, ExerciseError, ExerciseOutput, Mode
from drillrunner.ui import success, warn
from drillrunner.verify import ExerciseFailed, test


def run(exercise: Exercise, verbose: bool) -> ExerciseOutput:
    """Compile and run (or test) one exercise; raise ExerciseFailed on failure."""
    match exercise.mode:
        case Mode.TEST | Mode.BUILD_SCRIPT:
            return test(exercise, verbose)
        case Mode.COMPILE | Mode.CLIPPY:
            return _compile_and_run(exercise)
    raise ValueError(f"unknown mode {exercise.mode!r}")


def reset(exercise: Exercise) -> int:
    """Stash local changes to the exercise file with git; return git's exit status."""
    try:
        result = subprocess.run(["git", "stash", "--", str(exercise.path)], check=False)
    except OSError as exc:
        raise ExerciseFailed(exercise) from exc
    return result.returncode


def _compile_and_run(exercise: Exercise) -> ExerciseOutput:
    try:
        compiled = exercise.compile()
    except ExerciseError as exc:
        warn(f"Compilation of {exercise} failed!, Compiler error message:\n")
        print(exc.output.stderr)
        raise ExerciseFailed(exercise) from exc

    with compiled:
        try:
            output = compiled.run()
        except ExerciseError as exc:
            print(exc.output.stdout)
            print(exc.output.stderr)
            warn(f"Ran {exercise} with errors")
            raise ExerciseFailed(exercise) from exc

    print(output.stdout)
    success(f"Successfully ran {exercise}")
    return output