"""Checking exercises: compile, run or test them and report progress."""

from __future__ import annotations

from typing import Iterable

from tqdm import tqdm

from drillrunner.exercise import (
    CompiledExercise,
    Exercise,
    ExerciseError,
    ExerciseOutput,
    Mode,
)
from drillrunner.ui import blue, bold, no_emoji, success, warn

_BAR_FORMAT = "Progress: [{bar:60}] {n}/{total} {desc}"


class ExerciseFailed(Exception):
    """An exercise did not compile, did not pass, or is still marked as pending."""

    def __init__(self, exercise: Exercise) -> None:
        super().__init__(f"{exercise} failed")
        self.exercise = exercise


def separator() -> str:
    """The bold rule printed around output and hints."""
    return bold("====================")


def verify(
    exercises: Iterable[Exercise],
    progress: tuple[int, int],
    verbose: bool,
    success_hints: bool,
) -> int:
    """Check exercises in order, stopping at the first one that is not finished.

    Returns the number of exercises checked; raises ExerciseFailed naming the
    exercise that stopped the run.
    """
    num_done, total = progress
    step = 100.0 / total if total else 0.0
    percentage = num_done * step
    checked = 0
    with tqdm(total=total, initial=num_done, bar_format=_BAR_FORMAT, ascii="-#") as bar:
        bar.set_description_str(f"({percentage:.1f} %)")
        for exercise in exercises:
            if not _check(exercise, verbose, success_hints):
                raise ExerciseFailed(exercise)
            checked += 1
            percentage += step
            bar.update(1)
            bar.set_description_str(f"({percentage:.1f} %)")
    return checked


def test(exercise: Exercise, verbose: bool) -> ExerciseOutput:
    """Compile and run the exercise's test harness without prompting."""
    return _compile_and_test(exercise, verbose)


def _check(exercise: Exercise, verbose: bool, success_hints: bool) -> bool:
    match exercise.mode:
        case Mode.TEST | Mode.BUILD_SCRIPT:
            _compile_and_test(exercise, verbose)
            return _prompt_for_completion(exercise, None, success_hints)
        case Mode.COMPILE:
            return _compile_and_run_interactively(exercise, success_hints)
        case Mode.CLIPPY:
            return _compile_only(exercise, success_hints)
    raise ValueError(f"unknown mode {exercise.mode!r}")


def _compile(exercise: Exercise) -> CompiledExercise:
    try:
        return exercise.compile()
    except ExerciseError as exc:
        warn(f"Compiling of {exercise} failed! Please try again. Here's the output:")
        print(exc.output.stderr)
        raise ExerciseFailed(exercise) from exc


def _compile_only(exercise: Exercise, success_hints: bool) -> bool:
    with _compile(exercise):
        pass
    return _prompt_for_completion(exercise, None, success_hints)


def _compile_and_run_interactively(exercise: Exercise, success_hints: bool) -> bool:
    with _compile(exercise) as compiled:
        try:
            output = compiled.run()
        except ExerciseError as exc:
            warn(f"Ran {exercise} with errors")
            print(exc.output.stdout)
            print(exc.output.stderr)
            raise ExerciseFailed(exercise) from exc
    return _prompt_for_completion(exercise, output.stdout, success_hints)


def _compile_and_test(exercise: Exercise, verbose: bool) -> ExerciseOutput:
    with _compile(exercise) as compiled:
        try:
            output = compiled.run()
        except ExerciseError as exc:
            warn(f"Testing of {exercise} failed! Please try again. Here's the output:")
            print(exc.output.stdout)
            raise ExerciseFailed(exercise) from exc
    if verbose:
        print(output.stdout)
    return output


def _success_message(mode: Mode, plain: bool) -> str:
    match mode:
        case Mode.COMPILE:
            return "The code is compiling!"
        case Mode.TEST:
            return "The code is compiling, and the tests pass!"
        case Mode.CLIPPY:
            if plain:
                return "The code is compiling, and Clippy is happy!"
            return "The code is compiling, and 📎 Clippy 📎 is happy!"
        case Mode.BUILD_SCRIPT:
            return "Build script works!"
    raise ValueError(f"unknown mode {mode!r}")


def _prompt_for_completion(
    exercise: Exercise, prompt_output: str | None, success_hints: bool
) -> bool:
    state = exercise.state()
    if state.done():
        return True

    match exercise.mode:
        case Mode.COMPILE:
            success(f"Successfully ran {exercise}!")
        case Mode.TEST:
            success(f"Successfully tested {exercise}!")
        case Mode.CLIPPY | Mode.BUILD_SCRIPT:
            success(f"Successfully compiled {exercise}!")

    plain = no_emoji()
    message = _success_message(exercise.mode, plain)
    print()
    if plain:
        print(f"~*~ {message} ~*~")
    else:
        print(f"🎉 🎉  {message} 🎉 🎉")
    print()

    if prompt_output is not None:
        print("Output:")
        print(separator())
        print(prompt_output)
        print(separator())
        print()
    if success_hints:
        print("Hints:")
        print(separator())
        print(exercise.hint)
        print(separator())
        print()

    print("You can keep working on this exercise,")
    print(f"or jump into the next one by removing the {bold('`I AM NOT DONE`')} comment:")
    print()
    for context_line in state.context or ():
        line = bold(context_line.line) if context_line.important else context_line.line
        print(f"{blue(bold(f'{context_line.number:>2}'))} {blue('|')}  {line}")
    return False