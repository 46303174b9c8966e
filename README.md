# drillrunner

drillrunner runs a course of small Rust exercises from the command line. Each
exercise is a single `.rs` file listed in an `info.toml` file. drillrunner
compiles each exercise, then runs it or tests it, and reports the result. An
exercise counts as finished once it works and you have removed its
`I AM NOT DONE` marker.

## Requirements

- Python 3.11 or newer
- A Rust toolchain on your `PATH`: `rustc`, plus `cargo` for Clippy and
  build-script exercises
- `git`, for the `reset` command

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install ".[test]"
pytest
```

## Usage

Run every command from the directory that holds `info.toml`. Except for
`--version`, each command exits with status 1 if that file is missing or if
`rustc --version` cannot be run.

```
drillrunner                 # show the welcome text and a short introduction
drillrunner --version       # print the version
drillrunner watch           # verify, then re-verify each time a file changes
drillrunner verify          # verify all exercises in the order they are listed
drillrunner run NAME        # compile and run (or test) a single exercise
drillrunner run next        # run the first exercise that is not done yet
drillrunner hint NAME       # print the hint for an exercise
drillrunner reset NAME      # run "git stash -- <path>" on the exercise file
drillrunner list            # list exercises with their status
drillrunner lsp             # write rust-project.json for rust-analyzer
drillrunner cicvverify      # grade every exercise and write a JSON report
```

Put `--nocapture` before the subcommand to show the output of test exercises.

`run` and `verify` exit with status 1 if an exercise fails to compile, run or
pass its tests. They also exit with status 1 for an unknown exercise name, and
for `run next` once every exercise is done. `verify` stops at the first
exercise that is not finished. That includes an exercise that works but still
carries its `I AM NOT DONE` marker. For such an exercise it prints the lines
around the marker.

### Listing exercises

```
drillrunner list --paths          # only file paths
drillrunner list --names          # only exercise names
drillrunner list --filter vec,str # names or paths containing any pattern
drillrunner list --solved         # only exercises that look done
drillrunner list --unsolved       # only exercises still pending
```

Filter patterns are lower-cased before they are matched. The listing ends with
a progress line giving the number and percentage of exercises that are done.

### Watch mode

`drillrunner watch` verifies the exercises in order and stops at the first one
that is not finished. It then watches `./exercises`. Each time a `.rs` file is
created or modified, it checks that exercise again, followed by every other
pending exercise. While it waits, you can type these commands:

- `hint`: print the hint for the exercise that last failed
- `clear`: clear the screen
- `quit`: leave watch mode
- `!<cmd>`: run a command, for example `!rustc --explain E0381`
- `help`: show the list of commands

Pass `--success-hints` to `watch` to also show an exercise's hint when it
passes but is still marked as not done.

### rust-analyzer support

`drillrunner lsp` writes `rust-project.json` to the current directory, with one
crate for each `.rs` file under `./exercises`. It takes the standard library
source path from `RUST_SRC_PATH` if that is set. Otherwise it builds the path
from the output of `rustc --print sysroot`.

### Grading report

`drillrunner cicvverify` runs every exercise at the same time in a thread pool
and prints progress as each one finishes. It then writes a JSON summary to
`.github/result/check_result.json`. The summary holds a result for each
exercise, the number of successes and failures, and the total time in seconds.
The `.github/result` directory must already exist. If the report cannot be
written, the command exits with status 1.

## Exercise file format

`info.toml` holds a list of `[[exercises]]` tables, each with these keys:

```toml
[[exercises]]
name = "vecs1"
path = "exercises/vecs/vecs1.rs"
mode = "test"        # compile, test, clippy or buildscript
hint = "Use the vec! macro."
```

An exercise is pending as long as its file has a line beginning with `//` or
`///` followed by `I AM NOT DONE`.

The modes work as follows:

- `compile`: build with `rustc`, then run the binary.
- `test`: build with `rustc --test`, then run the test harness.
- `clippy`: write `exercises/clippy/Cargo.toml`, then run `cargo clippy` with
  warnings treated as errors.
- `buildscript`: write `exercises/tests/Cargo.toml`, then run `cargo test`.

## Terminal output

If the `NO_EMOJI` environment variable is set, drillrunner prints plain symbols
instead of emoji. Colours are used only when standard output is a terminal.
Set `NO_COLOR` or `CLICOLOR=0` to turn them off, or a non-zero
`CLICOLOR_FORCE` to force them on.

## Using it from Python

The pieces behind the commands can be imported:

- `drillrunner.exercise.load_exercises(path)` reads an `info.toml` file.
- `Exercise.state()` and `Exercise.looks_done()` report whether an exercise is
  still pending.
- `drillrunner.run.run(exercise, verbose)` and
  `drillrunner.verify.verify(exercises, progress, verbose, success_hints)`
  raise `ExerciseFailed` on failure.
- `drillrunner.checklist.cicv_verify(exercises, verbose, output_path)` writes
  the grading report to any path you give it.

## What it does not do

drillrunner comes with no exercises and no compiler. You provide the
`info.toml` file and the exercise files, and an installed Rust toolchain does
the compiling, testing and linting.