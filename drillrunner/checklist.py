"""Grading every exercise at once and recording the results as JSON."""

from __future__ import annotations

import json
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Iterable

from drillrunner.exercise import Exercise
from drillrunner.run import run
from drillrunner.verify import ExerciseFailed

DEFAULT_RESULT_PATH = ".github/result/check_result.json"


def _now() -> int:
    return int(time.time())


@dataclass
class ExerciseResult:
    """Whether one exercise passed."""

    name: str
    result: bool


@dataclass
class ExerciseStatistics:
    """Totals over a grading run; total_time is in whole seconds."""

    total_exercations: int
    total_succeeds: int = 0
    total_failures: int = 0
    total_time: int = 0


@dataclass
class ExerciseCheckList:
    """The full grading report."""

    exercises: list[ExerciseResult] = field(default_factory=list)
    user_name: str | None = None
    statistics: ExerciseStatistics = field(
        default_factory=lambda: ExerciseStatistics(total_exercations=0)
    )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        """Pretty-printed JSON with two-space indentation."""
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)


def cicv_verify(
    exercises: Iterable[Exercise],
    verbose: bool = True,
    output_path: str | Path = DEFAULT_RESULT_PATH,
) -> ExerciseCheckList:
    """Run every exercise concurrently, print progress and write the report to output_path."""
    exercises = list(exercises)
    started = _now()
    total = len(exercises)
    checklist = ExerciseCheckList(
        statistics=ExerciseStatistics(total_exercations=total)
    )
    lock = threading.Lock()
    rights = 0

    def check(exercise: Exercise, exercise_started: int) -> None:
        nonlocal rights
        try:
            run(exercise, verbose)
            passed = True
        except ExerciseFailed:
            passed = False

        with lock:
            if passed:
                rights += 1
                print(f"{exercise.name}执行成功")
            else:
                print(f"{exercise.name}执行失败")
            print(f"总的题目数: {total}")
            print(f"当前做正确的题目数: {rights}")
            print(f"当前修改试卷耗时: {_now() - exercise_started} s")
            checklist.exercises.append(ExerciseResult(name=exercise.name, result=passed))
            if passed:
                checklist.statistics.total_succeeds += 1
            else:
                checklist.statistics.total_failures += 1

    with ThreadPoolExecutor() as pool:
        futures = [pool.submit(check, exercise, _now()) for exercise in exercises]
        for future in futures:
            future.result()

    total_time = _now() - started
    print(
        "===============================试卷批改完成,总耗时: "
        f"{total_time} s; =================================="
    )
    checklist.statistics.total_time = total_time
    Path(output_path).write_text(checklist.to_json(), encoding="utf-8")
    return checklist