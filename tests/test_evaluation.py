import math
import random

import pytest

from taskanneal.errors import CandidateError
from taskanneal.evaluation import evaluate, is_valid_for, schedule_rows, trim
from taskanneal.generator import generate_instance
from taskanneal.models import ProblemInstance


def test_all_on_time_scores_full_profit(three_tasks) -> None:
    assert evaluate(three_tasks, [0, 1, 2]) == 30.0
    assert is_valid_for(three_tasks, [0, 1, 2])


def test_overflow_stops_at_horizon() -> None:
    inst = ProblemInstance.from_lists([10, 20, 30], [5, 5, 5], [10.0, 10.0, 10.0], horizon=12)
    assert evaluate(inst, [0, 1, 2]) == 20.0
    assert trim(inst, [0, 1, 2]) == [0, 1]
    assert not is_valid_for(inst, [0, 1, 2])
    assert is_valid_for(inst, [0, 1])


def test_empty_schedule_scores_zero(three_tasks) -> None:
    assert evaluate(three_tasks, []) == 0
    assert trim(three_tasks, []) == []


@pytest.mark.parametrize("duration,deadline", [(15, 10), (60, 1), (11, 10)])
def test_late_task_decays(duration: int, deadline: int) -> None:
    inst = ProblemInstance.from_lists([deadline], [duration], [42.5])
    minutes_late = duration - deadline
    assert evaluate(inst, [0]) == pytest.approx(42.5 * math.exp(-0.017 * minutes_late))


@pytest.mark.parametrize("duration,deadline", [(10, 10), (5, 10), (1, 1440)])
def test_on_time_task_keeps_profit_exactly(duration: int, deadline: int) -> None:
    inst = ProblemInstance.from_lists([deadline], [duration], [42.5])
    assert evaluate(inst, [0]) == 42.5


def test_overflowing_task_does_not_count_later_fitting_tasks() -> None:
    # task 1 overflows; task 2 would still fit but processing has stopped
    inst = ProblemInstance.from_lists([100, 100, 100], [8, 10, 1], [1.0, 5.0, 7.0], horizon=15)
    assert evaluate(inst, [0, 1, 2]) == 1.0
    assert trim(inst, [0, 1, 2]) == [0]


def test_trim_preserves_score_on_random_candidates() -> None:
    rng = random.Random(7)
    for seed in range(5):
        inst = generate_instance(90, seed)
        for _ in range(20):
            cand = list(range(inst.size))
            rng.shuffle(cand)
            cut = cand[: rng.randrange(inst.size + 1)]
            assert evaluate(inst, cut) == evaluate(inst, trim(inst, cut))
            assert is_valid_for(inst, trim(inst, cut))


def test_trim_rejects_out_of_range_index(three_tasks) -> None:
    with pytest.raises(CandidateError):
        trim(three_tasks, [0, 3])
    assert not is_valid_for(three_tasks, [0, -1])


def test_schedule_rows_sum_to_score() -> None:
    inst = generate_instance(60, 3)
    cand = list(range(inst.size))
    rows = schedule_rows(inst, cand)
    assert len(rows) == len(trim(inst, cand))
    assert sum(r.contribution for r in rows) == pytest.approx(evaluate(inst, cand))
    assert all(r.end <= inst.horizon for r in rows)
