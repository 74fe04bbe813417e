from taskanneal.baselines import (
    BASELINES,
    EXHAUSTIVE_MAX_TASKS,
    best_baseline,
    by_deadline,
    by_duration,
    by_profit,
    by_profit_rate,
    exhaustive,
    least_overdue,
    most_profitable,
)
from taskanneal.evaluation import evaluate
from taskanneal.generator import generate_instance
from taskanneal.models import ProblemInstance, TakenSet

import pytest


def small() -> ProblemInstance:
    return ProblemInstance.from_lists(
        deadlines=[30, 10, 20, 5],
        durations=[10, 4, 8, 6],
        profits=[5.0, 8.0, 2.0, 9.0],
    )


def test_sorting_baselines() -> None:
    inst = small()
    assert by_deadline(inst) == [3, 1, 2, 0]
    assert by_duration(inst) == [1, 3, 2, 0]
    assert by_profit(inst) == [3, 1, 0, 2]
    # rates: 0.5, 2.0, 0.25, 1.5
    assert by_profit_rate(inst) == [1, 3, 0, 2]


def test_greedy_baselines_are_permutations() -> None:
    inst = generate_instance(30, 1)
    for build in BASELINES.values():
        assert sorted(build(inst)) == list(range(inst.size))


def test_most_profitable_picks_best_decayed_task_first() -> None:
    inst = small()
    # at time 0 every task finishes on time: highest raw profit is task 3
    assert most_profitable(inst)[0] == 3


def test_least_overdue_first_choice() -> None:
    inst = small()
    # finishing task 1 at minute 4 makes nothing overdue
    assert least_overdue(inst)[0] == 1


def test_exhaustive_dominates_all_greedy_baselines() -> None:
    inst = generate_instance(7, 2)
    best = exhaustive(inst)
    best_score = evaluate(inst, best)
    for build in BASELINES.values():
        assert evaluate(inst, build(inst)) <= best_score + 1e-12


def test_exhaustive_refuses_large_instances() -> None:
    with pytest.raises(ValueError):
        exhaustive(generate_instance(EXHAUSTIVE_MAX_TASKS + 1, 0))


def test_best_baseline_reports_its_score() -> None:
    inst = generate_instance(40, 3)
    name, candidate, score = best_baseline(inst)
    assert name in BASELINES
    assert score == evaluate(inst, candidate)
    assert score == max(evaluate(inst, b(inst)) for b in BASELINES.values())


def test_taken_set() -> None:
    taken = TakenSet(4)
    taken.add(1)
    taken.add(3)
    assert 1 in taken and 0 not in taken
    assert len(taken) == 2
    assert taken.untaken() == [0, 2]
    taken.discard(1)
    assert taken.untaken() == [0, 1, 2]
    taken.clear()
    assert len(taken) == 0
