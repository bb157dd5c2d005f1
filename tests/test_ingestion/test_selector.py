"""Tests for the greedy budgeted selector."""

from __future__ import annotations

import random

import pytest

from reposcope.ingestion.classifier import is_eligible
from reposcope.ingestion.schemas import SelectionBudget, TreeEntry
from reposcope.ingestion.selector import select_files


def _entries(*pairs: tuple[str, int]) -> list[TreeEntry]:
    return [TreeEntry(path=p, size=s) for p, s in pairs]


def _paths(entries: tuple[TreeEntry, ...]) -> list[str]:
    return [e.path for e in entries]


def test_excluded_then_stops_at_total_budget() -> None:
    """Classifier drops the dependency file; d.md exhausts the budget."""
    listing = _entries(("a.py", 50), ("b/node_modules/c.js", 10), ("d.md", 5000))
    eligible = [e for e in listing if is_eligible(e.path)]
    budget = SelectionBudget(max_total_size=100)

    selection = select_files(eligible, budget)

    assert _paths(selection.files) == ["a.py"]
    assert selection.total_eligible == 2


def test_sorted_ascending_by_size() -> None:
    eligible = _entries(("big.py", 30), ("small.py", 10), ("mid.py", 20))
    selection = select_files(eligible, SelectionBudget())
    assert _paths(selection.files) == ["small.py", "mid.py", "big.py"]


def test_ties_keep_listing_order() -> None:
    eligible = _entries(("z.py", 5), ("a.py", 5), ("m.py", 5))
    selection = select_files(eligible, SelectionBudget())
    assert _paths(selection.files) == ["z.py", "a.py", "m.py"]


def test_count_limit_stops_walk() -> None:
    eligible = _entries(*((f"f{i}.py", i) for i in range(10)))
    selection = select_files(eligible, SelectionBudget(max_files=3))
    assert _paths(selection.files) == ["f0.py", "f1.py", "f2.py"]
    assert selection.total_eligible == 10


def test_oversized_file_skipped_individually() -> None:
    """A file above the per-file cap is skipped, the walk continues."""
    eligible = _entries(("a.py", 10), ("huge.py", 500), ("b.py", 600))
    budget = SelectionBudget(max_file_size=400, max_total_size=10_000)
    selection = select_files(eligible, budget)
    assert _paths(selection.files) == ["a.py"]


def test_total_budget_stops_even_if_smaller_files_follow() -> None:
    """Known non-optimality: no scanning past the first overflow."""
    eligible = _entries(("a.py", 60), ("b.py", 50), ("c.py", 45))
    selection = select_files(
        eligible, SelectionBudget(max_total_size=100)
    )
    # sorted: c(45), b(50), a(60); c+b=95, a would make 155
    assert _paths(selection.files) == ["c.py", "b.py"]


def test_exact_budget_fit_is_admitted() -> None:
    eligible = _entries(("a.py", 40), ("b.py", 60))
    selection = select_files(
        eligible, SelectionBudget(max_total_size=100, max_file_size=60)
    )
    assert _paths(selection.files) == ["a.py", "b.py"]
    assert selection.total_size == 100


def test_zero_file_budget_selects_nothing() -> None:
    eligible = _entries(("a.py", 1))
    selection = select_files(eligible, SelectionBudget(max_files=0))
    assert selection.files == ()
    assert selection.total_eligible == 1


def test_empty_input() -> None:
    selection = select_files([], SelectionBudget())
    assert selection.files == ()
    assert selection.total_eligible == 0


def test_input_not_mutated() -> None:
    eligible = _entries(("b.py", 2), ("a.py", 1))
    select_files(eligible, SelectionBudget())
    assert [e.path for e in eligible] == ["b.py", "a.py"]


@pytest.mark.parametrize("seed", range(25))
def test_budget_invariants_hold(seed: int) -> None:
    rng = random.Random(seed)
    eligible = _entries(
        *((f"f{i}.py", rng.randint(0, 2_000)) for i in range(rng.randint(0, 60)))
    )
    budget = SelectionBudget(
        max_files=rng.randint(0, 30),
        max_file_size=rng.randint(0, 2_000),
        max_total_size=rng.randint(0, 20_000),
    )

    selection = select_files(eligible, budget)

    assert len(selection.files) <= budget.max_files
    assert selection.total_size <= budget.max_total_size
    assert all(f.size <= budget.max_file_size for f in selection.files)
    # deterministic on identical input
    assert select_files(eligible, budget) == selection
