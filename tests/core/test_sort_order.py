"""Sort Order — tests for pure placement arithmetic.

Tests cover:
    - append_index after an empty / non-empty container
    - index_between open and closed intervals, strictness, bad neighbour order
    - gap_exhausted threshold
    - spaced_indices spacing
    - NaN and infinities rejected on every entry point
"""

import math

import pytest

from taskboard.core.errors import FieldValidationError
from taskboard.core.sort_order import (
    append_index, check_finite, gap_exhausted, index_between, spaced_indices,
)


def test_append_index_empty_container_starts_at_step():
    assert append_index(None, 1.0) == 1.0


def test_append_index_goes_after_current_max():
    assert append_index(7.5, 1.0) == 8.5


def test_index_between_is_midpoint():
    assert index_between(1.0, 2.0, 1.0) == 1.5


def test_index_between_open_start_goes_before_first():
    assert index_between(None, 1.0, 1.0) == 0.0


def test_index_between_open_end_goes_after_last():
    assert index_between(3.0, None, 1.0) == 4.0


def test_index_between_both_open_returns_step():
    assert index_between(None, None, 2.0) == 2.0


def test_index_between_is_strictly_between_after_many_halvings():
    before, after = 1.0, 2.0
    for _ in range(30):
        mid = index_between(before, after, 1.0)
        assert before < mid < after
        after = mid


def test_index_between_rejects_unordered_neighbours():
    with pytest.raises(FieldValidationError):
        index_between(2.0, 1.0, 1.0)


def test_index_between_rejects_equal_neighbours():
    with pytest.raises(FieldValidationError):
        index_between(1.0, 1.0, 1.0)


def test_gap_exhausted_below_threshold():
    assert gap_exhausted(1.0, 1.0 + 1e-9, 1e-6)


def test_gap_not_exhausted_with_room():
    assert not gap_exhausted(1.0, 1.5, 1e-6)


def test_gap_never_exhausted_at_open_ends():
    assert not gap_exhausted(None, 1.0, 1e-6)
    assert not gap_exhausted(1.0, None, 1e-6)


def test_spaced_indices_evenly_spaced_from_step():
    assert spaced_indices(4, 1.0) == [1.0, 2.0, 3.0, 4.0]
    assert spaced_indices(0, 1.0) == []


def test_check_finite_passes_none_and_numbers():
    assert check_finite(None) is None
    assert check_finite(2.5) == 2.5


@pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
def test_check_finite_rejects_non_finite(bad):
    with pytest.raises(FieldValidationError) as exc:
        check_finite(bad)
    assert exc.value.field == "sort_index"


def test_index_between_rejects_infinite_neighbour():
    with pytest.raises(FieldValidationError):
        index_between(1.0, math.inf, 1.0)
    with pytest.raises(FieldValidationError):
        index_between(-math.inf, None, 1.0)


def test_index_between_rejects_nan_neighbour():
    with pytest.raises(FieldValidationError):
        index_between(math.nan, 2.0, 1.0)


def test_gap_exhausted_rejects_nan():
    with pytest.raises(FieldValidationError):
        gap_exhausted(1.0, math.nan, 1e-6)


def test_append_index_rejects_infinite_max():
    with pytest.raises(FieldValidationError):
        append_index(math.inf, 1.0)
