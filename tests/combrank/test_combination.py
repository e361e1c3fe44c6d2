import itertools

import hypothesis
import numpy as np
import pytest

from combrank import combination, constants, core, counting
from tests import defaults


def test_count():
    assert combination.count(4, 2) == 6
    assert combination.count_big(4, 2) == 6
    assert combination.count(10, 0) == 1
    assert combination.count(10, 10) == 1


def test_unrank():
    source = [1, 2, 3, 4]
    assert combination.unrank(source, 2, 0) == (1, 2)
    assert combination.unrank(source, 2, 1) == (1, 3)
    assert combination.unrank(source, 2, 3) == (2, 3)
    assert combination.unrank(source, 2, 5) == (3, 4)
    assert combination.unrank(source, 2, np.int64(5)) == (3, 4)


def test_unrank_with_array_source():
    source = np.array([1, 2, 3, 4], dtype=np.int32)
    output = combination.unrank(source, 3, 3)
    np.testing.assert_array_equal(output, np.array([2, 3, 4], dtype=np.int32))
    assert output.dtype == np.int32


def test_unrank_into():
    source = [1, 2, 3, 4]
    out = [None, None]
    combination.unrank_into(out, source, 4)
    assert out == [2, 4]

    buffer = np.zeros(3, dtype=np.int64)
    combination.unrank_into(buffer, np.array(source), 0)
    np.testing.assert_array_equal(buffer, [1, 2, 3])


def test_unrank_with_invalid_rank():
    with pytest.raises(core.DomainError):
        combination.unrank([1, 2, 3, 4], 2, 6)
    with pytest.raises(core.DomainError):
        combination.unrank([1, 2, 3, 4], 2, -1)
    with pytest.raises(core.DomainError):
        combination.unrank_big([1, 2, 3, 4], 2, 6)


def test_unrank_with_invalid_arity():
    with pytest.raises(core.DomainError):
        combination.unrank([1, 2, 3], 4, 0)
    with pytest.raises(core.DomainError):
        combination.unrank([1, 2, 3], -1, 0)


def test_rank():
    source = [1, 2, 3, 4]
    assert combination.rank((1, 2), source) == 0
    assert combination.rank((3, 4), source) == 5
    assert combination.rank_big((3, 4), source) == 5
    assert combination.rank((), source) == 0


def test_rank_ignores_element_order():
    source = [1, 2, 3, 4]
    assert combination.rank((4, 1), source) == combination.rank((1, 4), source) == 2


def test_rank_with_elements_not_in_source():
    with pytest.raises(core.DomainError):
        combination.rank((1, 5), [1, 2, 3, 4])
    with pytest.raises(core.DomainError):
        combination.rank((1, 2, 3), [1, 2])


def test_generate():
    source = [1, 2, 3, 4]
    expected = [(1, 2), (1, 3), (1, 4), (2, 3), (2, 4), (3, 4)]
    assert combination.generate(source, 2) == expected
    assert combination.generate_recursive(source, 2) == expected


def test_generate_with_array_source():
    source = np.array([1, 2, 3, 4])
    expected = np.array([[1, 2, 3], [1, 2, 4], [1, 3, 4], [2, 3, 4]])
    np.testing.assert_array_equal(combination.generate(source, 3), expected)
    np.testing.assert_array_equal(combination.generate_recursive(source, 3), expected)


def test_generate_with_no_columns():
    assert combination.generate("abc", 0) == [()]
    assert combination.generate_recursive("abc", 0) == [()]
    assert combination.generate([], 0) == [()]
    assert combination.generate_recursive(np.array([1, 2]), 0).shape == (1, 0)


def test_generate_with_all_columns():
    assert combination.generate("abc", 3) == [("a", "b", "c")]
    assert combination.generate_recursive("abc", 3) == [("a", "b", "c")]


def test_generate_rejects_large_tables():
    with pytest.raises(core.RangeError):
        combination.generate(list(range(40)), 20)
    with pytest.raises(core.RangeError):
        combination.generate_recursive(list(range(40)), 20)


def test_generate_does_not_modify_source():
    source = [3, 1, 2]
    combination.generate(source, 2)
    combination.generate_recursive(source, 2)
    assert source == [3, 1, 2]


@hypothesis.given(arity=defaults.size_length(max_size=10))
@hypothesis.settings(deadline=None)
def test_generate_matches_lexicographic_order(arity):
    size, length = arity
    source = defaults.letters(size)
    expected = list(itertools.combinations(source, length))
    assert combination.generate(source, length) == expected
    assert combination.generate_recursive(source, length) == expected


@hypothesis.given(arity=defaults.size_length(max_size=10))
@hypothesis.settings(deadline=None)
def test_generate_rows_are_distinct(arity):
    size, length = arity
    table = combination.generate_recursive(defaults.letters(size), length)
    assert len(table) == len(set(table)) == combination.count(size, length)


@hypothesis.given(
    sample=defaults.size_length_rank(
        max_size=16, count_fn=counting.count_combinations_big
    )
)
def test_unrank_rank_round_trip(sample):
    size, length, rank = sample
    source = defaults.letters(size)
    output = combination.unrank(source, length, rank)
    assert len(output) == length
    output_rank = combination.rank(output, source)
    assert output_rank == rank
    assert combination.unrank(source, length, output_rank) == output


@hypothesis.given(
    sample=defaults.size_length_rank(
        max_size=16, count_fn=counting.count_combinations_big
    )
)
def test_fixed_width_and_big_agree(sample):
    size, length, rank = sample
    source = defaults.letters(size)
    output = combination.unrank(source, length, rank)
    assert combination.unrank_big(source, length, rank) == output
    assert combination.rank_big(output, source) == combination.rank(output, source)


def test_big_source():
    source = list(range(100))
    total = combination.count_big(100, 50)
    assert total > constants.FIXED_WIDTH_MAX
    assert combination.unrank_big(source, 50, 0) == tuple(range(50))
    assert combination.unrank_big(source, 50, total - 1) == tuple(range(50, 100))
    assert combination.rank_big(tuple(range(50, 100)), source) == total - 1

    output = combination.unrank_big(source, 50, total // 3)
    assert combination.rank_big(output, source) == total // 3


def test_big_source_with_fixed_width():
    source = list(range(100))
    with pytest.raises(core.RangeError):
        combination.unrank(source, 50, 0)
    with pytest.raises(core.RangeError):
        combination.rank(tuple(range(50)), source)
