"""
Permutations (k-arrangements) of a source sequence, by rank.

Once an element is placed it is removed from the candidates of the
following columns. Removal is simulated with an index mapping: the
positions still available are kept at the front of the mapping and
the source itself is never touched.

For `source=[1, 2, 3, 4]` and `length=2` the first rows are
[1, 2], [1, 3], [1, 4], [2, 1], ... and the last one is [4, 3].
"""

import logging
from typing import Any, Callable, List, MutableSequence, Optional, Sequence

import numpy as np

from combrank import arrays, constants, core, counting

CountFn = Callable[[int, int], Any]


def count(n: int, m: int) -> np.int64:
    return counting.count_permutations(n, m)


def count_big(n: int, m: int) -> int:
    return counting.count_permutations_big(n, m)


def new_mapping(source: core.Source) -> np.ndarray:
    """
    Allocates a mapping that can be shared across calls on `source`,
    e.g. `unrank(source, length, rank, mapping=mapping)`.
    Calls sharing a mapping must not run concurrently.
    """
    return arrays.new_mapping(len(source))


def unrank(
    source: core.Source,
    length: int,
    rank: core.Rank,
    mapping: Optional[np.ndarray] = None,
) -> core.Row:
    """
    Returns the permutation at `rank`, using fixed-width counts.

    Args:
        source: the sequence to draw elements from.
        length: the number of elements in each permutation.
        rank: the zero-based row number of the permutation.
        mapping: an optional buffer, from `new_mapping`, to reuse.
    """
    positions = _positions_for_rank(len(source), length, rank, mapping, big=False)
    return core.as_row(source, positions)


def unrank_big(
    source: core.Source,
    length: int,
    rank: core.Rank,
    mapping: Optional[np.ndarray] = None,
) -> core.Row:
    """
    Same as `unrank`, with exact counts for arbitrarily large sources.
    """
    positions = _positions_for_rank(len(source), length, rank, mapping, big=True)
    return core.as_row(source, positions)


def unrank_into(
    out: MutableSequence[Any],
    source: core.Source,
    rank: core.Rank,
    mapping: Optional[np.ndarray] = None,
) -> None:
    positions = _positions_for_rank(len(source), len(out), rank, mapping, big=False)
    for col, position in enumerate(positions):
        out[col] = source[position]


def rank(permutation: Sequence[Any], source: core.Source) -> int:
    """
    Returns the rank of `permutation`, using fixed-width counts.
    """
    size, length = len(source), len(permutation)
    core.check_arity(size, length)
    counting.check_fixed_width(size, length)
    positions = arrays.subset_indices(permutation, source)
    return _rank_for_positions(size, positions, count_fn=counting.count_permutations)


def rank_big(permutation: Sequence[Any], source: core.Source) -> int:
    size, length = len(source), len(permutation)
    core.check_arity(size, length)
    positions = arrays.subset_indices(permutation, source)
    count_fn = counting.count_permutations_big
    return _rank_for_positions(size, positions, count_fn=count_fn)


def generate(source: core.Source, length: int) -> core.Table:
    """
    Generates every permutation, unranking each row with a shared mapping.
    """
    size = len(source)
    total = _table_rows(size, length)
    count_fn = _count_fn(size, length)
    logging.debug("Unranking %d permutations of %d out of %d", total, length, size)
    mapping = arrays.new_mapping(size)
    table = np.empty((total, length), dtype=constants.INDEX_DTYPE)
    for row in range(total):
        table[row, :] = _walk(size, length, row, mapping, count_fn=count_fn)
    return core.as_table(source, table)


def generate_recursive(source: core.Source, length: int) -> core.Table:
    """
    Generates every permutation by filling the table column by column.

    Each remaining candidate fills a block of P(n - col - 1, m - col - 1)
    rows in the current column; it is then taken out of the window
    of candidates while the next column of that block is filled.
    """
    size = len(source)
    total = _table_rows(size, length)
    logging.debug("Filling %d permutations of %d out of %d", total, length, size)
    table = np.empty((total, length), dtype=constants.INDEX_DTYPE)
    window = np.arange(size, dtype=constants.INDEX_DTYPE)
    if length > 0:
        _fill(table, window, row=0, col=0, count_fn=_count_fn(size, length))
    return core.as_table(source, table)


def _positions_for_rank(
    size: int,
    length: int,
    rank: core.Rank,
    mapping: Optional[np.ndarray],
    big: bool,
) -> List[int]:
    core.check_arity(size, length)
    if big:
        count_fn: CountFn = counting.count_permutations_big
    else:
        counting.check_fixed_width(size, length)
        count_fn = counting.count_permutations
    row = core.check_rank(rank, int(count_fn(size, length)))
    if mapping is None:
        mapping = arrays.new_mapping(size)
    elif len(mapping) < size:
        raise core.DomainError(
            f"Mapping of size {len(mapping)} is too small for a source of size {size}"
        )
    return _walk(size, length, row, mapping, count_fn=count_fn)


def _walk(
    size: int,
    length: int,
    row: int,
    mapping: MutableSequence[int],
    count_fn: CountFn,
) -> List[int]:
    arrays.init_serial(mapping)
    positions = []
    for col in range(length):
        # narrow down to the block of the columns already placed
        row %= int(count_fn(size - col, length - col))
        index = row // int(count_fn(size - col - 1, length - col - 1))
        positions.append(int(mapping[index]))
        arrays.left_shift(mapping, index, size - col)
    return positions


def _rank_for_positions(size: int, positions: Sequence[int], count_fn: CountFn) -> int:
    length = len(positions)
    mapping = arrays.new_mapping(size)
    arrays.init_serial(mapping)
    row = 0
    for col, position in enumerate(positions):
        index = arrays.index_of(position, mapping[: size - col])
        row += int(count_fn(size - col - 1, length - col - 1)) * index
        arrays.left_shift(mapping, index, size - col)
    return row


def _fill(
    table: np.ndarray,
    window: np.ndarray,
    row: int,
    col: int,
    count_fn: CountFn,
) -> None:
    length = table.shape[1]
    remaining = len(window) - col
    block = int(count_fn(remaining - 1, length - col - 1))
    for idx in range(remaining):
        table[row : row + block, col] = window[idx]
        if col + 1 < length:
            with arrays.shifted(window, idx, remaining):
                _fill(table, window, row=row, col=col + 1, count_fn=count_fn)
        row += block


def _table_rows(size: int, length: int) -> int:
    core.check_arity(size, length)
    total = count_big(size, length)
    core.check_table_rows(total)
    return total


def _count_fn(size: int, length: int) -> CountFn:
    if counting.fits_fixed_width(size, length):
        return counting.count_permutations
    return counting.count_permutations_big
