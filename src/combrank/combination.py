"""
Combinations of a source sequence, by rank.

Results are enumerated in lexicographic order of source positions:
fixing the first column splits the ranks into contiguous blocks,
one per candidate source element, so a rank can be mapped to its
combination (and back) without enumerating the ones before it.

For `source=[1, 2, 3, 4]` and `length=2` the rows are
[1, 2], [1, 3], [1, 4], [2, 3], [2, 4], [3, 4].
"""

import logging
from typing import Any, Callable, List, MutableSequence, Sequence

import numpy as np

from combrank import arrays, constants, core, counting

CountFn = Callable[[int, int], Any]


def count(n: int, m: int) -> np.int64:
    return counting.count_combinations(n, m)


def count_big(n: int, m: int) -> int:
    return counting.count_combinations_big(n, m)


def unrank(source: core.Source, length: int, rank: core.Rank) -> core.Row:
    """
    Returns the combination at `rank`, using fixed-width counts.

    Args:
        source: the sequence to draw elements from.
        length: the number of elements in each combination.
        rank: the zero-based row number of the combination.
    """
    positions = _positions_for_rank(len(source), length, rank, big=False)
    return core.as_row(source, positions)


def unrank_big(source: core.Source, length: int, rank: core.Rank) -> core.Row:
    """
    Same as `unrank`, with exact counts for arbitrarily large sources.
    """
    positions = _positions_for_rank(len(source), length, rank, big=True)
    return core.as_row(source, positions)


def unrank_into(
    out: MutableSequence[Any], source: core.Source, rank: core.Rank
) -> None:
    """
    Writes the combination at `rank` into `out`, drawing `len(out)` elements.
    """
    positions = _positions_for_rank(len(source), len(out), rank, big=False)
    for col, position in enumerate(positions):
        out[col] = source[position]


def rank(combination: Sequence[Any], source: core.Source) -> int:
    """
    Returns the rank of `combination`, using fixed-width counts.
    """
    size, length = len(source), len(combination)
    core.check_arity(size, length)
    counting.check_fixed_width(size, length)
    positions = sorted(arrays.subset_indices(combination, source))
    return _rank_for_positions(size, positions, count_fn=counting.count_combinations)


def rank_big(combination: Sequence[Any], source: core.Source) -> int:
    size, length = len(source), len(combination)
    core.check_arity(size, length)
    count_fn = counting.count_combinations_big
    positions = sorted(arrays.subset_indices(combination, source))
    return _rank_for_positions(size, positions, count_fn=count_fn)


def generate(source: core.Source, length: int) -> core.Table:
    """
    Generates every combination, unranking each row independently.
    """
    size = len(source)
    total = _table_rows(size, length)
    count_fn = _count_fn(size, length)
    logging.debug("Unranking %d combinations of %d out of %d", total, length, size)
    table = np.empty((total, length), dtype=constants.INDEX_DTYPE)
    for row in range(total):
        table[row, :] = _walk(size, length, row, count_fn=count_fn)
    return core.as_table(source, table)


def generate_recursive(source: core.Source, length: int) -> core.Table:
    """
    Generates every combination by filling the table column by column.

    The rows where a candidate is chosen for a column are contiguous,
    so each candidate fills its whole block of rows at once and the
    next column is filled within that block.
    """
    size = len(source)
    total = _table_rows(size, length)
    logging.debug("Filling %d combinations of %d out of %d", total, length, size)
    table = np.empty((total, length), dtype=constants.INDEX_DTYPE)
    if length > 0:
        _fill(
            table,
            size=size,
            data_index=0,
            row=0,
            col=0,
            count_fn=_count_fn(size, length),
        )
    return core.as_table(source, table)


def _positions_for_rank(
    size: int, length: int, rank: core.Rank, big: bool
) -> List[int]:
    core.check_arity(size, length)
    if big:
        count_fn: CountFn = counting.count_combinations_big
    else:
        counting.check_fixed_width(size, length)
        count_fn = counting.count_combinations
    row = core.check_rank(rank, int(count_fn(size, length)))
    return _walk(size, length, row, count_fn=count_fn)


def _walk(size: int, length: int, row: int, count_fn: CountFn) -> List[int]:
    positions = []
    data_index = 0
    for col in range(length):
        data_right_len = size - data_index
        right_len = length - col
        for offset in range(data_right_len - right_len + 1):
            # rows in which data_index is chosen for this column
            block = int(count_fn(data_right_len - offset - 1, right_len - 1))
            if row < block:
                positions.append(data_index)
                data_index += 1
                break
            row -= block
            data_index += 1
    return positions


def _rank_for_positions(
    size: int, positions: Sequence[int], count_fn: CountFn
) -> int:
    length = len(positions)
    row = 0
    data_index = 0
    for col in range(length):
        data_right_len = size - data_index
        right_len = length - col
        for offset in range(data_right_len - right_len + 1):
            if data_index == positions[col]:
                data_index += 1
                break
            row += int(count_fn(data_right_len - offset - 1, right_len - 1))
            data_index += 1
    return row


def _fill(
    table: np.ndarray,
    size: int,
    data_index: int,
    row: int,
    col: int,
    count_fn: CountFn,
) -> None:
    length = table.shape[1]
    data_right_len = size - data_index
    right_len = length - col
    for offset in range(data_right_len - right_len + 1):
        block = int(count_fn(data_right_len - offset - 1, right_len - 1))
        table[row : row + block, col] = data_index + offset
        if col + 1 < length:
            _fill(
                table,
                size=size,
                data_index=data_index + offset + 1,
                row=row,
                col=col + 1,
                count_fn=count_fn,
            )
        row += block


def _table_rows(size: int, length: int) -> int:
    core.check_arity(size, length)
    total = count_big(size, length)
    core.check_table_rows(total)
    return total


def _count_fn(size: int, length: int) -> CountFn:
    if counting.fits_fixed_width(size, length):
        return counting.count_combinations
    return counting.count_combinations_big
