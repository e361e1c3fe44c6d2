"""
This module defines core abstractions.
"""

import logging
from typing import Any, List, Sequence, Tuple, TypeVar, Union

import numpy as np

from combrank import constants

T = TypeVar("T")

Rank = Union[int, np.integer]
Row = Union[Tuple[Any, ...], np.ndarray]
Table = Union[List[Tuple[Any, ...]], np.ndarray]
Source = Union[Sequence[T], np.ndarray]


class DomainError(ValueError):
    """
    Raised for arguments outside the domain of an operation:
    negative sizes, an arity larger than the source, ranks outside
    `[0, count)` or results that aren't drawn from the source.
    """


class RangeError(ValueError):
    """
    Raised when a computation doesn't fit its numeric or table range.
    Callers can route around fixed-width failures with the `_big` variants.
    """


def check_arity(size: int, length: int) -> None:
    if size < 0 or length < 0:
        raise DomainError(f"Sizes must be non-negative, got n={size}, m={length}")
    if length > size:
        raise DomainError(f"Arity {length} exceeds source size {size}")


def check_rank(rank: Rank, total: int) -> int:
    """
    Returns `rank` as a python int if it is in `[0, total)`.
    """
    value = int(rank)
    if not 0 <= value < total:
        raise DomainError(f"Rank {value} is outside [0, {total})")
    return value


def is_array(source: Any) -> bool:
    return isinstance(source, np.ndarray)


def as_row(source: Source, positions: Sequence[int]) -> Row:
    """
    Selects `positions` from `source`, keeping numpy arrays as arrays.
    """
    if is_array(source):
        return source[np.asarray(positions, dtype=constants.INDEX_DTYPE)]
    return tuple(source[position] for position in positions)


def check_table_rows(rows: int) -> None:
    """
    Bulk generation refuses tables larger than `MAX_TABLE_ROWS`,
    before allocating anything.
    """
    if rows > constants.MAX_TABLE_ROWS:
        logging.warning("Refusing to generate a table of %d rows", rows)
        raise RangeError(
            f"Table of {rows} rows exceeds the limit of {constants.MAX_TABLE_ROWS}"
        )


def as_table(source: Source, positions: np.ndarray) -> Table:
    """
    Turns a `(rows, m)` table of source positions into a table of source elements.
    """
    if is_array(source):
        return source[positions]
    return [tuple(source[position] for position in row) for row in positions]
