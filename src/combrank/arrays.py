"""
Array helpers used to simulate removing elements from a sequence
without reallocating it.

They work in place on python lists and numpy arrays alike.
"""

import contextlib
from typing import Any, Iterator, List, MutableSequence, Sequence

import numpy as np

from combrank import constants, core


def left_shift(array: MutableSequence[Any], index: int, length: int) -> None:
    """
    Rotates `array[index:length]` one step to the left,
    so the element at `index` ends up at `length - 1`.
    """
    value = array[index]
    array[index : length - 1] = array[index + 1 : length]
    array[length - 1] = value


def right_shift(array: MutableSequence[Any], index: int, length: int) -> None:
    """
    Undoes `left_shift`: the element at `length - 1` moves back to `index`.
    """
    value = array[length - 1]
    array[index + 1 : length] = array[index : length - 1]
    array[index] = value


@contextlib.contextmanager
def shifted(array: MutableSequence[Any], index: int, length: int) -> Iterator[None]:
    """
    Removes `array[index]` from the window `array[:length - 1]`
    for the duration of the block.
    """
    left_shift(array, index, length)
    try:
        yield
    finally:
        right_shift(array, index, length)


def index_of(value: Any, array: Sequence[Any]) -> int:
    """
    Linear search. Returns -1 if `value` isn't in `array`.
    """
    for idx, element in enumerate(array):
        if element == value:
            return idx
    return -1


def subset_indices(subset: Sequence[Any], source: Sequence[Any]) -> List[int]:
    """
    Returns the position in `source` of each element of `subset`, in `subset` order.
    Repeated values take successive occurrences in `source`.
    """
    used = np.zeros(len(source), dtype=np.bool_)
    positions = []
    for element in subset:
        position = _first_unused(element, source, used)
        if position < 0:
            raise core.DomainError(f"Element {element!r} isn't available in the source")
        used[position] = True
        positions.append(position)
    return positions


def _first_unused(value: Any, source: Sequence[Any], used: np.ndarray) -> int:
    for idx, element in enumerate(source):
        if not used[idx] and element == value:
            return idx
    return -1


def new_mapping(size: int) -> np.ndarray:
    """
    Allocates an (uninitialized) index mapping.
    """
    return np.empty(size, dtype=constants.INDEX_DTYPE)


def init_serial(mapping: MutableSequence[int]) -> None:
    """
    Resets `mapping` to the identity `[0, 1, ..., len(mapping) - 1]`.
    """
    mapping[:] = range(len(mapping))
