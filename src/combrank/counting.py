"""
Counting primitives for combinations and permutations.

Each function comes in two flavours:
  - fixed-width: computed with `numpy.int64` arithmetic.
    Overflows wrap silently, so callers must bound `n` and `m`
    (see `fits_fixed_width`).
  - big: exact python integers, via `scipy.special`.
"""

import logging

import numpy as np
from scipy import special

from combrank import constants, core


def factorial(n: int) -> np.int64:
    """
    n! in fixed-width arithmetic.
    """
    return falling_factorial(n, n)


def factorial_big(n: int) -> int:
    core.check_arity(n, n)
    return int(special.factorial(n, exact=True))


def falling_factorial(n: int, m: int) -> np.int64:
    """
    P(n, m) = n * (n - 1) * ... * (n - m + 1) in fixed-width arithmetic.
    P(n, 0) = 1.
    """
    core.check_arity(n, m)
    factors = np.arange(n - m + 1, n + 1, dtype=constants.FIXED_WIDTH_DTYPE)
    return np.prod(factors, dtype=constants.FIXED_WIDTH_DTYPE)


def falling_factorial_big(n: int, m: int) -> int:
    core.check_arity(n, m)
    return int(special.perm(n, m, exact=True))


def count_combinations(n: int, m: int) -> np.int64:
    """
    C(n, m) = P(n, m) / m!, fixed-width.
    """
    return falling_factorial(n, m) // factorial(m)


def count_combinations_big(n: int, m: int) -> int:
    core.check_arity(n, m)
    return int(special.comb(n, m, exact=True))


def count_permutations(n: int, m: int) -> np.int64:
    return falling_factorial(n, m)


def count_permutations_big(n: int, m: int) -> int:
    return falling_factorial_big(n, m)


def fits_fixed_width(n: int, m: int) -> bool:
    """
    Returns True if P(n, m) fits in the fixed-width range.

    Every count an engine takes over `(n, m)`, combinations included,
    is bounded by P(n, m), so all of them are exact when this holds.
    """
    return falling_factorial_big(n, m) <= constants.FIXED_WIDTH_MAX


def check_fixed_width(n: int, m: int) -> None:
    """
    Raises a `RangeError` if counts over `(n, m)` overflow fixed-width arithmetic.
    """
    if not fits_fixed_width(n, m):
        logging.warning(
            "P(%d, %d) exceeds the fixed-width range; use the big variants", n, m
        )
        raise core.RangeError(
            f"Counts for n={n}, m={m} exceed {constants.FIXED_WIDTH_MAX}"
        )
