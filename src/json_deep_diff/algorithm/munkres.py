"""Munkres (Hungarian) assignment solver with disallowed cells.

Finds the pairing of rows and columns with the lowest total cost.  The
classic six-step algorithm runs on a zero-padded square copy of the input,
so rectangular matrices are accepted and the surplus rows or columns stay
unassigned.  Cells set to ``DISALLOWED`` (``math.inf``) are never selected.

``solve_with_unmatched`` extends the problem so that every row and column
may instead stay unmatched at a given price::

    pairs, left, right = solve_with_unmatched([[2]], [0.5], [0.5])
    # pairs == [], left == [0], right == [0]
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

import numpy as np

from json_deep_diff.errors import UnsolvableError

__all__ = ["DISALLOWED", "augment_with_unmatched", "solve", "solve_with_unmatched"]

logger = logging.getLogger(__name__)

DISALLOWED = math.inf

_NONE = 0
_STAR = 1
_PRIME = 2


def _as_matrix(cost: Sequence[Sequence[float]] | np.ndarray) -> np.ndarray:
    matrix = np.array(cost, dtype=float)
    if matrix.size == 0:
        return matrix.reshape(0, 0)
    if matrix.ndim != 2:
        msg = f"cost matrix must be 2-D, got shape {matrix.shape}"
        raise ValueError(msg)
    if np.isnan(matrix).any():
        msg = "cost matrix must not contain NaN"
        raise ValueError(msg)
    if np.isneginf(matrix).any():
        msg = "cost matrix must not contain negative infinity"
        raise ValueError(msg)
    return matrix


def _first_uncovered_zero(
    m: np.ndarray, row_covered: np.ndarray, col_covered: np.ndarray
) -> tuple[int, int] | None:
    mask = (m == 0) & ~row_covered[:, None] & ~col_covered[None, :]
    hits = np.argwhere(mask)
    if hits.size == 0:
        return None
    return int(hits[0, 0]), int(hits[0, 1])


def _adjust(m: np.ndarray, row_covered: np.ndarray, col_covered: np.ndarray) -> None:
    """Step 6: shift the smallest uncovered value to create a new zero."""
    uncovered = m[~row_covered][:, ~col_covered]
    finite = uncovered[np.isfinite(uncovered)]
    if finite.size == 0:
        raise UnsolvableError("Matrix cannot be solved")
    smallest = finite.min()
    m[row_covered] += smallest
    m[:, ~col_covered] -= smallest


def _flip_path(marked: np.ndarray, row: int, col: int) -> None:
    """Step 5: alternate primes and stars along the path starting at a prime."""
    path = [(row, col)]
    while True:
        star_rows = np.flatnonzero(marked[:, path[-1][1]] == _STAR)
        if star_rows.size == 0:
            break
        star_row = int(star_rows[0])
        path.append((star_row, path[-1][1]))
        prime_col = int(np.flatnonzero(marked[star_row] == _PRIME)[0])
        path.append((star_row, prime_col))

    for r, c in path:
        marked[r, c] = _NONE if marked[r, c] == _STAR else _STAR


def solve(cost: Sequence[Sequence[float]] | np.ndarray) -> list[tuple[int, int]]:
    """Return the minimum-cost assignment as ``(row, column)`` pairs.

    Args:
        cost: 2-D matrix of finite costs or ``DISALLOWED``.  Rectangular
            input is padded with zero-cost rows or columns.

    Returns:
        Pairs sorted by row.  A square matrix yields a complete assignment;
        a rectangular one assigns ``min(rows, columns)`` pairs.

    Raises:
        ValueError: If *cost* is not 2-D or holds NaN or negative infinity.
        UnsolvableError: If a row or column has only disallowed cells, or
            the disallowed cells leave no complete assignment.

    Example::

        solve([[0, 1, 1], [1, 1, 0], [1, 0, 1]])  # [(0, 0), (1, 2), (2, 1)]
    """
    matrix = _as_matrix(cost)
    if matrix.size == 0:
        return []

    rows, cols = matrix.shape
    n = max(rows, cols)
    m = np.zeros((n, n), dtype=float)
    m[:rows, :cols] = matrix

    # Step 1: reduce each row by its smallest allowed value.
    finite = np.isfinite(m)
    if not finite.any(axis=1).all():
        row = int(np.flatnonzero(~finite.any(axis=1))[0])
        raise UnsolvableError(f"Row {row} of the cost matrix has no allowed cell")
    if not finite.any(axis=0).all():
        col = int(np.flatnonzero(~finite.any(axis=0))[0])
        raise UnsolvableError(f"Column {col} of the cost matrix has no allowed cell")
    m -= m.min(axis=1)[:, None]

    marked = np.zeros((n, n), dtype=np.int8)
    row_covered = np.zeros(n, dtype=bool)
    col_covered = np.zeros(n, dtype=bool)

    # Step 2: star independent zeros.
    for r, c in zip(*np.nonzero(m == 0), strict=True):
        if not row_covered[r] and not col_covered[c]:
            marked[r, c] = _STAR
            row_covered[r] = col_covered[c] = True
    row_covered[:] = False
    col_covered[:] = False

    iterations = 0
    while True:
        # Step 3: cover the columns holding a star; done when all are covered.
        col_covered[:] = (marked == _STAR).any(axis=0)
        if col_covered.all():
            break

        # Step 4: prime uncovered zeros until one starts an augmenting path.
        while True:
            iterations += 1
            zero = _first_uncovered_zero(m, row_covered, col_covered)
            if zero is None:
                _adjust(m, row_covered, col_covered)
                continue

            r, c = zero
            marked[r, c] = _PRIME
            star_cols = np.flatnonzero(marked[r] == _STAR)
            if star_cols.size:
                row_covered[r] = True
                col_covered[int(star_cols[0])] = False
                continue

            _flip_path(marked, r, c)
            row_covered[:] = False
            col_covered[:] = False
            marked[marked == _PRIME] = _NONE
            break

    logger.debug("Solved %dx%d assignment in %d iterations", rows, cols, iterations)

    star_rows, star_cols = np.nonzero(marked == _STAR)
    return [
        (int(r), int(c))
        for r, c in zip(star_rows, star_cols, strict=True)
        if r < rows and c < cols
    ]


def augment_with_unmatched(
    cost: Sequence[Sequence[float]] | np.ndarray,
    left_unmatched: Sequence[float],
    right_unmatched: Sequence[float],
) -> np.ndarray:
    """Build the square matrix that lets rows and columns go unmatched.

    For an ``L x R`` cost matrix the result is ``(L + R) x (R + L)``::

                 columns      | row slots
        rows   [ cost         | diag(left_unmatched), DISALLOWED elsewhere ]
        column [ diag(right_unmatched), | 0                                 ]
        slots    DISALLOWED elsewhere

    Row ``i`` may pair with its own slot at ``left_unmatched[i]``; column
    ``j`` may pair with its own slot at ``right_unmatched[j]``.  Slot-to-slot
    pairings cost nothing and carry no meaning.
    """
    matrix = _as_matrix(cost)
    left_size, right_size = matrix.shape
    if len(left_unmatched) != left_size or len(right_unmatched) != right_size:
        msg = (
            f"unmatched costs must have {left_size} and {right_size} entries, "
            f"got {len(left_unmatched)} and {len(right_unmatched)}"
        )
        raise ValueError(msg)

    size = left_size + right_size
    augmented = np.full((size, size), DISALLOWED, dtype=float)
    augmented[:left_size, :right_size] = matrix
    augmented[left_size:, right_size:] = 0.0
    for i, value in enumerate(left_unmatched):
        augmented[i, right_size + i] = value
    for j, value in enumerate(right_unmatched):
        augmented[left_size + j, j] = value
    return augmented


def solve_with_unmatched(
    cost: Sequence[Sequence[float]] | np.ndarray,
    left_unmatched: Sequence[float],
    right_unmatched: Sequence[float],
) -> tuple[list[tuple[int, int]], list[int], list[int]]:
    """Solve an assignment where leaving an element unmatched has a price.

    Returns:
        ``(pairs, unmatched_left, unmatched_right)``: pairs sorted by row,
        then the unmatched row and column indices in ascending order.
    """
    matrix = _as_matrix(cost)
    if matrix.size == 0:
        rows = len(left_unmatched)
        cols = len(right_unmatched)
        return [], list(range(rows)), list(range(cols))

    left_size, right_size = matrix.shape
    solution = solve(augment_with_unmatched(matrix, left_unmatched, right_unmatched))

    pairs: list[tuple[int, int]] = []
    unmatched_left: list[int] = []
    unmatched_right: list[int] = []
    for row, col in solution:
        if row < left_size and col < right_size:
            pairs.append((row, col))
        elif row < left_size:
            unmatched_left.append(row)
        elif col < right_size:
            unmatched_right.append(col)

    return pairs, unmatched_left, sorted(unmatched_right)
