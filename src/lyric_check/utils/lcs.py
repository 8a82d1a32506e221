#!/usr/bin/env python3

"""
Longest common subsequence diff over two sequences.

Common prefix and suffix are matched first, the rest is solved with the
classic dynamic programming table. Walking back through the table prefers
a left-only step unless a right-only step keeps a strictly longer
subsequence.
"""

from enum import Enum
from typing import List, Optional, Sequence, Tuple


class Side(Enum):
    BOTH = "both"
    LEFT = "left"
    RIGHT = "right"


# (side, index into left or None, index into right or None)
Op = Tuple[Side, Optional[int], Optional[int]]


def _table(left: Sequence, right: Sequence) -> List[List[int]]:
    table: List[List[int]] = [[0] * (len(right) + 1) for _ in range(len(left) + 1)]
    for i in range(1, len(left) + 1):
        row = table[i]
        above = table[i - 1]
        for j in range(1, len(right) + 1):
            if left[i - 1] == right[j - 1]:
                row[j] = above[j - 1] + 1
            else:
                row[j] = max(above[j], row[j - 1])
    return table


def lcs_diff(left: Sequence, right: Sequence) -> List[Op]:
    """
    Aligns two sequences by item equality.

    Args:
        left (Sequence): The first sequence.
        right (Sequence): The second sequence.

    Returns:
        List[Op]: Ops in order, every item of both sequences appears exactly once.
    """
    prefix: int = 0
    while prefix < len(left) and prefix < len(right) and left[prefix] == right[prefix]:
        prefix += 1
    suffix: int = 0
    while (
        suffix < len(left) - prefix
        and suffix < len(right) - prefix
        and left[len(left) - 1 - suffix] == right[len(right) - 1 - suffix]
    ):
        suffix += 1

    middle_left = left[prefix : len(left) - suffix]
    middle_right = right[prefix : len(right) - suffix]
    table = _table(middle_left, middle_right)

    middle: List[Op] = []
    i, j = len(middle_left), len(middle_right)
    while i > 0 or j > 0:
        if i == 0:
            j -= 1
            middle.append((Side.RIGHT, None, prefix + j))
        elif j == 0:
            i -= 1
            middle.append((Side.LEFT, prefix + i, None))
        elif middle_left[i - 1] == middle_right[j - 1]:
            i -= 1
            j -= 1
            middle.append((Side.BOTH, prefix + i, prefix + j))
        elif table[i][j - 1] > table[i - 1][j]:
            j -= 1
            middle.append((Side.RIGHT, None, prefix + j))
        else:
            i -= 1
            middle.append((Side.LEFT, prefix + i, None))
    middle.reverse()

    ops: List[Op] = [(Side.BOTH, k, k) for k in range(prefix)]
    ops.extend(middle)
    left_tail: int = len(left) - suffix
    right_tail: int = len(right) - suffix
    ops.extend((Side.BOTH, left_tail + k, right_tail + k) for k in range(suffix))
    return ops
