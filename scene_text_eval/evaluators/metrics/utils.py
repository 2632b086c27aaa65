"""
Shared utilities for metrics calculations.
"""
from typing import Callable

import Levenshtein

DistanceFunction = Callable[[str, str], int]


def edit_distance(a: str, b: str) -> int:
    """
    Calculate the Levenshtein distance between two strings.

    Fills the full (len(a)+1) x (len(b)+1) table; insertions, deletions
    and substitutions all cost 1.

    Args:
        a: First string
        b: Second string

    Returns:
        Integer representing the edit distance
    """
    na, nb = len(a), len(b)
    table = [[0] * (nb + 1) for _ in range(na + 1)]

    for i in range(na + 1):
        table[i][0] = i
    for j in range(nb + 1):
        table[0][j] = j

    for i in range(1, na + 1):
        for j in range(1, nb + 1):
            deletion = table[i - 1][j] + 1
            insertion = table[i][j - 1] + 1
            substitution = table[i - 1][j - 1] + (a[i - 1] != b[j - 1])
            table[i][j] = min(deletion, insertion, substitution)

    return table[na][nb]


def levenshtein_distance(a: str, b: str) -> int:
    """Levenshtein distance computed by the C extension."""
    return int(Levenshtein.distance(a, b))


def get_distance_function(use_levenshtein_library: bool = True) -> DistanceFunction:
    """Return the distance implementation selected by configuration."""
    return levenshtein_distance if use_levenshtein_library else edit_distance
