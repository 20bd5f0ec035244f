"""
Round order: a shuffled traversal over the country set.
"""

import random


def new_order(country_count: int, rng: random.Random | None = None) -> list[int]:
    """
    Return a uniformly random permutation of range(country_count).

    Fisher-Yates from the end; pass a seeded random.Random for deterministic tests.
    """
    rng = rng or random.Random()
    order = list(range(country_count))
    for i in range(len(order) - 1, 0, -1):
        j = rng.randint(0, i)
        order[i], order[j] = order[j], order[i]
    return order


def advance(position: int) -> int:
    return position + 1


def is_exhausted(position: int, order: list[int]) -> bool:
    """True once every country in the order has had its round."""
    return position >= len(order)
