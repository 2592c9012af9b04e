import random
from typing import TypeVar

T = TypeVar("T")


def _check_range(name: str, lo: float, hi: float) -> None:
    if lo > hi:
        raise ValueError(
            f"{name} is malformed: low ({lo}) must be <= high ({hi})"
        )


def sample_int_range(
    int_range: tuple[int, int],
    rng: random.Random,
) -> int:
    lo, hi = int_range
    _check_range("int_range", lo, hi)
    return rng.randint(lo, hi)


def sample_probability(
    prob_range: tuple[float, float],
    rng: random.Random,
) -> float:
    """Draw an epsilon or final-state probability for one sampled draft.

    Both bounds are inclusive and must lie in [0.0, 1.0]; a degenerate
    range such as ``(1.0, 1.0)`` always yields its bound.
    """
    lo, hi = prob_range
    _check_range("prob_range", lo, hi)
    if lo < 0.0 or hi > 1.0:
        raise ValueError(
            f"prob_range bounds must be within [0.0, 1.0], got ({lo}, {hi})"
        )
    if lo == hi:
        return lo
    return rng.uniform(lo, hi)


def pick_distinct(
    available: list[T],
    count: int,
    rng: random.Random,
) -> list[T]:
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")
    if count >= len(available):
        return list(available)
    return rng.sample(available, count)
