"""Seeded pseudo-random number generator.

A 32-bit linear congruential generator (Numerical Recipes constants).
Synthetic charts are reproducible across reloads and test runs because
every bar sequence is drawn from a generator seeded by its
(symbol, timeframe) pair.
"""

from typing import Callable

MULTIPLIER = 1664525
INCREMENT = 1013904223
MODULUS = 2**32


def seeded_random(seed: int) -> Callable[[], float]:
    """Create a generator returning floats in [0, 1).

    Each call returns the next value of the stream. State is held in the
    closure, so independent generators never affect each other.

    Args:
        seed: Integer seed (reduced modulo 2**32)

    Returns:
        Zero-argument callable producing the deterministic stream
    """
    state = seed % MODULUS

    def draw() -> float:
        nonlocal state
        state = (state * MULTIPLIER + INCREMENT) % MODULUS
        return state / MODULUS

    return draw
