"""
Random primitives for the evolution engine.

Every operator that needs randomness receives a RandomSource instead of
reaching for global state. Tests substitute scripted subclasses; callers
that want reproducible runs pass a seeded numpy Generator.
"""

import math
from typing import Optional

import numpy as np


class RandomSource:
    """
    Injectable source of the four random draws used by the operators.

    Attributes:
        generator: numpy Generator backing uniform() (unseeded by default)
    """

    def __init__(self, generator: Optional[np.random.Generator] = None):
        self.generator = generator if generator is not None else np.random.default_rng()

    def uniform(self) -> float:
        """Uniform draw in [0, 1)."""
        return float(self.generator.random())

    def bounded_int(self, maximum: int) -> int:
        """
        Integer draw in [0, maximum], inclusive.

        Args:
            maximum: Largest value that can be returned

        Returns:
            floor(uniform() * (maximum + 1))
        """
        return int(math.floor(self.uniform() * (maximum + 1)))

    def gaussian(self, mean: float, stddev: float) -> float:
        """
        Normally distributed draw using Marsaglia's polar method.

        Args:
            mean: Mean of the distribution
            stddev: Standard deviation of the distribution

        Returns:
            Random value from N(mean, stddev^2)
        """
        w = 0.0
        x1 = 0.0
        while not 0 < w < 1:
            x1 = 2 * self.uniform() - 1
            x2 = 2 * self.uniform() - 1
            w = x1 * x1 + x2 * x2
        return mean + stddev * x1 * math.sqrt(-2 * math.log(w) / w)

    def triangular(self, bias: float, minimum: float, maximum: float) -> float:
        """
        Triangular-distribution draw via the inverse CDF.

        The peak sits at the 1/bias fraction of the [minimum, maximum] range.

        Args:
            bias: Peak position as the reciprocal of a fraction (1 puts it at maximum)
            minimum: Lower bound
            maximum: Upper bound

        Returns:
            Random value in [minimum, maximum]
        """
        n = self.uniform()
        rate = 1 / bias
        if n < rate:
            fraction = math.sqrt(n * rate)
        else:
            fraction = 1 - math.sqrt((1 - n) * (1 - rate))
        return fraction * (maximum - minimum) + minimum


def ensure_random_source(rng: Optional[RandomSource]) -> RandomSource:
    """Return rng, or a fresh unseeded RandomSource when rng is None."""
    return rng if rng is not None else RandomSource()
