"""
One-max demo problem: maximize the number of ones in a bit string.

Used by examples/one_max.yaml to exercise the CLI.
"""

import numpy as np

from ga_engine import Problem

GENOTYPE_LENGTH = 64
MAX_GENERATIONS = 500

_rng = np.random.default_rng()


def get_genotype(index: int) -> list:
    return [int(bit) for bit in _rng.integers(0, 2, size=GENOTYPE_LENGTH)]


def fitness(chromosome) -> float:
    return float(sum(chromosome.genes))


def should_terminate(population, generation, temperature) -> bool:
    return population[0].fitness >= GENOTYPE_LENGTH or generation >= MAX_GENERATIONS


problem = Problem(
    get_genotype=get_genotype,
    fitness_fn=fitness,
    should_terminate=should_terminate,
    name="one-max",
)
