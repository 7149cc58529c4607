"""
Fitness evaluation and ranking.
"""

import asyncio
from dataclasses import replace
from typing import Dict, Union

import numpy as np

from .data_models import Chromosome, FitnessFunction, Population, SortDirection
from .initialization import maybe_await


def sort_population(
    population: Population,
    direction: Union[SortDirection, str] = SortDirection.DESC
) -> Population:
    """
    Stable sort by fitness.

    Args:
        population: Chromosomes to sort
        direction: DESC puts the highest fitness first, ASC the lowest

    Returns:
        New sorted list; chromosomes with equal fitness keep their order
    """
    descending = SortDirection(direction) is SortDirection.DESC
    return sorted(population, key=lambda chromosome: chromosome.fitness, reverse=descending)


async def _score(chromosome: Chromosome, fitness_fn: FitnessFunction) -> Chromosome:
    fitness = await maybe_await(fitness_fn(chromosome))
    return replace(chromosome, fitness=fitness, age=chromosome.age + 1)


async def evaluate(
    population: Population,
    fitness_fn: FitnessFunction,
    sort_direction: Union[SortDirection, str] = SortDirection.DESC
) -> Population:
    """
    Score, age and rank a population.

    All fitness calls of a generation are issued together and awaited as a
    group; one failing call fails the whole evaluation. Input chromosomes
    are left untouched.

    Args:
        population: Chromosomes to evaluate
        fitness_fn: Callable (chromosome) -> fitness, optionally async
        sort_direction: Ordering of the returned population

    Returns:
        New chromosomes with fitness set and age incremented by one,
        stably sorted by fitness
    """
    scored = await asyncio.gather(*(_score(chromosome, fitness_fn) for chromosome in population))
    return sort_population(list(scored), sort_direction)


def population_statistics(population: Population) -> Dict:
    """
    Summary statistics of an evaluated population.

    Args:
        population: Evaluated population

    Returns:
        Dictionary with size, fitness extremes/mean/std and mean age
    """
    if not population:
        return {'size': 0}

    fitness = np.array([chromosome.fitness for chromosome in population], dtype=float)
    ages = np.array([chromosome.age for chromosome in population], dtype=float)

    return {
        'size': len(population),
        'max_fitness': float(fitness.max()),
        'min_fitness': float(fitness.min()),
        'mean_fitness': float(fitness.mean()),
        'std_fitness': float(fitness.std()),
        'mean_age': float(ages.mean()),
    }
