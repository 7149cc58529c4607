"""
Reinsertion: assembling the next generation.
"""

import math
from typing import Callable, Dict, Optional

from .config import EvolutionConfig, ReinsertionType
from .data_models import Population
from .evaluation import sort_population


def pure(parents: Population, offspring: Population, leftovers: Population,
         config: EvolutionConfig) -> Population:
    """Next generation is the offspring alone."""
    return offspring


def survivor_total(pool_size: int, config: EvolutionConfig) -> int:
    """survivor_count when positive, otherwise floor(pool_size * survival_rate)."""
    if config.survivor_count > 0:
        return config.survivor_count
    return int(math.floor(pool_size * config.survival_rate))


def elitist(parents: Population, offspring: Population, leftovers: Population,
            config: EvolutionConfig) -> Population:
    """
    Offspring plus the best of the previous generation.

    The fittest survivors of parents+leftovers are appended to the
    offspring and the result is re-sorted by fitness.
    """
    direction = config.fitness_sort_direction
    pool = parents + leftovers
    survivors = sort_population(pool, direction)[:survivor_total(len(pool), config)]
    return sort_population(offspring + survivors, direction)


REINSERTION_STRATEGIES: Dict[ReinsertionType, Callable[..., Population]] = {
    ReinsertionType.PURE: pure,
    ReinsertionType.ELITIST: elitist,
}


def reinsertion(
    parents: Population,
    offspring: Population,
    leftovers: Population,
    config: Optional[EvolutionConfig] = None
) -> Population:
    """
    Combine parents, offspring and leftovers into the next generation.

    Args:
        parents: Flattened parent pairs
        offspring: Crossover children followed by mutants
        leftovers: Unselected chromosomes
        config: Evolution configuration (reinsertion_type, reinsertion_fn,
            survival_rate, survivor_count, max_population, max_population_fn)

    Returns:
        New population, truncated to the population cap when it is exceeded.
        The population is never grown to reach the cap.
    """
    config = EvolutionConfig.coerce(config)
    reinsertion_fn = config.reinsertion_fn or REINSERTION_STRATEGIES[config.reinsertion_type]

    new_population = reinsertion_fn(parents, offspring, leftovers, config)

    limit = config.population_cap
    if config.max_population_fn is not None:
        limit = config.max_population_fn(new_population)
    if limit and limit > 0:
        return new_population[:limit]
    return new_population
