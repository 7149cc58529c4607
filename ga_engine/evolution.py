"""
Evolution driver.

Runs the generation loop: evaluate, update temperature, report, check
termination, then select, recombine, mutate and reinsert. Exactly one
generation is in flight at a time. There is no cancellation: a termination
predicate that never fires keeps the loop running forever.
"""

import asyncio
from typing import Any, Dict, Optional, Union

from .config import EvolutionConfig
from .crossover import crossover
from .data_models import Chromosome, Population, Problem, ProgressLogger, flatten_parents
from .evaluation import evaluate
from .initialization import initialize, maybe_await
from .mutation import mutation
from .random_utils import RandomSource, ensure_random_source
from .reinsertion import reinsertion
from .selection import select


class EvolutionError(Exception):
    """Raised when the generation loop cannot continue (e.g. empty population)."""

    def __init__(self, message: str, generation: int):
        super().__init__(message)
        self.generation = generation


def format_progress(population_size: int, generation: int, temperature: float, fitness: float) -> str:
    """
    Progress line emitted once per generation.

    Returns:
        '{"population":N,"generation":G,"temperature":T.TT,"fitness":F.FFFF}'
    """
    return (
        f'{{"population":{population_size},"generation":{generation},'
        f'"temperature":{temperature:.2f},"fitness":{fitness:.4f}}}'
    )


def next_temperature(temperature: float, best_fitness: float, last_best_fitness: float,
                     config: EvolutionConfig) -> float:
    """Decayed improvement signal: cooling_rate * (T + (best - last_best * sign))."""
    sign = config.fitness_sort_direction.sign
    return config.cooling_rate * (temperature + (best_fitness - last_best_fitness * sign))


async def evolve(
    population: Population,
    problem: Problem,
    config: Union[EvolutionConfig, Dict[str, Any], None] = None,
    rng: Optional[RandomSource] = None,
    log_update: Optional[ProgressLogger] = None,
    generation: int = 0,
    last_best_fitness: float = 0.0,
    temperature: float = 0.0
) -> Chromosome:
    """
    Evolve a population until the problem's termination predicate fires.

    Args:
        population: Starting population (evaluated or not)
        problem: Fitness function and termination predicate
        config: Evolution configuration
        rng: Random source shared by every operator
        log_update: Optional callback receiving one progress line per generation
        generation: Index of the first generation
        last_best_fitness: Best fitness baseline for the temperature update
        temperature: Starting temperature

    Returns:
        Best chromosome of the generation in which the run terminated

    Raises:
        EvolutionError: If a generation has no chromosomes left
        Whatever the fitness function or logger raises
    """
    config = EvolutionConfig.coerce(config)
    rng = ensure_random_source(rng)

    while True:
        population = await evaluate(population, problem.fitness_fn, config.fitness_sort_direction)
        if not population:
            raise EvolutionError(f"Population is empty at generation {generation}", generation)
        best = population[0]

        temperature = next_temperature(temperature, best.fitness, last_best_fitness, config)

        if log_update is not None:
            await maybe_await(log_update(
                format_progress(len(population), generation, temperature, best.fitness)
            ))

        if problem.should_terminate(population, generation, temperature):
            return best

        selection = select(population, config.selection_type, config.selection_rate, temperature, rng)
        children = crossover(selection.parents, config, rng)
        mutants = mutation(population, config, rng)

        population = reinsertion(
            flatten_parents(selection.parents),
            children + mutants,
            selection.leftovers,
            config,
        )
        generation += 1
        last_best_fitness = best.fitness


async def run(
    problem: Problem,
    config: Union[EvolutionConfig, Dict[str, Any], None] = None,
    log_update: Optional[ProgressLogger] = None,
    rng: Optional[RandomSource] = None
) -> Chromosome:
    """
    Initialize a population for the problem and evolve it.

    Args:
        problem: Problem to solve
        config: EvolutionConfig or dictionary of options (defaults when None)
        log_update: Optional progress callback
        rng: Random source (a fresh unseeded one when omitted)

    Returns:
        Best chromosome found
    """
    config = EvolutionConfig.coerce(config)
    population = await initialize(problem.get_genotype, config.population_size)
    return await evolve(population, problem, config, rng=rng, log_update=log_update)


def run_sync(
    problem: Problem,
    config: Union[EvolutionConfig, Dict[str, Any], None] = None,
    log_update: Optional[ProgressLogger] = None,
    rng: Optional[RandomSource] = None
) -> Chromosome:
    """Blocking wrapper around run() for callers without an event loop."""
    return asyncio.run(run(problem, config, log_update=log_update, rng=rng))
