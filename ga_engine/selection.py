"""
Parent selection.

Implements the selection strategies and the selector that turns their
picks into parent pairs plus the unselected leftovers. Strategies expect a
population already sorted by the evaluator.
"""

import math
from bisect import bisect_left
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Union

import numpy as np

from .config import SelectionType, parse_choice
from .data_models import Chromosome, Parents, Population
from .random_utils import RandomSource, ensure_random_source


class SelectionError(Exception):
    """
    Raised when a strategy cannot make a selection from its input.

    Attributes:
        strategy: Strategy that failed
        context: Values describing the failure
    """

    def __init__(self, message: str, strategy: str, **context):
        super().__init__(message)
        self.strategy = strategy
        self.context = context


class NoCandidateFoundError(SelectionError):
    """Raised when stochastic universal sampling finds no chromosome for a pointer."""


@dataclass
class SelectionResult:
    """
    Outcome of one selection pass.

    Attributes:
        parents: Adjacent selected chromosomes paired up
        leftovers: Population members that were not selected
    """
    parents: Parents
    leftovers: Population


def _total_fitness(population: Population) -> float:
    return sum(chromosome.fitness for chromosome in population)


def elite(population: Population, offset: int, temperature: float,
          rng: RandomSource) -> Population:
    """First `offset` chromosomes (the fittest, given a sorted population)."""
    return population[:offset]


def random_selection(population: Population, offset: int, temperature: float,
                     rng: RandomSource) -> Population:
    """Random permutation of the population, truncated to `offset`."""
    return sorted(population, key=lambda _: rng.uniform())[:offset]


def tournament(population: Population, offset: int, temperature: float,
               rng: RandomSource) -> Population:
    """
    Repeated mini-contests among random subsets.

    Each round draws ceil(len/3) contestants from the chromosomes that have
    not won yet and keeps the fittest. No chromosome wins twice.
    """
    tournament_size = math.ceil(len(population) / 3)
    winners: List[Chromosome] = []
    winner_ids = set()

    while len(winners) < offset:
        pool = [chromosome for chromosome in population if id(chromosome) not in winner_ids]
        contestants = random_selection(pool, tournament_size, temperature, rng)
        winner = contestants[0]
        for contestant in contestants:
            winner = winner if winner.fitness > contestant.fitness else contestant
        winners.append(winner)
        winner_ids.add(id(winner))

    return winners


def roulette(population: Population, offset: int, temperature: float,
             rng: RandomSource) -> Population:
    """
    Fitness-proportionate selection via stochastic acceptance.

    A uniformly drawn index is accepted with probability
    fitness / remaining_total_fitness; accepted indices are never drawn again.
    Requires non-negative fitness.

    Raises:
        SelectionError: If winners are still needed but the remaining total
            fitness is not positive
    """
    winners: List[Chromosome] = []
    remaining_fitness = _total_fitness(population)
    contestants = len(population)
    past_winners = set()

    while len(winners) < offset:
        if remaining_fitness <= 0:
            raise SelectionError(
                "roulette selection needs a positive total fitness; "
                f"remaining total is {remaining_fitness}",
                strategy=SelectionType.ROULETTE.value,
                remaining_fitness=remaining_fitness,
                selected=len(winners),
                requested=offset,
            )
        idx = int(math.floor(contestants * rng.uniform()))
        if idx not in past_winners and rng.uniform() < population[idx].fitness / remaining_fitness:
            winners.append(population[idx])
            past_winners.add(idx)
            # total over unchosen chromosomes only; exactly 0 once they all score 0
            remaining_fitness = sum(
                chromosome.fitness for i, chromosome in enumerate(population)
                if i not in past_winners
            )

    return winners


def stochastic_universal_sampling(population: Population, offset: int, temperature: float,
                                  rng: RandomSource) -> Population:
    """
    One spin of a fitness-weighted wheel with `offset` evenly spaced pointers.

    The same chromosome may be picked by several pointers.

    Raises:
        NoCandidateFoundError: If rounding leaves a pointer past the
            accumulated fitness of the whole population
    """
    if offset <= 0:
        return []

    total = _total_fitness(population)
    interval = total / offset
    start = rng.uniform() * interval
    pointers = [start + i * interval for i in range(offset)]

    selected = []
    for pointer in pointers:
        cumulative = 0.0
        keep = None
        for chromosome in population:
            if chromosome.fitness + cumulative >= pointer:
                keep = chromosome
                break
            cumulative += chromosome.fitness
        if keep is None:
            raise NoCandidateFoundError(
                "No candidate to keep was found",
                strategy=SelectionType.STOCHASTIC_UNIVERSAL_SAMPLING.value,
                pointer=pointer,
                total_fitness=total,
            )
        selected.append(keep)

    return selected


def boltzmann_selection(population: Population, offset: int, temperature: float,
                        rng: RandomSource) -> Population:
    """
    Selection weighted by exp(fitness / temperature).

    Low temperatures favour the fittest sharply; high temperatures flatten
    the distribution toward uniform. Each draw binary-searches a uniform
    value in the cumulative distribution of the chromosomes not yet chosen,
    so no chromosome is returned twice.

    At temperature 0 (the limit of T -> 0+) the distribution collapses onto
    the fittest chromosome, so the `offset` fittest are taken in order.
    """
    if offset <= 0:
        return []
    if temperature == 0:
        return sorted(population, key=lambda chromosome: chromosome.fitness, reverse=True)[:offset]

    scaled = np.array([chromosome.fitness for chromosome in population], dtype=float) / temperature
    available = list(range(len(population)))
    selected = []

    for _ in range(offset):
        # shifted by the max: same normalized distribution, exp() stays finite
        weights = np.exp(scaled[available] - scaled[available].max())
        cumulative = list(np.cumsum(weights) / weights.sum())
        position = min(bisect_left(cumulative, rng.uniform()), len(available) - 1)
        selected.append(population[available.pop(position)])

    return selected


def rank(population: Population, offset: int, temperature: float,
         rng: RandomSource) -> Population:
    """
    Stochastic acceptance over fitness ranks instead of raw fitness.

    Chromosomes are ranked ascending by fitness; rank idx is accepted with
    probability (idx + 1) / remaining_rank_sum, so outliers in fitness
    magnitude do not dominate.
    """
    ranked = sorted(population, key=lambda chromosome: chromosome.fitness)
    contestants = len(ranked)
    rank_sum = contestants * (contestants + 1) / 2
    winners: List[Chromosome] = []
    past_winners = set()

    while len(winners) < offset:
        idx = int(math.floor(contestants * rng.uniform()))
        if idx not in past_winners and rng.uniform() < (idx + 1) / rank_sum:
            winners.append(ranked[idx])
            rank_sum -= idx + 1
            past_winners.add(idx)

    return winners


SELECTION_STRATEGIES: Dict[SelectionType, Callable[..., Population]] = {
    SelectionType.ELITE: elite,
    SelectionType.RANDOM: random_selection,
    SelectionType.TOURNAMENT: tournament,
    SelectionType.ROULETTE: roulette,
    SelectionType.STOCHASTIC_UNIVERSAL_SAMPLING: stochastic_universal_sampling,
    SelectionType.BOLTZMANN_SELECTION: boltzmann_selection,
    SelectionType.RANK: rank,
}


def selection_offset(population_size: int, selection_rate: float) -> int:
    """Even number of chromosomes to select, never more than the population."""
    return 2 * int(math.floor(population_size * selection_rate / 2))


def pair_up(selected: Population) -> Parents:
    """Pair adjacent chromosomes (0&1, 2&3, ...); an unmatched last one is dropped."""
    return [(selected[i], selected[i + 1]) for i in range(0, len(selected) - 1, 2)]


def select(
    population: Population,
    selection_type: Union[SelectionType, str] = SelectionType.ELITE,
    selection_rate: float = 0.8,
    temperature: float = 0.0,
    rng: Optional[RandomSource] = None
) -> SelectionResult:
    """
    Pick parent pairs from a population.

    Args:
        population: Evaluated, fitness-sorted population
        selection_type: Strategy to apply
        selection_rate: Fraction of the population to select
        temperature: Current temperature (used by boltzmann selection)
        rng: Random source (a fresh unseeded one when omitted)

    Returns:
        SelectionResult with parent pairs and the unselected leftovers

    Raises:
        ConfigValidationError: If selection_type is unknown
    """
    strategy = parse_choice(SelectionType, selection_type, "selection_type")
    rng = ensure_random_source(rng)

    offset = selection_offset(len(population), selection_rate)
    selected = SELECTION_STRATEGIES[strategy](population, offset, temperature, rng)

    selected_ids = {id(chromosome) for chromosome in selected}
    leftovers = [chromosome for chromosome in population if id(chromosome) not in selected_ids]

    return SelectionResult(parents=pair_up(selected), leftovers=leftovers)
