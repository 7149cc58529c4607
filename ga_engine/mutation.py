"""
Mutation operators.

Each strategy takes one chromosome and returns a perturbed copy. The
engine decides per chromosome whether to mutate it at all.
"""

from typing import Callable, Dict, List, Optional, Sequence

import numpy as np

from .config import EvolutionConfig, MutationType
from .data_models import Chromosome, Population
from .genes import flip_rule_for, is_numeric
from .random_utils import RandomSource, ensure_random_source

DEFAULT_FLIP_SOME_RATE = 0.5
DEFAULT_GAUSSIAN_RATE = 1.0


def _shuffled(genes: Sequence, rng: RandomSource) -> List:
    return sorted(genes, key=lambda _: rng.uniform())


def shuffle(chromosome: Chromosome, config: EvolutionConfig, rng: RandomSource) -> Chromosome:
    """Random permutation of the whole genotype."""
    return chromosome.with_genes(_shuffled(chromosome.genes, rng))


def flip_all(chromosome: Chromosome, config: EvolutionConfig, rng: RandomSource) -> Chromosome:
    """
    Flip every gene.

    Integers are XOR-ed with 1, booleans negated, nested sequences flipped
    element-wise; other genes are left alone. The rule is chosen from the
    first gene.
    """
    if not chromosome.genes:
        return chromosome
    flip = flip_rule_for(chromosome.genes[0])
    return chromosome.with_genes([flip(gene) for gene in chromosome.genes])


def flip_some(chromosome: Chromosome, config: EvolutionConfig, rng: RandomSource) -> Chromosome:
    """Flip each gene with probability gen_mutation_rate (default 0.5)."""
    if not chromosome.genes:
        return chromosome
    rate = DEFAULT_FLIP_SOME_RATE if config.gen_mutation_rate is None else config.gen_mutation_rate
    flip = flip_rule_for(chromosome.genes[0])
    return chromosome.with_genes([
        flip(gene) if rng.uniform() < rate else gene
        for gene in chromosome.genes
    ])


def scramble(chromosome: Chromosome, config: EvolutionConfig, rng: RandomSource) -> Chromosome:
    """Random reordering of the whole genotype."""
    return chromosome.with_genes(_shuffled(chromosome.genes, rng))


def scramble_slice(chromosome: Chromosome, config: EvolutionConfig, rng: RandomSource) -> Chromosome:
    """
    Shuffle one contiguous slice, leaving the rest in place.

    The slice length comes from scramble_size (an int, or a callable taking
    the chromosome), defaulting to half of the chromosome size. Its start is
    drawn so the slice always fits.
    """
    genes = chromosome.genes
    scramble_size = config.scramble_size
    if scramble_size is None:
        size = chromosome.size // 2
    elif callable(scramble_size):
        size = scramble_size(chromosome)
    else:
        size = scramble_size
    size = max(0, min(int(size), len(genes)))

    start = rng.bounded_int(len(genes) - size)
    end = start + size
    return chromosome.with_genes(genes[:start] + _shuffled(genes[start:end], rng) + genes[end:])


def gaussian(chromosome: Chromosome, config: EvolutionConfig, rng: RandomSource) -> Chromosome:
    """
    Redraw numeric genes around the chromosome's own statistics.

    The mean and population standard deviation are taken over all genes
    (non-numeric genes count as 0). Each numeric gene is replaced by a draw
    from N(mean, std) with probability gen_mutation_rate (default 1).
    Non-numeric genes pass through.
    """
    if not chromosome.genes:
        return chromosome
    rate = DEFAULT_GAUSSIAN_RATE if config.gen_mutation_rate is None else config.gen_mutation_rate

    values = np.array([gene if is_numeric(gene) else 0 for gene in chromosome.genes], dtype=float)
    mean = float(values.mean())
    sigma = float(values.std())

    return chromosome.with_genes([
        rng.gaussian(mean, sigma) if is_numeric(gene) and rate > rng.uniform() else gene
        for gene in chromosome.genes
    ])


MUTATION_STRATEGIES: Dict[MutationType, Callable[..., Chromosome]] = {
    MutationType.SHUFFLE: shuffle,
    MutationType.FLIP_ALL: flip_all,
    MutationType.FLIP_SOME: flip_some,
    MutationType.SCRAMBLE: scramble,
    MutationType.SCRAMBLE_SLICE: scramble_slice,
    MutationType.GAUSSIAN: gaussian,
}


def mutation(
    population: Population,
    config: Optional[EvolutionConfig] = None,
    rng: Optional[RandomSource] = None
) -> Population:
    """
    Mutate chromosomes independently with probability mutation_rate.

    Args:
        population: Chromosomes to consider
        config: Evolution configuration (mutation_type, mutation_rate,
            mutation_fn, gen_mutation_rate, scramble_size)
        rng: Random source (a fresh unseeded one when omitted)

    Returns:
        Population of the same length; untouched chromosomes are returned
        as the same objects
    """
    config = EvolutionConfig.coerce(config)
    rng = ensure_random_source(rng)
    mutation_fn = config.mutation_fn or MUTATION_STRATEGIES[config.mutation_type]

    return [
        mutation_fn(chromosome, config, rng) if rng.uniform() < config.mutation_rate else chromosome
        for chromosome in population
    ]
