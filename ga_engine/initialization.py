"""
Initial population construction.
"""

import asyncio
import inspect
from typing import Any

from .data_models import Chromosome, GenotypeFactory, Population


async def maybe_await(value: Any) -> Any:
    """Await value if it is awaitable, otherwise return it as is."""
    if inspect.isawaitable(value):
        return await value
    return value


async def _build_chromosome(get_genotype: GenotypeFactory, index: int) -> Chromosome:
    genes = await maybe_await(get_genotype(index))
    return Chromosome.from_genes(genes)


async def initialize(get_genotype: GenotypeFactory, population_size: int = 100) -> Population:
    """
    Build the starting population from a genotype factory.

    The factory is called once per slot with indices 0..population_size-1.
    Coroutine factories run concurrently; the result keeps index order
    regardless of completion order.

    Args:
        get_genotype: Callable (index) -> genotype, optionally async
        population_size: Number of chromosomes to create

    Returns:
        Population of unevaluated chromosomes (fitness=0, age=0)

    Raises:
        Whatever the factory raises; nothing is retried
    """
    return list(await asyncio.gather(
        *(_build_chromosome(get_genotype, index) for index in range(population_size))
    ))
