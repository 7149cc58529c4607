"""
Data models for the evolution engine.

Core data structures shared by every operator: chromosomes, populations,
parent pairs, and the caller-supplied problem contract.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Awaitable, Callable, List, Sequence, Tuple, Union


class SortDirection(str, Enum):
    """Fitness ordering. DESC means higher fitness is better."""

    ASC = "ASC"
    DESC = "DESC"

    @property
    def sign(self) -> int:
        """Sign applied to the previous best fitness in the temperature update."""
        return 1 if self is SortDirection.DESC else -1


@dataclass
class Chromosome:
    """
    One candidate solution.

    Attributes:
        genes: Ordered genotype
        size: Gene count at construction time (not recomputed afterwards)
        fitness: Score from the last evaluation (0 until evaluated)
        age: Number of evaluations this chromosome has gone through
    """
    genes: List[Any]
    size: int
    fitness: float = 0.0
    age: int = 0

    @classmethod
    def from_genes(cls, genes: Sequence[Any]) -> "Chromosome":
        """
        Wrap a genotype into a fresh, unevaluated chromosome.

        Args:
            genes: Genotype produced by a problem's genotype factory

        Returns:
            Chromosome with fitness=0, age=0 and size=len(genes)
        """
        genes = list(genes)
        return cls(genes=genes, size=len(genes))

    def with_genes(self, genes: Sequence[Any]) -> "Chromosome":
        """
        Copy of this chromosome carrying different genes.

        Fitness, age and size are carried over untouched; size may go stale
        when the gene count changes, len(genes) is authoritative.
        """
        return replace(self, genes=list(genes))

    def __len__(self) -> int:
        return len(self.genes)


Genotype = List[Any]
Population = List[Chromosome]
ParentPair = Tuple[Chromosome, Chromosome]
Parents = List[ParentPair]

GenotypeFactory = Callable[[int], Union[Sequence[Any], Awaitable[Sequence[Any]]]]
FitnessFunction = Callable[[Chromosome], Union[float, Awaitable[float]]]
TerminationPredicate = Callable[[Population, int, float], bool]
ProgressLogger = Callable[[str], Union[None, Awaitable[None]]]


@dataclass
class Problem:
    """
    Caller-supplied description of what to evolve.

    The engine never mutates or stores it between runs.

    Attributes:
        get_genotype: Factory called once per initial population slot with its index
        fitness_fn: Scores a chromosome (may be a coroutine function)
        should_terminate: Called with (sorted population, generation, temperature)
            after each evaluation; returning True ends the run
        name: Optional label used in reports
    """
    get_genotype: GenotypeFactory
    fitness_fn: FitnessFunction
    should_terminate: TerminationPredicate
    name: str = field(default="problem")


def flatten_parents(parents: Parents) -> Population:
    """Flatten parent pairs into a population, preserving pair order."""
    return [chromosome for pair in parents for chromosome in pair]
