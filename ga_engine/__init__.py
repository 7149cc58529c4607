"""
Generic Evolutionary Computation Engine

This package evolves a population of candidate solutions for any problem
that can generate, score and judge its own genotypes, and returns the best
chromosome found once the problem's termination predicate fires.

Key Features:
- Pluggable operator families: selection, crossover, mutation, reinsertion
- Async-friendly: genotype factories, fitness functions and loggers may be coroutines
- Injectable randomness (RandomSource) for reproducible runs and tests
- One validated configuration value (EvolutionConfig), loadable from YAML

Modules:
- data_models: Chromosome, Problem and population types
- random_utils: RandomSource (uniform, bounded int, gaussian, triangular draws)
- genes: Gene categories and flip rules
- config: EvolutionConfig, strategy enums and YAML loading
- initialization: Initial population construction
- evaluation: Fitness evaluation and ranking
- selection: Seven selection strategies and parent pairing
- crossover: Five crossover strategies and optional repair
- mutation: Six mutation strategies
- reinsertion: Pure and elitist reinsertion with a population cap
- evolution: Generation loop, run() and run_sync()
- cli: Command-line interface driven by YAML run configurations
"""

__version__ = "0.1.0"

from .config import (
    ConfigValidationError,
    CrossoverType,
    EvolutionConfig,
    MutationType,
    ReinsertionType,
    SelectionType,
    load_config,
)
from .data_models import Chromosome, Problem, SortDirection
from .evolution import EvolutionError, evolve, run, run_sync
from .random_utils import RandomSource
from .selection import NoCandidateFoundError, SelectionError

__all__ = [
    "Chromosome",
    "Problem",
    "SortDirection",
    "EvolutionConfig",
    "SelectionType",
    "CrossoverType",
    "MutationType",
    "ReinsertionType",
    "ConfigValidationError",
    "load_config",
    "RandomSource",
    "SelectionError",
    "NoCandidateFoundError",
    "EvolutionError",
    "evolve",
    "run",
    "run_sync",
]
