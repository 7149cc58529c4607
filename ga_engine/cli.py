"""
CLI module for the evolution engine.

Handles run configuration loading, validation, problem resolution and
reporting.
"""

import importlib
import json
from typing import Any, Dict, List

from .config import ConfigValidationError, EvolutionConfig, read_yaml_mapping
from .data_models import Population, Problem
from .evaluation import population_statistics
from .evolution import run_sync


def load_run_config(config_path: str) -> Dict[str, Any]:
    """
    Load run configuration from YAML file.

    Args:
        config_path: Path to run configuration YAML file

    Returns:
        Dictionary containing run configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigValidationError: If config is invalid
    """
    config = read_yaml_mapping(config_path)
    if not config:
        raise ConfigValidationError("Configuration file is empty")

    return config


def validate_run_config(config: Dict[str, Any]) -> EvolutionConfig:
    """
    Validate run configuration structure.

    Args:
        config: Run configuration dictionary

    Returns:
        EvolutionConfig built from the 'evolution' section

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    if not isinstance(config, dict):
        raise ConfigValidationError("Run configuration must be a dictionary")

    if 'problem' not in config:
        raise ConfigValidationError("Missing required field: 'problem'")

    problem_ref = config['problem']
    if not isinstance(problem_ref, str) or ':' not in problem_ref:
        raise ConfigValidationError(
            f"'problem' must look like 'package.module:attribute', got: {problem_ref!r}"
        )

    unknown = sorted(set(config) - {'problem', 'evolution'})
    if unknown:
        raise ConfigValidationError(f"Unknown field(s) in run configuration: {', '.join(unknown)}")

    evolution = config.get('evolution') or {}
    if not isinstance(evolution, dict):
        raise ConfigValidationError("'evolution' must be a dictionary")

    return EvolutionConfig.from_dict(evolution)


def resolve_problem(problem_ref: str) -> Problem:
    """
    Import the Problem named by a 'module:attribute' reference.

    The attribute may be a Problem or a zero-argument callable returning one.

    Raises:
        ConfigValidationError: If the module or attribute can't be found or
            doesn't yield a Problem
    """
    module_name, _, attribute = problem_ref.partition(':')

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigValidationError(f"Cannot import problem module '{module_name}': {e}")

    if not hasattr(module, attribute):
        raise ConfigValidationError(f"Module '{module_name}' has no attribute '{attribute}'")

    problem = getattr(module, attribute)
    if not isinstance(problem, Problem) and callable(problem):
        problem = problem()

    if not isinstance(problem, Problem):
        raise ConfigValidationError(f"'{problem_ref}' does not resolve to a Problem")

    return problem


def _capture_final_population(problem: Problem, sink: List[Population]) -> Problem:
    """Wrap the termination predicate so the last population it saw is kept."""
    def should_terminate(population, generation, temperature):
        sink[:] = [population]
        return problem.should_terminate(population, generation, temperature)

    return Problem(
        get_genotype=problem.get_genotype,
        fitness_fn=problem.fitness_fn,
        should_terminate=should_terminate,
        name=problem.name,
    )


def run_from_config(config_path: str) -> None:
    """
    Load run configuration, evolve the configured problem and print a report.

    This is the main entry point called by ga_cli.py.

    Args:
        config_path: Path to run configuration YAML file

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigValidationError: If config is invalid
        Whatever the problem's callables raise
    """
    print(f"Loading configuration from: {config_path}")
    config = load_run_config(config_path)

    print("Validating configuration...")
    evolution_config = validate_run_config(config)
    problem = resolve_problem(config['problem'])

    print("=" * 70)
    print(f"EVOLVING: {problem.name}")
    print("=" * 70)
    print(f"Population size: {evolution_config.population_size}")
    print(f"Selection: {evolution_config.selection_type.value} "
          f"(rate={evolution_config.selection_rate})")
    print(f"Crossover: {evolution_config.crossover_type.value}")
    print(f"Mutation: {evolution_config.mutation_type.value} "
          f"(rate={evolution_config.mutation_rate})")
    print(f"Reinsertion: {evolution_config.reinsertion_type.value}")
    print()

    progress: List[str] = []

    def log_update(message: str) -> None:
        progress.append(message)
        print(f"\r{message}", end="", flush=True)

    final_population: List[Population] = []
    best = run_sync(
        _capture_final_population(problem, final_population),
        evolution_config,
        log_update=log_update,
    )
    print()

    last = json.loads(progress[-1]) if progress else {}
    stats = population_statistics(final_population[0]) if final_population else {}

    print()
    print("=" * 70)
    print("SUMMARY")
    print("=" * 70)
    print(f"Generations: {last.get('generation', 0) + 1}")
    print(f"Final temperature: {last.get('temperature', 0.0)}")
    print(f"Best fitness: {best.fitness}")
    print(f"Best age: {best.age}")
    print(f"Best genes: {best.genes}")
    if stats:
        print(f"Final population: {stats['size']} chromosomes, "
              f"mean fitness {stats['mean_fitness']:.4f}, "
              f"mean age {stats['mean_age']:.2f}")
