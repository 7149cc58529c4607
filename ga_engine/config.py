"""
Configuration for the evolution engine.

A single EvolutionConfig value is built once at the boundary (from keyword
arguments, a dictionary, or a YAML file) and handed to every operator.
Strategy names are validated here, never re-checked per call.
"""

from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Type, Union

import yaml

from .data_models import SortDirection


class ConfigValidationError(ValueError):
    """
    Raised when an evolution configuration is invalid.

    Attributes:
        option: Name of the offending option (if known)
        value: Offending value (if known)
        valid: Accepted values for the option (if it is an enumeration)
    """

    def __init__(self, message: str, option: Optional[str] = None,
                 value: Any = None, valid: Optional[List[str]] = None):
        super().__init__(message)
        self.option = option
        self.value = value
        self.valid = valid or []


class SelectionType(str, Enum):
    ELITE = "elite"
    RANDOM = "random"
    TOURNAMENT = "tournament"
    ROULETTE = "roulette"
    STOCHASTIC_UNIVERSAL_SAMPLING = "stochastic_universal_sampling"
    BOLTZMANN_SELECTION = "boltzmann_selection"
    RANK = "rank"


class CrossoverType(str, Enum):
    SINGLE_POINT = "single_point"
    ORDER_ONE = "order_one"
    UNIFORM = "uniform"
    WHOLE_ARITHMETIC = "whole_arithmetic"
    PARTIALLY_MATCHED = "partially_matched"


class MutationType(str, Enum):
    SHUFFLE = "shuffle"
    FLIP_ALL = "flip_all"
    FLIP_SOME = "flip_some"
    SCRAMBLE = "scramble"
    SCRAMBLE_SLICE = "scramble_slice"
    GAUSSIAN = "gaussian"


class ReinsertionType(str, Enum):
    PURE = "pure"
    ELITIST = "elitist"


def parse_choice(enum_cls: Type[Enum], value: Union[str, Enum], option: str) -> Enum:
    """
    Convert a strategy name into its enum member.

    Args:
        enum_cls: Enumeration of valid choices
        value: Member or its string value
        option: Option name, used in the error message

    Returns:
        Matching enum member

    Raises:
        ConfigValidationError: If value names no member; the message lists
            every valid name
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        valid = [member.value for member in enum_cls]
        raise ConfigValidationError(
            f"options.{option} {value!r} is not a valid {option}. "
            f"Valid values are: {', '.join(valid)}",
            option=option,
            value=value,
            valid=valid,
        ) from None


_CHOICES = {
    "selection_type": SelectionType,
    "crossover_type": CrossoverType,
    "mutation_type": MutationType,
    "reinsertion_type": ReinsertionType,
    "fitness_sort_direction": SortDirection,
}

_RATES = ("selection_rate", "crossover_rate", "mutation_rate", "survival_rate")


@dataclass
class EvolutionConfig:
    """
    Fully specified evolution settings.

    Attributes:
        population_size: Initial and target population size
        selection_type: Selection strategy
        selection_rate: Fraction of the population selected as parents
        crossover_type: Crossover strategy
        crossover_rate: Per-gene keep probability for uniform crossover
        crossover_alpha: Blend weight for whole arithmetic crossover
        crossover_repair_fn: Applied to every crossover child when set
        mutation_type: Mutation strategy
        mutation_rate: Probability that a chromosome is mutated
        gen_mutation_rate: Per-gene mutation probability (None means the
            strategy default: 0.5 for flip_some, 1.0 for gaussian)
        mutation_fn: Replaces the mutation strategy when set
        scramble_size: Slice length for scramble_slice, or a callable
            computing it per chromosome (None means half the chromosome)
        reinsertion_type: Reinsertion strategy
        survival_rate: Fraction of parents+leftovers kept by elitist reinsertion
        survivor_count: Exact survivor count for elitist reinsertion (0 means
            use survival_rate)
        reinsertion_fn: Replaces the reinsertion strategy when set
        max_population: Hard cap after reinsertion (None means population_size)
        max_population_fn: Computes the cap from the new population when set
        fitness_sort_direction: ASC or DESC
        cooling_rate: Temperature decay factor per generation
    """
    population_size: int = 100
    selection_type: SelectionType = SelectionType.ELITE
    selection_rate: float = 0.8
    crossover_type: CrossoverType = CrossoverType.SINGLE_POINT
    crossover_rate: float = 0.5
    crossover_alpha: float = 0.9
    crossover_repair_fn: Optional[Callable] = None
    mutation_type: MutationType = MutationType.SHUFFLE
    mutation_rate: float = 0.05
    gen_mutation_rate: Optional[float] = None
    mutation_fn: Optional[Callable] = None
    scramble_size: Optional[Union[int, Callable]] = None
    reinsertion_type: ReinsertionType = ReinsertionType.PURE
    survival_rate: float = 0.2
    survivor_count: int = 0
    reinsertion_fn: Optional[Callable] = None
    max_population: Optional[int] = None
    max_population_fn: Optional[Callable] = None
    fitness_sort_direction: SortDirection = SortDirection.DESC
    cooling_rate: float = 0.8

    def __post_init__(self):
        """Parse strategy names and validate numeric ranges."""
        for option, enum_cls in _CHOICES.items():
            setattr(self, option, parse_choice(enum_cls, getattr(self, option), option))

        if not isinstance(self.population_size, int) or self.population_size <= 0:
            raise ConfigValidationError(
                f"'population_size' must be a positive integer, got: {self.population_size}",
                option="population_size", value=self.population_size,
            )

        for option in _RATES:
            value = getattr(self, option)
            if not 0 <= value <= 1:
                raise ConfigValidationError(
                    f"'{option}' must be between 0 and 1, got: {value}",
                    option=option, value=value,
                )

        if self.gen_mutation_rate is not None and not 0 <= self.gen_mutation_rate <= 1:
            raise ConfigValidationError(
                f"'gen_mutation_rate' must be between 0 and 1, got: {self.gen_mutation_rate}",
                option="gen_mutation_rate", value=self.gen_mutation_rate,
            )

        if self.survivor_count < 0:
            raise ConfigValidationError(
                f"'survivor_count' must be a non-negative integer, got: {self.survivor_count}",
                option="survivor_count", value=self.survivor_count,
            )

    @property
    def population_cap(self) -> int:
        """Hard population cap applied after reinsertion (0 disables it)."""
        limit = self.population_size if self.max_population is None else self.max_population
        return limit if limit and limit > 0 else 0

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "EvolutionConfig":
        """
        Build a configuration from a plain dictionary (e.g. parsed YAML).

        Args:
            data: Option names mapped to values; missing options take defaults

        Returns:
            Validated EvolutionConfig

        Raises:
            ConfigValidationError: On unknown option names or invalid values
        """
        data = dict(data or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration option(s): {', '.join(unknown)}",
                option=unknown[0], value=data[unknown[0]], valid=sorted(known),
            )
        return cls(**data)

    @classmethod
    def coerce(cls, config: Union["EvolutionConfig", Dict[str, Any], None]) -> "EvolutionConfig":
        """Accept an existing config, a dictionary, or None (all defaults)."""
        if isinstance(config, cls):
            return config
        return cls.from_dict(config)


def read_yaml_mapping(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read a YAML file that holds a mapping.

    Args:
        config_path: Path to YAML file

    Returns:
        Parsed mapping (empty for an empty file)

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigValidationError: If the YAML is malformed or not a mapping
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_file, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Invalid YAML in configuration file: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigValidationError("Configuration file must contain a mapping")
    return data


def load_config(config_path: Union[str, Path], section: Optional[str] = None) -> EvolutionConfig:
    """
    Load an EvolutionConfig from a YAML file.

    Args:
        config_path: Path to YAML file
        section: Optional top-level key holding the options (e.g. "evolution")

    Returns:
        Validated EvolutionConfig

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigValidationError: If the YAML or its content is invalid
    """
    data = read_yaml_mapping(config_path)

    if section is not None:
        data = data.get(section) or {}
        if not isinstance(data, dict):
            raise ConfigValidationError(f"'{section}' must be a dictionary")

    return EvolutionConfig.from_dict(data)
