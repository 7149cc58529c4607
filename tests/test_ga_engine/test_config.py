"""
Tests for the evolution configuration.
"""

import tempfile
import unittest
from pathlib import Path

import yaml

from ga_engine.config import (
    ConfigValidationError,
    CrossoverType,
    EvolutionConfig,
    MutationType,
    ReinsertionType,
    SelectionType,
    load_config,
    parse_choice,
    read_yaml_mapping,
)
from ga_engine.data_models import SortDirection


class TestEvolutionConfig(unittest.TestCase):
    """Test defaults, parsing and validation."""

    def test_defaults(self):
        """Defaults match the documented option table."""
        config = EvolutionConfig()

        self.assertEqual(config.population_size, 100)
        self.assertIs(config.selection_type, SelectionType.ELITE)
        self.assertEqual(config.selection_rate, 0.8)
        self.assertIs(config.crossover_type, CrossoverType.SINGLE_POINT)
        self.assertIs(config.mutation_type, MutationType.SHUFFLE)
        self.assertEqual(config.mutation_rate, 0.05)
        self.assertIs(config.reinsertion_type, ReinsertionType.PURE)
        self.assertEqual(config.survival_rate, 0.2)
        self.assertEqual(config.survivor_count, 0)
        self.assertIs(config.fitness_sort_direction, SortDirection.DESC)
        self.assertEqual(config.cooling_rate, 0.8)
        self.assertEqual(config.population_cap, 100)

    def test_strategy_names_are_parsed(self):
        """Strategy strings become enum members."""
        config = EvolutionConfig(
            selection_type="boltzmann_selection",
            crossover_type="partially_matched",
            mutation_type="scramble_slice",
            reinsertion_type="elitist",
            fitness_sort_direction="ASC",
        )

        self.assertIs(config.selection_type, SelectionType.BOLTZMANN_SELECTION)
        self.assertIs(config.crossover_type, CrossoverType.PARTIALLY_MATCHED)
        self.assertIs(config.mutation_type, MutationType.SCRAMBLE_SLICE)
        self.assertIs(config.reinsertion_type, ReinsertionType.ELITIST)
        self.assertIs(config.fitness_sort_direction, SortDirection.ASC)

    def test_unknown_strategy_lists_valid_names(self):
        """Unknown strategy names are rejected with every valid name."""
        for option, enum_cls in [
            ("selection_type", SelectionType),
            ("crossover_type", CrossoverType),
            ("mutation_type", MutationType),
            ("reinsertion_type", ReinsertionType),
        ]:
            with self.assertRaises(ConfigValidationError) as ctx:
                EvolutionConfig(**{option: "bogus"})

            error = ctx.exception
            self.assertEqual(error.option, option)
            self.assertEqual(error.value, "bogus")
            self.assertEqual(error.valid, [member.value for member in enum_cls])
            self.assertIn("bogus", str(error))
            for member in enum_cls:
                self.assertIn(member.value, str(error))

    def test_parse_choice_accepts_members(self):
        """Enum members pass through unchanged."""
        self.assertIs(
            parse_choice(SelectionType, SelectionType.RANK, "selection_type"),
            SelectionType.RANK,
        )

    def test_invalid_ranges(self):
        """Rates outside [0, 1] and non-positive sizes are rejected."""
        with self.assertRaises(ConfigValidationError):
            EvolutionConfig(selection_rate=1.5)
        with self.assertRaises(ConfigValidationError):
            EvolutionConfig(mutation_rate=-0.1)
        with self.assertRaises(ConfigValidationError):
            EvolutionConfig(gen_mutation_rate=2)
        with self.assertRaises(ConfigValidationError):
            EvolutionConfig(population_size=0)
        with self.assertRaises(ConfigValidationError):
            EvolutionConfig(survivor_count=-1)

    def test_population_cap(self):
        """max_population overrides population_size; 0 disables the cap."""
        self.assertEqual(EvolutionConfig(population_size=10).population_cap, 10)
        self.assertEqual(EvolutionConfig(population_size=10, max_population=4).population_cap, 4)
        self.assertEqual(EvolutionConfig(population_size=10, max_population=0).population_cap, 0)

    def test_from_dict(self):
        """Dictionaries are validated, unknown keys rejected."""
        config = EvolutionConfig.from_dict({'population_size': 20, 'selection_type': 'rank'})
        self.assertEqual(config.population_size, 20)
        self.assertIs(config.selection_type, SelectionType.RANK)

        with self.assertRaises(ConfigValidationError) as ctx:
            EvolutionConfig.from_dict({'populationSize': 20})
        self.assertEqual(ctx.exception.option, 'populationSize')

    def test_coerce(self):
        """coerce accepts configs, dictionaries and None."""
        config = EvolutionConfig(population_size=7)
        self.assertIs(EvolutionConfig.coerce(config), config)
        self.assertEqual(EvolutionConfig.coerce({'population_size': 7}).population_size, 7)
        self.assertEqual(EvolutionConfig.coerce(None).population_size, 100)


class TestLoadConfig(unittest.TestCase):
    """Test YAML configuration loading."""

    def setUp(self):
        """Create temporary directory."""
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name)

    def tearDown(self):
        """Clean up temporary directory."""
        self.temp_dir.cleanup()

    def _write(self, name, content):
        path = self.root / name
        path.write_text(content)
        return path

    def test_load_flat_file(self):
        """Options at the top level of the file are loaded."""
        path = self._write("flat.yaml", yaml.safe_dump({
            'population_size': 30,
            'mutation_type': 'gaussian',
            'gen_mutation_rate': 0.3,
        }))

        config = load_config(path)

        self.assertEqual(config.population_size, 30)
        self.assertIs(config.mutation_type, MutationType.GAUSSIAN)
        self.assertEqual(config.gen_mutation_rate, 0.3)

    def test_load_section(self):
        """Options can live under a named section."""
        path = self._write("run.yaml", yaml.safe_dump({
            'problem': 'x:y',
            'evolution': {'selection_type': 'tournament'},
        }))

        config = load_config(path, section='evolution')
        self.assertIs(config.selection_type, SelectionType.TOURNAMENT)

    def test_empty_file_gives_defaults(self):
        """An empty file means all defaults."""
        path = self._write("empty.yaml", "")
        self.assertEqual(load_config(path), EvolutionConfig())

    def test_missing_file(self):
        """Missing files raise FileNotFoundError."""
        with self.assertRaises(FileNotFoundError):
            load_config(self.root / "missing.yaml")

    def test_invalid_yaml(self):
        """Malformed YAML raises ConfigValidationError."""
        path = self._write("bad.yaml", "population_size: [1, 2\n")
        with self.assertRaises(ConfigValidationError):
            load_config(path)

    def test_invalid_strategy_in_file(self):
        """Strategy names from files are validated too."""
        path = self._write("bad_strategy.yaml", "crossover_type: two_point\n")
        with self.assertRaises(ConfigValidationError):
            load_config(path)

    def test_read_yaml_mapping(self):
        """The shared reader returns mappings and rejects other documents."""
        self.assertEqual(read_yaml_mapping(self._write("map.yaml", "a: 1\n")), {'a': 1})
        self.assertEqual(read_yaml_mapping(self._write("blank.yaml", "")), {})
        with self.assertRaises(ConfigValidationError):
            read_yaml_mapping(self._write("list.yaml", "- 1\n- 2\n"))


if __name__ == '__main__':
    unittest.main()
