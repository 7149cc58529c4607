"""
Tests for the YAML-driven command-line interface.
"""

import io
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

import yaml

from ga_engine.cli import (
    load_run_config,
    resolve_problem,
    run_from_config,
    validate_run_config,
)
from ga_engine.config import ConfigValidationError, SelectionType
from ga_engine.data_models import Problem

GENOTYPE_LENGTH = 4


def build_problem():
    """Small one-max problem resolved through a 'module:attribute' reference."""
    return Problem(
        get_genotype=lambda index: [index % 2] * GENOTYPE_LENGTH,
        fitness_fn=lambda chromosome: sum(chromosome.genes),
        should_terminate=lambda population, generation, temperature: (
            population[0].fitness == GENOTYPE_LENGTH or generation >= 20
        ),
        name="tiny-one-max",
    )


PROBLEM = build_problem()
NOT_A_PROBLEM = 42


class TestValidateRunConfig(unittest.TestCase):
    """Test run configuration validation."""

    def test_valid(self):
        """A problem reference and an evolution section are accepted."""
        config = validate_run_config({
            'problem': 'pkg.module:attr',
            'evolution': {'selection_type': 'rank', 'population_size': 12},
        })
        self.assertIs(config.selection_type, SelectionType.RANK)
        self.assertEqual(config.population_size, 12)

    def test_evolution_section_optional(self):
        """Missing evolution section means defaults."""
        config = validate_run_config({'problem': 'pkg.module:attr'})
        self.assertEqual(config.population_size, 100)

    def test_missing_problem(self):
        """'problem' is required."""
        with self.assertRaises(ConfigValidationError):
            validate_run_config({'evolution': {}})

    def test_malformed_problem_reference(self):
        """'problem' must name a module and an attribute."""
        with self.assertRaises(ConfigValidationError):
            validate_run_config({'problem': 'just_a_module'})

    def test_unknown_fields(self):
        """Unexpected top-level fields are rejected."""
        with self.assertRaises(ConfigValidationError) as ctx:
            validate_run_config({'problem': 'a:b', 'visualization': True})
        self.assertIn('visualization', str(ctx.exception))

    def test_bad_evolution_option(self):
        """Evolution options go through EvolutionConfig validation."""
        with self.assertRaises(ConfigValidationError):
            validate_run_config({'problem': 'a:b', 'evolution': {'mutation_type': 'nope'}})

    def test_not_a_dictionary(self):
        """The configuration must be a mapping."""
        with self.assertRaises(ConfigValidationError):
            validate_run_config(['problem'])


class TestResolveProblem(unittest.TestCase):
    """Test problem resolution."""

    def test_problem_instance(self):
        """Attributes holding a Problem are returned directly."""
        self.assertIs(resolve_problem(f"{__name__}:PROBLEM"), PROBLEM)

    def test_problem_factory(self):
        """Zero-argument callables are called."""
        problem = resolve_problem(f"{__name__}:build_problem")
        self.assertEqual(problem.name, "tiny-one-max")

    def test_bundled_example(self):
        """The bundled one-max example resolves."""
        problem = resolve_problem("examples.one_max:problem")
        self.assertEqual(problem.name, "one-max")

    def test_missing_module(self):
        """Unknown modules raise ConfigValidationError."""
        with self.assertRaises(ConfigValidationError):
            resolve_problem("no_such_module_here:problem")

    def test_missing_attribute(self):
        """Unknown attributes raise ConfigValidationError."""
        with self.assertRaises(ConfigValidationError):
            resolve_problem(f"{__name__}:missing")

    def test_wrong_type(self):
        """Attributes that are not problems are rejected."""
        with self.assertRaises(ConfigValidationError):
            resolve_problem(f"{__name__}:NOT_A_PROBLEM")


class TestRunFromConfig(unittest.TestCase):
    """Test the end-to-end CLI run."""

    def setUp(self):
        """Create temporary directory."""
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name)

    def tearDown(self):
        """Clean up temporary directory."""
        self.temp_dir.cleanup()

    def _write(self, data):
        path = self.root / "run.yaml"
        path.write_text(yaml.safe_dump(data))
        return path

    def test_load_missing_file(self):
        """Missing run configurations raise FileNotFoundError."""
        with self.assertRaises(FileNotFoundError):
            load_run_config(self.root / "missing.yaml")

    def test_load_empty_file(self):
        """Empty run configurations are rejected."""
        path = self.root / "empty.yaml"
        path.write_text("")
        with self.assertRaises(ConfigValidationError):
            load_run_config(path)

    def test_load_non_mapping_file(self):
        """Run configurations must be mappings."""
        path = self.root / "list.yaml"
        path.write_text("- problem\n")
        with self.assertRaises(ConfigValidationError):
            load_run_config(path)

    def test_run_prints_summary(self):
        """A run prints the configuration banner and a summary."""
        path = self._write({
            'problem': f"{__name__}:build_problem",
            'evolution': {
                'population_size': 10,
                'mutation_type': 'flip_some',
                'mutation_rate': 0.5,
            },
        })

        output = io.StringIO()
        with redirect_stdout(output):
            run_from_config(str(path))

        text = output.getvalue()
        self.assertIn("EVOLVING: tiny-one-max", text)
        self.assertIn("SUMMARY", text)
        self.assertIn("Best fitness", text)
        self.assertIn("Final population: ", text)
        self.assertIn('"generation":0', text)

    def test_cli_main(self):
        """ga_cli.main returns an exit code instead of raising."""
        import ga_cli

        path = self._write({'problem': f"{__name__}:build_problem",
                            'evolution': {'population_size': 10}})

        with redirect_stdout(io.StringIO()):
            self.assertEqual(ga_cli.main([]), 1)
            self.assertEqual(ga_cli.main([str(self.root / "missing.yaml")]), 1)
            self.assertEqual(ga_cli.main(["--config", str(path)]), 0)


if __name__ == '__main__':
    unittest.main()
