#!/usr/bin/env python3
"""
GA Engine CLI - Minimal entry point.

Evolves the problem named in a YAML run configuration and prints a report.

Usage:
    python3 ga_cli.py run_config.yaml
    python3 ga_cli.py --config run_config.yaml

Run configuration format:
    problem: examples.one_max:problem
    evolution:
      population_size: 100
      selection_type: stochastic_universal_sampling
      mutation_rate: 0.5
"""

import argparse
import sys
from pathlib import Path

# Add project root to path so example problems are importable
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


def main(argv=None):
    """Main entry point for GA CLI."""
    parser = argparse.ArgumentParser(
        description="Evolve a problem described by a YAML run configuration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        'config_file',
        nargs='?',
        help='Run configuration file'
    )
    parser.add_argument(
        '--config', '-c',
        dest='config_option',
        help='Run configuration file (alternative to the positional argument)'
    )
    args = parser.parse_args(argv)

    config_path = args.config_option or args.config_file
    if config_path is None:
        parser.print_help()
        return 1

    try:
        from ga_engine.cli import run_from_config
        run_from_config(config_path)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 1
    except Exception as e:
        print(f"\nError: {e}")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
