# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
AEROCAL command line interface.

Commands:
    - run: Execute the calibration experiment and write its reports
    - config template: Print the bundled configuration template
    - config validate: Check a configuration file

Exit codes: 0 on success, 1 when the calibration or reporting fails,
2 for configuration errors.
"""

import argparse
import shutil
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from aerocal.aerocal_version import __version__
from aerocal.core.exceptions import AEROCALError, ConfigurationError

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2


class CLIParser:
    """
    Main CLI parser with category-action subcommands.

    Attributes:
        parser: Main argument parser with all subcommands registered
    """

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog='aerocal',
            description='Ensemble Kalman calibration of aerosol activation parameters',
        )
        parser.add_argument('--version', action='version', version=f'aerocal {__version__}')
        subparsers = parser.add_subparsers(dest='command', metavar='COMMAND')

        self._register_run_commands(subparsers)
        self._register_config_commands(subparsers)
        return parser

    def _register_run_commands(self, subparsers) -> None:
        run = subparsers.add_parser('run', help='Run the calibration experiment')
        run.add_argument('-c', '--config', type=str, default=None,
                         help='Path to configuration file (default: built-in example)')
        run.add_argument('--output-dir', type=str, dest='output_dir',
                         help='Directory for plots, NetCDF output and logs')
        run.add_argument('--seed', type=int, help='Random seed of the run')
        run.add_argument('--ensemble-size', type=int, dest='ensemble_size',
                         help='Number of ensemble members')
        run.add_argument('--iterations', type=int, help='Number of EKI iterations')
        run.add_argument('--no-plots', action='store_true', dest='no_plots',
                         help='Skip the ensemble plots')
        run.add_argument('--no-netcdf', action='store_true', dest='no_netcdf',
                         help='Skip the NetCDF archive')
        run.add_argument('--debug', action='store_true', help='Enable debug output')
        run.set_defaults(handler=run_command)

    def _register_config_commands(self, subparsers) -> None:
        config = subparsers.add_parser('config', help='Configuration file management')
        actions = config.add_subparsers(dest='config_action', metavar='ACTION')

        template = actions.add_parser('template', help='Print the configuration template')
        template.add_argument('-o', '--output', type=str,
                              help='Write the template to this file instead of stdout')
        template.set_defaults(handler=config_template_command)

        validate = actions.add_parser('validate', help='Validate a configuration file')
        validate.add_argument('config', type=str, help='Path to configuration file')
        validate.set_defaults(handler=config_validate_command)

    def parse_args(self, argv: Optional[List[str]] = None) -> argparse.Namespace:
        return self.parser.parse_args(argv)


def build_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Translate run options into flat configuration overrides."""
    overrides: Dict[str, Any] = {}
    if getattr(args, 'output_dir', None):
        overrides['OUTPUT_DIR'] = args.output_dir
    if getattr(args, 'seed', None) is not None:
        overrides['RANDOM_SEED'] = args.seed
    if getattr(args, 'ensemble_size', None) is not None:
        overrides['ENSEMBLE_SIZE'] = args.ensemble_size
    if getattr(args, 'iterations', None) is not None:
        overrides['NUMBER_OF_ITERATIONS'] = args.iterations
    if getattr(args, 'no_plots', False):
        overrides['MAKE_PLOTS'] = False
    if getattr(args, 'no_netcdf', False):
        overrides['WRITE_NETCDF'] = False
    return overrides


def _load(config_path: Optional[str], overrides: Dict[str, Any]):
    from aerocal.core.config import build_config, load_config

    if config_path is None:
        return build_config({}, overrides)
    return load_config(Path(config_path), overrides)


def run_command(args: argparse.Namespace) -> int:
    from aerocal.calibration.calibration_manager import CalibrationManager
    from aerocal.core.logging_manager import LoggingManager
    from aerocal.reporting.summary import print_comparison

    try:
        config = _load(args.config, build_overrides(args))
    except (ConfigurationError, FileNotFoundError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    logging_manager = LoggingManager(config, debug_mode=args.debug)
    logger = logging_manager.logger
    try:
        if args.config:
            logger.info(f"AEROCAL initialized with config: {args.config}")
        manager = CalibrationManager(config, logger)
        result = manager.run_workflow(logging_manager=logging_manager)
        print_comparison(result.summary)
        return EXIT_OK
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_CONFIG_ERROR
    except AEROCALError as e:
        logger.error(f"AEROCAL run failed: {e}")
        return EXIT_FAILURE
    finally:
        logging_manager.close()


def config_template_command(args: argparse.Namespace) -> int:
    from aerocal.core.config import template_path

    source = template_path()
    if args.output:
        destination = Path(args.output)
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, destination)
        print(f"Wrote configuration template to {destination}")
    else:
        sys.stdout.write(source.read_text())
    return EXIT_OK


def config_validate_command(args: argparse.Namespace) -> int:
    try:
        config = _load(args.config, {})
    except (ConfigurationError, FileNotFoundError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    experiment = config.experiment
    print(
        f"Configuration valid: experiment '{experiment.name}', "
        f"parameters {config.parameter_names}, {experiment.ensemble_size} members, "
        f"{experiment.iterations} iterations"
    )
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    cli = CLIParser()
    args = cli.parse_args(argv)

    handler = getattr(args, 'handler', None)
    if handler is None:
        cli.parser.print_help()
        return EXIT_CONFIG_ERROR
    return handler(args)


if __name__ == '__main__':
    sys.exit(main())
