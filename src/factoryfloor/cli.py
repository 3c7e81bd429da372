"""
Command-line interface for factoryfloor.

This module runs command scripts against a factory floor, prints floors, and
manages configuration files.
"""

import argparse
import sys
from typing import List, Optional

from factoryfloor.core.config import Config, load_config, create_default_config, validate_config
from factoryfloor.core.base import ErrorCode
from factoryfloor.core.floor import FactoryFloor
from factoryfloor.session import FloorSession
from factoryfloor.utils.display import StatusDisplay, LiveLogger
from factoryfloor.utils.logger import ExperimentLogger
from factoryfloor.utils.render import render


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="factoryfloor",
        description="factoryfloor: move and pile numbered blocks on a factory floor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run a command script
  factoryfloor run --config eval_configs/factory_floor.yaml --script moves.txt

  # Read commands from stdin
  echo "move 1 onto 2" | factoryfloor run --positions 4 --script -

  # Show a fresh floor
  factoryfloor show --positions 5 --divider " | "

  # Create default configuration
  factoryfloor create-config --output config.yaml
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    run_parser = subparsers.add_parser("run", help="Run a command script against a floor")
    run_parser.add_argument("--config", help="Configuration file")
    run_parser.add_argument("--script", help="Command script ('-' for stdin)")
    run_parser.add_argument("--positions", type=int, help="Override floor position count")
    run_parser.add_argument("--output-dir", help="Override log directory")
    run_parser.add_argument("--save-logs", action="store_true", help="Write step logs")
    run_parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")

    show_parser = subparsers.add_parser("show", help="Print a fresh floor")
    show_parser.add_argument("--positions", type=int, default=10, help="Number of floor positions")
    show_parser.add_argument("--divider", default="\\n", help="Text between positions (escapes allowed)")

    config_parser = subparsers.add_parser("create-config", help="Create default configuration file")
    config_parser.add_argument("--output", "-o", default="config.yaml", help="Output file path")
    config_parser.add_argument("--positions", type=int, default=10, help="Number of floor positions")

    validate_parser = subparsers.add_parser("validate-config", help="Validate configuration file")
    validate_parser.add_argument("config", help="Configuration file to validate")
    validate_parser.add_argument("--strict", action="store_true", help="Treat warnings as errors")

    return parser


def _decode_divider(divider: str) -> str:
    """Expand backslash escapes such as ``\\n``; other characters pass through."""
    if "\\" not in divider:
        return divider
    return divider.encode("latin-1", "backslashreplace").decode("unicode_escape")


def run_command(args) -> int:
    """Execute run command."""
    logger = LiveLogger(verbose=getattr(args, 'verbose', False))

    try:
        config = _load_and_validate_config(args, logger)
        if config is None:
            return 1

        if getattr(args, 'positions', None) is not None and args.positions < 0:
            logger.log_error(f"position count must not be negative, got {args.positions}")
            return 1

        _apply_run_overrides(config, args)
        logger.verbose = config.runner.verbose

        script_path = config.runner.script_path
        if not script_path:
            logger.log_error("No command script given; use --script or runner.script_path")
            return 1

        experiment_logger = None
        if config.runner.save_logs:
            experiment_logger = ExperimentLogger(config.runner.log_dir, config.runner.experiment_name)
            logger.log_info(f"Logging to {experiment_logger.run_dir}")

        logger.log_action("Creating floor", f"{config.floor.position_count} positions")
        session = FloorSession.from_config(config, logger=experiment_logger)
        session.start()

        if script_path == "-":
            session.run_script(sys.stdin)
        else:
            with open(script_path, 'r', encoding='utf-8') as f:
                session.run_script(f)

        print(render(session.floor, config.floor.divider))

        summary = session.summary()
        if experiment_logger is not None:
            experiment_logger.save_logs(verbose=config.runner.verbose)
            if config.runner.results_csv_path:
                experiment_logger.save_results_to_csv(
                    {"experiment": experiment_logger.experiment_name, **summary},
                    config.runner.results_csv_path,
                )

        if config.runner.verbose:
            StatusDisplay.print_section("Steps")
            for step, result in enumerate(session.history, start=1):
                StatusDisplay.print_step_summary(step, result)
            StatusDisplay.print_results(
                {
                    "Positions": summary["positions"],
                    "Commands": summary["commands"],
                    "Moves": summary["moves"],
                    "No-op Moves": summary["noops"],
                    "Errors": summary["errors"],
                    "Elapsed": f"{logger.elapsed():.2f}s",
                },
                "Run Results",
            )
        for result in session.history:
            if not result.success and result.error is not ErrorCode.NOOP:
                logger.log_warning(f"{result.error.value}: {result.message}")
        return 0

    except KeyboardInterrupt:
        logger.log_warning("Run interrupted by user")
        return 1
    except Exception as e:
        logger.log_error(f"Failed to run script: {e}")
        if getattr(args, 'verbose', False):
            import traceback
            logger.log_error(traceback.format_exc())
        return 1


def _load_and_validate_config(args, logger) -> Optional[Config]:
    """Load and validate configuration with error handling."""
    if not getattr(args, 'config', None):
        return Config()

    try:
        logger.log_action("Loading configuration")
        config = load_config(args.config)

        issues = validate_config(config)
        errors = [issue for issue in issues if issue.startswith("ERROR")]
        warnings = [issue for issue in issues if not issue.startswith("ERROR")]

        if errors:
            for error in errors:
                logger.log_error(error.replace("ERROR: ", ""))
            return None
        for warning in warnings:
            logger.log_warning(warning.replace("WARNING: ", ""))

        logger.log_result("Configuration loaded")
        return config

    except FileNotFoundError:
        logger.log_error(f"Configuration file not found: {args.config}")
        logger.log_info("Use 'factoryfloor create-config' to create a default configuration")
        return None
    except ValueError as e:
        logger.log_error(f"Configuration error: {e}")
        return None


def _apply_run_overrides(config: Config, args) -> None:
    """Apply command line overrides to configuration."""
    if getattr(args, 'positions', None) is not None:
        config.floor.position_count = args.positions
    if getattr(args, 'script', None):
        config.runner.script_path = args.script
    if getattr(args, 'output_dir', None):
        config.runner.log_dir = args.output_dir
    if getattr(args, 'save_logs', False):
        config.runner.save_logs = True
    if getattr(args, 'verbose', False):
        config.runner.verbose = True


def show_command(args) -> int:
    """Print a fresh floor."""
    logger = LiveLogger(verbose=False)
    try:
        floor = FactoryFloor.new_instance(args.positions)
    except ValueError as e:
        logger.log_error(str(e))
        return 1
    print(render(floor, _decode_divider(args.divider)))
    return 0


def create_config_command(args) -> int:
    """Execute create-config command."""
    logger = LiveLogger(verbose=True)
    try:
        config = create_default_config(args.output, position_count=args.positions)
    except (OSError, ValueError) as e:
        logger.log_error(f"Failed to create configuration: {e}")
        return 1

    logger.log_result(f"Configuration saved to {args.output}")
    StatusDisplay.print_config(
        {
            "Positions": config.floor.position_count,
            "Divider": config.floor.divider,
            "Log Directory": config.runner.log_dir,
        },
        "Default Configuration",
    )
    return 0


def validate_config_command(args) -> int:
    """Execute validate-config command."""
    logger = LiveLogger(verbose=True)
    try:
        config = load_config(args.config)
    except FileNotFoundError:
        logger.log_error(f"Configuration file not found: {args.config}")
        return 1
    except ValueError as e:
        logger.log_error(f"Configuration error: {e}")
        return 1

    issues = validate_config(config)
    errors = [issue for issue in issues if issue.startswith("ERROR")]
    warnings = [issue for issue in issues if not issue.startswith("ERROR")]

    for error in errors:
        logger.log_error(error.replace("ERROR: ", ""))
    for warning in warnings:
        logger.log_warning(warning.replace("WARNING: ", ""))

    if errors or (args.strict and warnings):
        return 1

    logger.log_result("Configuration is valid")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    try:
        parser = create_parser()

        argv = sys.argv[1:] if argv is None else argv
        if not argv:
            parser.print_help()
            return 1

        args = parser.parse_args(argv)

        command_handlers = {
            "run": run_command,
            "show": show_command,
            "create-config": create_config_command,
            "validate-config": validate_config_command,
        }

        handler = command_handlers.get(args.command)
        if handler:
            return handler(args)
        else:
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\n⚠️  Interrupted by user")
        return 1


if __name__ == "__main__":
    sys.exit(main())
