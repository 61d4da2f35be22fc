"""Command-line interface for ormayu-build.

This module provides the ``ormayu-build`` command for resolving, rendering,
checking and building the ormayu_app Android module configuration.
"""

from __future__ import annotations

import argparse
import pathlib
import sys
from typing import List, Optional

import pydantic

from ormayu_build.__version__ import __version__
from ormayu_build.build.builder import Builder, BuildOptions
from ormayu_build.build.provider import FlutterSdkInfoProvider
from ormayu_build.build.renderer import render_gradle_kts
from ormayu_build.build.resolver import BuildConfigResolver
from ormayu_build.build.utils import check_descriptor, has_errors
from ormayu_build.core.config_manager import ConfigManager
from ormayu_build.core.logging_manager import LoggingManager
from ormayu_build.utils.exceptions import ConfigurationError, OrmayuError


def _write_output(text: str, output: Optional[str]) -> None:
    if output:
        path = pathlib.Path(output)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        print(f"Wrote {path}", file=sys.stderr)
    else:
        sys.stdout.write(text)


def _create_resolver(args: argparse.Namespace, config: ConfigManager) -> BuildConfigResolver:
    project_dir = args.project_dir or config.get("flutter.project_dir", "android")
    provider = FlutterSdkInfoProvider(
        project_dir=project_dir,
        properties_file=config.get("flutter.properties_file", "local.properties"),
    )
    return BuildConfigResolver(provider)


def resolve_command(args: argparse.Namespace, config: ConfigManager) -> int:
    """Handle the resolve command.

    Args:
        args: Command-line arguments
        config: Initialized configuration manager

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    descriptor = _create_resolver(args, config).resolve()
    text = descriptor.to_yaml() if args.format == "yaml" else descriptor.to_json() + "\n"
    _write_output(text, args.output)
    return 0


def render_command(args: argparse.Namespace, config: ConfigManager) -> int:
    """Handle the render command.

    Args:
        args: Command-line arguments
        config: Initialized configuration manager

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    descriptor = _create_resolver(args, config).resolve()
    symbolic = args.symbolic or bool(config.get("build.symbolic", False))
    _write_output(render_gradle_kts(descriptor, symbolic=symbolic), args.output)
    return 0


def check_command(args: argparse.Namespace, config: ConfigManager) -> int:
    """Handle the check command.

    Args:
        args: Command-line arguments
        config: Initialized configuration manager

    Returns:
        Exit code (0 when no error-severity issue is found, 1 otherwise)
    """
    resolver = _create_resolver(args, config)
    issues = check_descriptor(resolver.resolve(), resolver.settings.signing_configs)

    if not issues:
        print("No issues found")
        return 0

    for issue in issues:
        print(str(issue))

    return 1 if has_errors(issues) else 0


def build_command(args: argparse.Namespace, config: ConfigManager) -> int:
    """Handle the build command.

    Args:
        args: Command-line arguments
        config: Initialized configuration manager

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    build_config = config.get("build", {})
    try:
        options = BuildOptions(
            project_dir=args.project_dir or config.get("flutter.project_dir", "android"),
            output_dir=args.output_dir or build_config.get("output_dir", "build/ormayu"),
            clean=build_config.get("clean", True),
            run_gradle=args.run_gradle or build_config.get("run_gradle", False),
            gradle_wrapper=build_config.get("gradle_wrapper", "gradlew"),
            build_types=args.build_type or build_config.get("build_types", ["release"]),
            symbolic=args.symbolic or build_config.get("symbolic", False),
        )
    except pydantic.ValidationError as e:
        raise ConfigurationError(
            f"Invalid build options: {e}",
            config_key="build",
            details={"validation_errors": e.errors()},
        ) from e

    output_dir = Builder(_create_resolver(args, config), options).build()
    print(f"Build outputs written to: {output_dir}")
    return 0


def main(args: Optional[List[str]] = None) -> int:
    """Run the ormayu-build command line.

    Args:
        args: Command-line arguments (defaults to ``sys.argv[1:]``)

    Returns:
        Exit code
    """
    parser = argparse.ArgumentParser(
        prog="ormayu-build",
        description="Resolve and render the ormayu_app Android module build configuration",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", "-c", help="Path to a YAML or JSON configuration file")
    parser.add_argument("--project-dir", help="Android project directory holding local.properties")
    parser.add_argument(
        "--log-level",
        choices=sorted(LoggingManager.LOG_LEVELS),
        help="Override the configured log level",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    resolve_parser = subparsers.add_parser("resolve", help="Print the resolved build descriptor")
    resolve_parser.add_argument("--format", choices=["json", "yaml"], default="json", help="Output format")
    resolve_parser.add_argument("--output", "-o", help="Write to a file instead of stdout")

    render_parser = subparsers.add_parser("render", help="Render the module build.gradle.kts")
    render_parser.add_argument(
        "--symbolic", action="store_true", help="Reference flutter.* values instead of resolved literals"
    )
    render_parser.add_argument("--output", "-o", help="Write to a file instead of stdout")

    subparsers.add_parser("check", help="Check the resolved descriptor for problems")

    build_parser = subparsers.add_parser("build", help="Write the descriptor and script, optionally run Gradle")
    build_parser.add_argument("--output-dir", help="Output directory")
    build_parser.add_argument("--run-gradle", action="store_true", help="Run assemble<BuildType> afterwards")
    build_parser.add_argument(
        "--build-type",
        action="append",
        choices=["debug", "profile", "release"],
        default=None,
        help="Build type to assemble (repeatable)",
    )
    build_parser.add_argument(
        "--symbolic", action="store_true", help="Reference flutter.* values instead of resolved literals"
    )

    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    commands = {
        "resolve": resolve_command,
        "render": render_command,
        "check": check_command,
        "build": build_command,
    }

    config_manager = ConfigManager(config_path=parsed_args.config)
    logging_manager = LoggingManager(config_manager)
    try:
        config_manager.initialize()
        if parsed_args.log_level:
            config_manager.set("logging.level", parsed_args.log_level.upper())
            config_manager.set("logging.console.level", parsed_args.log_level.upper())
        logging_manager.initialize()

        return commands[parsed_args.command](parsed_args, config_manager)

    except OrmayuError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    finally:
        logging_manager.shutdown()
        config_manager.shutdown()


if __name__ == "__main__":
    sys.exit(main())
