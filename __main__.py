"""CLI entry point for scaffold-audit.

This module acts as the central entry point for the project's CLI tools.
It delegates commands to the analysis driver and development helpers.
"""

import argparse
import json
import subprocess
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from src.analysis import analyze_scaffold
from src.config import (
    get_environment,
    get_environment_info,
    get_log_level,
    get_min_overall_score,
    list_environment_variables,
)
from src.core.log import get_logger, setup_logging
from src.patterns import PATTERN_ALIASES, get_all_patterns
from src.scoring import PassCriteria

# Load environment variables from .env file
load_dotenv()

logger = get_logger("cli")


# =============================================================================
# Analyze Command
# =============================================================================


def cmd_analyze(args: argparse.Namespace) -> int:
    """Handle the analyze command."""
    path = Path(args.scaffold)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.error(f"Scaffold file not found: {path}")
        return 1
    except json.JSONDecodeError as e:
        logger.error(f"Scaffold file is not valid JSON: {e}")
        return 1

    criteria = PassCriteria(min_overall_score=get_min_overall_score(args.min_score))
    try:
        report = analyze_scaffold(
            raw,
            patterns=args.pattern or None,
            viewports=args.viewport or None,
            criteria=criteria,
        )
    except ValidationError as e:
        logger.error(f"Invalid scaffold: {e}")
        return 1
    except (KeyError, ValueError) as e:
        logger.error(str(e))
        return 1

    output = json.dumps(report.to_dict(), indent=args.indent)
    if args.output:
        Path(args.output).write_text(output + "\n", encoding="utf-8")
        logger.info(f"Report written to {args.output}")
    else:
        print(output)

    return 0 if report.score.passed or args.no_fail else 2


def handle_analyze_command(argv: list[str]) -> int:
    """Parse and run the analyze command."""
    parser = argparse.ArgumentParser(
        prog="python . analyze",
        description="Analyze a scaffold JSON file and print the report",
    )
    parser.add_argument("scaffold", help="Path to the scaffold JSON file")
    parser.add_argument(
        "--pattern",
        "-p",
        action="append",
        help="Pattern name or alias to validate (repeatable). "
        "Defaults to high-confidence suggestions",
    )
    parser.add_argument(
        "--viewport",
        "-v",
        action="append",
        help="Viewport as WxH (repeatable). Defaults to the scaffold breakpoints",
    )
    parser.add_argument(
        "--min-score",
        type=int,
        default=None,
        help="Minimum overall score (default: SCAFFOLD_MIN_OVERALL_SCORE)",
    )
    parser.add_argument("--output", "-o", help="Write the JSON report to a file")
    parser.add_argument("--indent", type=int, default=2, help="JSON indentation")
    parser.add_argument(
        "--no-fail",
        action="store_true",
        help="Exit 0 even when the scaffold fails the pass criteria",
    )
    return cmd_analyze(parser.parse_args(argv))


# =============================================================================
# Patterns Command
# =============================================================================


def cmd_patterns(_argv: list[str]) -> int:
    """List registered patterns with their rules and aliases."""
    aliases: dict[str, list[str]] = {}
    for alias, name in PATTERN_ALIASES.items():
        aliases.setdefault(name, []).append(alias)

    for pattern in get_all_patterns():
        names = aliases.get(pattern.name)
        alias_text = f" (aliases: {', '.join(names)})" if names else ""
        print(f"{pattern.name}{alias_text}")
        print(f"  source: {pattern.source.name or pattern.source.pattern}")
        for rule in pattern.rules:
            print(f"  [{rule.level.value}] {rule.id}: {rule.description}")
    return 0


# =============================================================================
# Env Command
# =============================================================================


def cmd_env(argv: list[str]) -> int:
    """Show configuration variables and their resolved values."""
    category = argv[0] if argv else None
    for var in list_environment_variables(category):
        info = get_environment_info(var)
        print(f"{info.name}={get_environment(var)}  [{info.category}] {info.description}")
    return 0


# =============================================================================
# Test Command
# =============================================================================


def cmd_test(extra_args: list[str]) -> int:
    """Run pytest with provided arguments and test tier options.

    Usage:
        python . test                # Run all tests
        python . test --unit         # Run only unit tests
        python . test --integration  # Run end-to-end analysis tests
        python . test -k "wizard"    # Run tests matching pattern
    """
    tier_markers = {
        "--unit": ["-m", "unit"],
        "--integration": ["-m", "integration"],
        "--all": [],
    }

    pytest_args: list[str] = []
    remaining_args: list[str] = []

    for arg in extra_args:
        if arg in tier_markers:
            pytest_args.extend(tier_markers[arg])
        else:
            remaining_args.append(arg)

    cmd = [sys.executable, "-m", "pytest", *pytest_args, *remaining_args]
    logger.info(f"Running: {' '.join(cmd)}")

    try:
        return subprocess.call(cmd)
    except KeyboardInterrupt:
        return 130


# =============================================================================
# Main
# =============================================================================


def show_help() -> None:
    """Display CLI help message."""
    print("Usage: python . {command} [args]")
    print("\n=== Analysis ===")
    print("  analyze    Analyze a scaffold JSON file")
    print("  patterns   List registered patterns and their rules")
    print("  env        Show configuration variables")
    print("\n=== Development ===")
    print("  test       Run the test suite")
    print("\nExamples:")
    print("  python . analyze screen.json")
    print("  python . analyze screen.json -p form -v 320x640 -v 1280x800")
    print("  python . env scoring")
    print("  python . test --unit")


def main() -> int:
    """Main entry point for the CLI."""
    if len(sys.argv) < 2:
        show_help()
        return 1

    command = sys.argv[1]
    rest_args = sys.argv[2:]

    if command in ("-h", "--help"):
        show_help()
        return 0

    commands = {
        "analyze": lambda: handle_analyze_command(rest_args),
        "patterns": lambda: cmd_patterns(rest_args),
        "env": lambda: cmd_env(rest_args),
        "test": lambda: cmd_test(rest_args),
    }

    if command in commands:
        setup_logging(get_log_level())
        return commands[command]()

    logger.error(f"Unknown command: {command}")
    show_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
