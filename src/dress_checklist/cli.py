"""
Command line entry point.

Usage:
    dress-checklist INPUT OUTPUT
    dress-checklist INPUT OUTPUT --rules rules.xml --log-level DEBUG
    python -m dress_checklist INPUT OUTPUT

Exit codes:
    0  run completed (rejected lines and failed sequences included)
    1  fatal error: invalid settings, rules cannot be loaded,
       input unreadable or output unwritable
    2  usage error
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from dress_checklist.logger import logger
from dress_checklist.rule_loader import RuleLoadError
from dress_checklist.rule_table import RuleTable, RuleTableError
from dress_checklist.runner import ChecklistRunner
from dress_checklist.settings import resolve_rules_path, settings, validate_settings


EXIT_OK = 0
EXIT_FATAL = 1
EXIT_USAGE = 2


def create_parser() -> argparse.ArgumentParser:
    """Create and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="dress-checklist",
        description="Validate dressing command lines against a rule table",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Input lines look like "HOT 8,6,4,2,1,7". Each accepted line produces one
output line with the comma-joined responses, ending in "false" if a rule
was broken.

Examples:
  dress-checklist commands.txt results.txt
  dress-checklist commands.txt results.txt --rules CommandRules.xml
        """
    )

    parser.add_argument("input", help="File with one command line per row")
    parser.add_argument("output", help="File the traces are written to")

    parser.add_argument(
        "--rules", "-r",
        help="Rule definition file, .yaml or .xml (default: rules.path from settings)"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override logging.level from settings"
    )

    return parser


def validate_arguments(args: argparse.Namespace) -> List[str]:
    """
    Check the positional arguments.

    Returns:
        Broken rules; only the first failing check is reported
    """
    input_file = args.input
    output_file = args.output

    if not input_file or not input_file.strip() or not Path(input_file).is_file():
        return [f"The input file {input_file} is not valid."]

    if not output_file or not output_file.strip():
        return [f"The output file {output_file} is not valid."]

    return []


def main(argv: Optional[List[str]] = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    broken = validate_arguments(args)
    if broken:
        for rule in broken:
            print(f"ERR: {rule}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return EXIT_USAGE

    if args.log_level:
        logger.set_level(args.log_level)

    settings_errors = validate_settings(settings)
    if settings_errors:
        for error in settings_errors:
            logger.error(f"ERR: Settings: {error}")
        return EXIT_FATAL

    rules_path = Path(args.rules) if args.rules else resolve_rules_path(settings)

    try:
        table = RuleTable.from_file(rules_path)
    except (RuleLoadError, RuleTableError) as e:
        logger.error(f"ERR: {e}")
        return EXIT_FATAL
    logger.event("rules_loaded", path=str(rules_path), rules=len(table))

    runner = ChecklistRunner(
        table,
        separator=settings.get_nested("output.separator", ","),
        self_prerequisite_satisfied=settings.get_nested(
            "validation.self_prerequisite_satisfied", True
        ),
    )

    try:
        runner.run_files(args.input, args.output)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"ERR: {e}")
        return EXIT_FATAL

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
