#!/usr/bin/env python3
"""
Rule file validation script.

Performs:
1. load_rules() + RuleTable.build() - the checks a run would fail on
2. audit_rule_table() - legal but suspicious definitions

Usage:
    python scripts/validate_rules.py
    python scripts/validate_rules.py path/to/CommandRules.xml
    python scripts/validate_rules.py --output-format json

Exit codes:
    0 - validation passed (low/medium findings allowed)
    1 - high severity findings
    2 - the rule file cannot be loaded or built
"""

import sys
import os
import argparse
import json
from pathlib import Path

_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
_src_path = os.path.join(_project_root, "src")
if _src_path not in sys.path:
    sys.path.insert(0, _src_path)

from dress_checklist.rule_audit import audit_rule_table
from dress_checklist.rule_loader import RuleLoadError
from dress_checklist.rule_table import RuleTable, RuleTableError
from dress_checklist.settings import resolve_rules_path, settings


def main() -> int:
    parser = argparse.ArgumentParser(description="Validate a command rule file")
    parser.add_argument(
        "rules",
        nargs="?",
        help="Rule file (default: rules.path from settings)"
    )
    parser.add_argument(
        "--output-format",
        choices=["text", "json"],
        default="text",
        help="Report format"
    )
    args = parser.parse_args()

    path = Path(args.rules) if args.rules else resolve_rules_path(settings)

    try:
        table = RuleTable.from_file(path)
    except (RuleLoadError, RuleTableError) as e:
        if args.output_format == "json":
            print(json.dumps({"path": str(path), "is_valid": False, "error": str(e)}, indent=2))
        else:
            print(f"ERROR: {e}")
        return 2

    issues = audit_rule_table(table)
    has_high = any(issue.severity == "high" for issue in issues)

    if args.output_format == "json":
        print(json.dumps({
            "path": str(path),
            "rules": len(table),
            "is_valid": not has_high,
            "issues": [
                {
                    "severity": issue.severity,
                    "identifier": issue.identifier,
                    "type": issue.issue_type,
                    "message": issue.message,
                }
                for issue in issues
            ],
        }, indent=2, ensure_ascii=False))
    else:
        print("=" * 60)
        print("COMMAND RULES VALIDATION")
        print("=" * 60)
        print(f"\n  File: {path}")
        print(f"  Rules: {len(table)}")
        if issues:
            print(f"\n  Findings ({len(issues)}):")
            for issue in issues:
                print(f"    {issue}")
        else:
            print("\n  No findings")
        print("\n" + ("FAILED" if has_high else "OK"))

    return 1 if has_high else 0


if __name__ == "__main__":
    sys.exit(main())
