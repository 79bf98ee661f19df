"""
Shared pytest fixtures for dress checklist tests.

Provides fixtures for:
- The packaged dress checklist rule table
- A small synthetic rule table with one rule per edge case
- Writing rule documents and command files to tmp_path
"""

import pytest
from pathlib import Path
from typing import Any, Dict, List
import yaml
import sys

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from dress_checklist.definitions import RuleDefinition
from dress_checklist.rule_table import RuleTable


# =============================================================================
# Rule Definition Helpers
# =============================================================================

def make_rule(rule_id: int, name: str = None, outcomes: List[Dict[str, Any]] = None, **kwargs) -> RuleDefinition:
    """Build a RuleDefinition from plain data."""
    return RuleDefinition.model_validate({
        "id": rule_id,
        "name": f"rule_{rule_id}" if name is None else name,
        "outcomes": outcomes if outcomes is not None else [
            {"mode": "HOT", "message": f"hot_{rule_id}"},
            {"mode": "COLD", "message": f"cold_{rule_id}"},
        ],
        **kwargs,
    })


@pytest.fixture
def rule_factory():
    """Factory for RuleDefinition objects."""
    return make_rule


# =============================================================================
# Rule Table Fixtures
# =============================================================================

@pytest.fixture
def dress_rules_path() -> Path:
    """Path to the packaged dress checklist rules."""
    import dress_checklist
    return Path(dress_checklist.__file__).parent / "data" / "command_rules.yaml"


@pytest.fixture
def dress_table(dress_rules_path) -> RuleTable:
    """Rule table built from the packaged dress checklist rules."""
    return RuleTable.from_file(dress_rules_path)


@pytest.fixture
def simple_table() -> RuleTable:
    """
    Small table covering every validation path.

    1  no prerequisites
    2  requires 1
    3  error in HOT, allowed in COLD
    4  requires itself
    5  HOT outcome only
    6  requires 1 and 2
    """
    return RuleTable.build([
        make_rule(1),
        make_rule(2, outcomes=[
            {"mode": "HOT", "message": "hot_2", "requires": [1]},
            {"mode": "COLD", "message": "cold_2", "requires": [1]},
        ]),
        make_rule(3, outcomes=[
            {"mode": "HOT", "message": "fail", "error": True},
            {"mode": "COLD", "message": "cold_3"},
        ]),
        make_rule(4, outcomes=[
            {"mode": "HOT", "message": "hot_4", "requires": [4]},
            {"mode": "COLD", "message": "cold_4", "requires": [4]},
        ]),
        make_rule(5, outcomes=[
            {"mode": "HOT", "message": "hot_5"},
        ]),
        make_rule(6, outcomes=[
            {"mode": "HOT", "message": "hot_6", "requires": [1, 2]},
            {"mode": "COLD", "message": "cold_6", "requires": [1, 2]},
        ]),
    ])


# =============================================================================
# File Fixtures
# =============================================================================

@pytest.fixture
def write_rules(tmp_path):
    """Write a rule document to tmp_path and return its path."""
    def _write(rules: List[Dict[str, Any]], filename: str = "rules.yaml", **extra) -> Path:
        path = tmp_path / filename
        with open(path, 'w', encoding='utf-8') as f:
            yaml.dump({"rules": rules, **extra}, f)
        return path
    return _write


@pytest.fixture
def write_text(tmp_path):
    """Write raw text to a file in tmp_path and return its path."""
    def _write(filename: str, content: str) -> Path:
        path = tmp_path / filename
        path.write_text(content, encoding='utf-8')
        return path
    return _write
