"""
Dress checklist - rule-driven validation of command lines.

This package provides:
- RuleTable: identifier -> per-mode outcomes, built from rule definitions
- build_sequence: resolves one "<MODE> <id,id,...>" line into a CommandSequence
- run: validates a sequence and returns its OutcomeTrace
- ChecklistRunner: processes whole input files
"""

from dress_checklist.models import (
    Mode,
    Outcome,
    ItemKind,
    CommandItem,
    CommandSequence,
)
from dress_checklist.definitions import (
    OutcomeDefinition,
    RuleDefinition,
    RuleDocument,
)
from dress_checklist.rule_loader import RuleLoadError, load_rules, parse_rules
from dress_checklist.rule_table import (
    RuleTable,
    RuleTableError,
    EmptyRuleNameError,
    EmptyOutcomeListError,
    DuplicateRuleError,
)
from dress_checklist.sequence_builder import (
    LineRejected,
    EmptyLine,
    MalformedLine,
    UnknownMode,
    NoIdentifiers,
    UnknownIdentifier,
    UnresolvedOutcome,
    build_sequence,
    parse_identifier,
)
from dress_checklist.validator import (
    FAILURE_MARKER,
    WalkState,
    ViolationKind,
    ItemViolation,
    MissingPrerequisite,
    DuplicateUse,
    DisallowedItem,
    VisitationState,
    OutcomeTrace,
    check_item,
    run,
)
from dress_checklist.rule_audit import AuditIssue, audit_rule_table
from dress_checklist.runner import (
    ChecklistRunner,
    LineDiagnostic,
    LineResult,
    RunSummary,
    read_command_lines,
)


__all__ = [
    "Mode",
    "Outcome",
    "ItemKind",
    "CommandItem",
    "CommandSequence",
    "OutcomeDefinition",
    "RuleDefinition",
    "RuleDocument",
    "RuleLoadError",
    "load_rules",
    "parse_rules",
    "RuleTable",
    "RuleTableError",
    "EmptyRuleNameError",
    "EmptyOutcomeListError",
    "DuplicateRuleError",
    "LineRejected",
    "EmptyLine",
    "MalformedLine",
    "UnknownMode",
    "NoIdentifiers",
    "UnknownIdentifier",
    "UnresolvedOutcome",
    "build_sequence",
    "parse_identifier",
    "FAILURE_MARKER",
    "WalkState",
    "ViolationKind",
    "ItemViolation",
    "MissingPrerequisite",
    "DuplicateUse",
    "DisallowedItem",
    "VisitationState",
    "OutcomeTrace",
    "check_item",
    "run",
    "AuditIssue",
    "audit_rule_table",
    "ChecklistRunner",
    "LineDiagnostic",
    "LineResult",
    "RunSummary",
    "read_command_lines",
]
