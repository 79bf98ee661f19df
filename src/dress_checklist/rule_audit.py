"""Static audit of a built rule table.

The table build only rejects what makes the table unusable. This audit
reports definitions that are legal but cause surprising runs:
1. Prerequisites pointing at identifiers the table does not know
2. Identifiers without an outcome for one of the line modes
3. Several outcomes for the same mode (only the first is ever used)
4. Outcomes listing their own identifier as prerequisite
5. Outcomes without a mode tag (never selected)
"""

from dataclasses import dataclass
from typing import List, Optional

from dress_checklist.models import Mode
from dress_checklist.rule_table import RuleTable


LINE_MODES = (Mode.HOT, Mode.COLD)

SEVERITY_ORDER = {"high": 0, "medium": 1, "low": 2}


@dataclass
class AuditIssue:
    """A single audit finding.

    Attributes:
        severity: high, medium, low
        identifier: Rule identifier the issue belongs to
        issue_type: unknown_prerequisite, missing_mode_outcome, ...
        message: Human-readable description
        mode: Mode of the offending outcome (if applicable)
    """
    severity: str
    identifier: int
    issue_type: str
    message: str
    mode: Optional[Mode] = None

    def __str__(self) -> str:
        return f"[{self.severity}] {self.issue_type}: {self.message}"


def audit_rule_table(table: RuleTable) -> List[AuditIssue]:
    """Run every check and return issues ordered by severity, then id."""
    issues: List[AuditIssue] = []

    for identifier in table:
        outcomes = table.lookup(identifier)
        seen_modes = set()

        for outcome in outcomes:
            if not outcome.mode.is_set:
                issues.append(AuditIssue(
                    severity="low",
                    identifier=identifier,
                    issue_type="unset_mode_outcome",
                    message=f"Rule {identifier} has an outcome without a mode; it is never selected",
                    mode=outcome.mode,
                ))
            elif outcome.mode in seen_modes:
                issues.append(AuditIssue(
                    severity="low",
                    identifier=identifier,
                    issue_type="shadowed_outcome",
                    message=(
                        f"Rule {identifier} declares more than one {outcome.mode.name} "
                        f"outcome; only the first is used"
                    ),
                    mode=outcome.mode,
                ))
            seen_modes.add(outcome.mode)

            for required in sorted(outcome.prerequisites):
                if required == identifier:
                    issues.append(AuditIssue(
                        severity="low",
                        identifier=identifier,
                        issue_type="self_prerequisite",
                        message=(
                            f"Rule {identifier} requires itself in {outcome.mode.name} "
                            f"mode; the check always passes"
                        ),
                        mode=outcome.mode,
                    ))
                elif not table.contains(required):
                    issues.append(AuditIssue(
                        severity="high",
                        identifier=identifier,
                        issue_type="unknown_prerequisite",
                        message=(
                            f"Rule {identifier} requires unknown item {required} "
                            f"in {outcome.mode.name} mode"
                        ),
                        mode=outcome.mode,
                    ))

        for mode in LINE_MODES:
            if mode not in seen_modes:
                issues.append(AuditIssue(
                    severity="medium",
                    identifier=identifier,
                    issue_type="missing_mode_outcome",
                    message=(
                        f"Rule {identifier} has no {mode.name} outcome; "
                        f"{mode.name} lines using it are rejected"
                    ),
                    mode=mode,
                ))

    issues.sort(key=lambda i: (SEVERITY_ORDER[i.severity], i.identifier))
    return issues
