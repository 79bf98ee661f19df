"""
Rule Table for command resolution.

The table maps a command identifier to the ordered outcomes declared for
it, one per supported mode. It is built once from rule definitions and
is read-only afterwards; every later stage receives it explicitly.

Example:
    table = RuleTable.build(definitions)
    table.contains(8)                      # True
    table.outcome_for(8, Mode.HOT)         # Outcome(message="Removing PJs", ...)
"""

from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple, Union
import logging

from dress_checklist.definitions import RuleDefinition
from dress_checklist.models import Mode, Outcome

logger = logging.getLogger(__name__)


class RuleTableError(Exception):
    """Raised when the rule table cannot be built."""

    def __init__(self, rule_id: int, reason: str):
        self.rule_id = rule_id
        self.reason = reason
        super().__init__(reason)


class EmptyRuleNameError(RuleTableError):
    """Raised when a rule definition has a blank name."""

    def __init__(self, rule_id: int):
        super().__init__(
            rule_id,
            f'A command rule id "{rule_id}" has an empty command name.'
        )


class EmptyOutcomeListError(RuleTableError):
    """Raised when a rule definition declares no outcomes."""

    def __init__(self, rule_id: int):
        super().__init__(
            rule_id,
            f'A command rule id "{rule_id}" has no response path.'
        )


class DuplicateRuleError(RuleTableError):
    """Raised when two rule definitions share an identifier."""

    def __init__(self, rule_id: int, first_name: str = "", second_name: str = ""):
        self.first_name = first_name
        self.second_name = second_name
        message = f'A command rule id "{rule_id}" has already been added'
        if first_name or second_name:
            message += f" ('{first_name}' and '{second_name}')"
        super().__init__(rule_id, message + ".")


class RuleTable:
    """
    Immutable identifier -> outcomes mapping.

    Use RuleTable.build() to construct; the constructor expects already
    validated data.
    """

    def __init__(
        self,
        outcomes: Mapping[int, Tuple[Outcome, ...]],
        names: Mapping[int, str] = None
    ):
        self._outcomes: Mapping[int, Tuple[Outcome, ...]] = MappingProxyType(dict(outcomes))
        self._names: Mapping[int, str] = MappingProxyType(dict(names or {}))

    @classmethod
    def build(cls, definitions: Iterable[RuleDefinition]) -> "RuleTable":
        """
        Build a table from rule definitions.

        Args:
            definitions: Rule definitions in declaration order

        Returns:
            A new RuleTable

        Raises:
            EmptyRuleNameError: A rule has an empty or whitespace-only name
            EmptyOutcomeListError: A rule has no outcomes
            DuplicateRuleError: Two rules share an identifier
        """
        outcomes: Dict[int, Tuple[Outcome, ...]] = {}
        names: Dict[int, str] = {}

        for rule in definitions:
            if not rule.name or not rule.name.strip():
                raise EmptyRuleNameError(rule.id)
            if not rule.outcomes:
                raise EmptyOutcomeListError(rule.id)
            if rule.id in outcomes:
                raise DuplicateRuleError(rule.id, names[rule.id], rule.name)

            outcomes[rule.id] = tuple(o.to_outcome() for o in rule.outcomes)
            names[rule.id] = rule.name

        logger.debug("Rule table built with %d rule(s)", len(outcomes))
        return cls(outcomes, names)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "RuleTable":
        """Load rule definitions from a file and build the table."""
        from dress_checklist.rule_loader import load_rules

        return cls.build(load_rules(path))

    def lookup(self, identifier: int) -> Tuple[Outcome, ...]:
        """Outcomes declared for an identifier (empty if unknown)."""
        return self._outcomes.get(identifier, ())

    def contains(self, identifier: int) -> bool:
        return identifier in self._outcomes

    def outcome_for(self, identifier: int, mode: Mode) -> Optional[Outcome]:
        """First outcome of the identifier declared for the given mode."""
        for outcome in self.lookup(identifier):
            if outcome.mode is mode:
                return outcome
        return None

    def name_of(self, identifier: int) -> Optional[str]:
        return self._names.get(identifier)

    @property
    def identifiers(self) -> Tuple[int, ...]:
        return tuple(sorted(self._outcomes))

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._outcomes

    def __len__(self) -> int:
        return len(self._outcomes)

    def __iter__(self) -> Iterator[int]:
        return iter(self.identifiers)

    def __repr__(self) -> str:
        return f"RuleTable({len(self)} rules)"
