"""
Sequential Validator.

Walks a CommandSequence item by item and produces an OutcomeTrace: the
messages of every valid item, followed by a single ``false`` marker if
an item broke a rule. Items after the failing one are never visited.

The walk is a fold over the sequence that threads a VisitationState from
step to step. Advancing to an item counts its visit *before* the item is
checked, so an item's own identifier is already "processed" while its
prerequisites are evaluated.

Checks per item, first failure wins:
    1. every prerequisite has been visited        -> MissingPrerequisite
    2. the item itself has not been visited before -> DuplicateUse
    3. the item is not flagged as an error         -> DisallowedItem
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Tuple
import logging

from dress_checklist.models import CommandItem, CommandSequence, ItemKind

logger = logging.getLogger(__name__)


FAILURE_MARKER = "false"


class WalkState(str, Enum):
    """Terminal state of a walk over a command sequence."""
    DONE = "done"
    FAILED = "failed"


class ViolationKind(str, Enum):
    MISSING_PREREQUISITE = "missing_prerequisite"
    DUPLICATE_USE = "duplicate_use"
    DISALLOWED_ITEM = "disallowed_item"


@dataclass(frozen=True)
class ItemViolation:
    """A rule broken by one item of a sequence."""
    identifier: int
    kind: ViolationKind = field(init=False)

    @property
    def message(self) -> str:
        return f"Item ({self.identifier}) broke a rule."

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class MissingPrerequisite(ItemViolation):
    """``identifier`` is the prerequisite that has not been visited."""
    item: int = 0
    kind: ViolationKind = field(default=ViolationKind.MISSING_PREREQUISITE, init=False)

    @property
    def message(self) -> str:
        return f"Required item ({self.identifier}) cannot be found."


@dataclass(frozen=True)
class DuplicateUse(ItemViolation):
    kind: ViolationKind = field(default=ViolationKind.DUPLICATE_USE, init=False)

    @property
    def message(self) -> str:
        return f"Current item ({self.identifier}) has been used before."


@dataclass(frozen=True)
class DisallowedItem(ItemViolation):
    kind: ViolationKind = field(default=ViolationKind.DISALLOWED_ITEM, init=False)

    @property
    def message(self) -> str:
        return f"Current item ({self.identifier}) is not allowed."


@dataclass(frozen=True)
class VisitationState:
    """Per-sequence visit counts keyed by identifier."""
    counts: Mapping[int, int] = field(default_factory=lambda: MappingProxyType({}))

    def count(self, identifier: int) -> int:
        return self.counts.get(identifier, 0)

    def visited(self, identifier: int) -> bool:
        return self.count(identifier) > 0

    def visit(self, identifier: int) -> "VisitationState":
        """Return a new state with one more visit of ``identifier``."""
        counts: Dict[int, int] = dict(self.counts)
        counts[identifier] = counts.get(identifier, 0) + 1
        return VisitationState(MappingProxyType(counts))


@dataclass(frozen=True)
class OutcomeTrace:
    """
    Result of validating one command sequence.

    Attributes:
        messages: Messages of the items that validated, in order
        violation: Rule broken by the first invalid item, if any
        status: WalkState.DONE or WalkState.FAILED
        visits: Visitation state when the walk stopped
    """
    messages: Tuple[str, ...] = ()
    violation: Optional[ItemViolation] = None
    status: WalkState = WalkState.DONE
    visits: VisitationState = field(default_factory=VisitationState)

    @property
    def failed(self) -> bool:
        return self.status is WalkState.FAILED

    @property
    def entries(self) -> List[str]:
        """Messages followed by the failure marker when the walk failed."""
        entries = list(self.messages)
        if self.failed:
            entries.append(FAILURE_MARKER)
        return entries

    def to_line(self, separator: str = ",") -> str:
        return separator.join(self.entries)


def check_item(
    item: CommandItem,
    visits: VisitationState,
    self_prerequisite_satisfied: bool = True
) -> Optional[ItemViolation]:
    """
    Validate a resolved item against the visits made so far.

    ``visits`` already includes the current visit of ``item``. With
    ``self_prerequisite_satisfied=False`` a prerequisite equal to the
    item's own identifier needs an earlier visit.
    """
    for required in item.required_identifiers:
        seen = visits.count(required)
        if required == item.identifier and not self_prerequisite_satisfied:
            seen -= 1
        if seen <= 0:
            return MissingPrerequisite(required, item=item.identifier)

    if visits.count(item.identifier) > 1:
        return DuplicateUse(item.identifier)

    if item.is_error:
        return DisallowedItem(item.identifier)

    return None


StepResult = Tuple[VisitationState, Optional[ItemViolation]]


def _step_header(item: CommandItem, visits: VisitationState, strict: bool) -> StepResult:
    # the header carries the mode only
    return visits, None


def _step_item(item: CommandItem, visits: VisitationState, strict: bool) -> StepResult:
    visits = visits.visit(item.identifier)
    return visits, check_item(item, visits, self_prerequisite_satisfied=not strict)


_STEPS: Dict[ItemKind, Callable[[CommandItem, VisitationState, bool], StepResult]] = {
    ItemKind.HEADER: _step_header,
    ItemKind.ITEM: _step_item,
}


def run(
    sequence: CommandSequence,
    self_prerequisite_satisfied: bool = True
) -> OutcomeTrace:
    """
    Validate a command sequence.

    Args:
        sequence: Sequence built by the sequence builder
        self_prerequisite_satisfied: Keep the legacy behavior where an
            item listing itself as prerequisite always passes

    Returns:
        OutcomeTrace with the messages of valid items and, on failure,
        the violation that stopped the walk
    """
    strict = not self_prerequisite_satisfied
    visits = VisitationState()
    messages: List[str] = []

    for position, item in enumerate(sequence):
        visits, violation = _STEPS[item.kind](item, visits, strict)
        if item.is_header:
            continue

        if violation is not None:
            logger.debug(
                "Item %d at position %d failed: %s",
                item.identifier, position, violation.message
            )
            return OutcomeTrace(
                messages=tuple(messages),
                violation=violation,
                status=WalkState.FAILED,
                visits=visits,
            )
        messages.append(item.message)

    return OutcomeTrace(messages=tuple(messages), status=WalkState.DONE, visits=visits)
