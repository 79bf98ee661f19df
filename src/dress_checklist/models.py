"""
Value types shared by the rule table, sequence builder and validator.

A command line such as ``HOT 8,6,4`` is resolved into a CommandSequence:
a header item carrying the line's mode followed by one resolved item per
identifier, in input order.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, Iterator, Tuple


class Mode(Enum):
    """Temperature mode of a command line and of each rule outcome."""
    NONE = 0    # unset
    HOT = 1
    COLD = 2

    @classmethod
    def parse(cls, token: str) -> "Mode":
        """
        Parse a mode token by member name, ignoring case.

        Raises:
            ValueError: If the token names no mode
        """
        name = (token or "").strip().upper()
        try:
            return cls[name]
        except KeyError:
            raise ValueError(f"Unknown mode '{token}'") from None

    @property
    def is_set(self) -> bool:
        return self is not Mode.NONE


@dataclass(frozen=True)
class Outcome:
    """
    One mode-specific resolution of a rule identifier.

    Attributes:
        mode: Mode this outcome applies to
        message: Text emitted when the item validates
        is_error: Item is disallowed in this mode
        prerequisites: Identifiers that must appear earlier on the line
    """
    mode: Mode
    message: str = ""
    is_error: bool = False
    prerequisites: FrozenSet[int] = field(default_factory=frozenset)


class ItemKind(Enum):
    """Kind of a command sequence position."""
    HEADER = "header"
    ITEM = "item"


@dataclass(frozen=True)
class CommandItem:
    """
    A single position of a CommandSequence.

    The header item only carries the line mode; it is never validated
    and never emitted.
    """
    kind: ItemKind
    mode: Mode
    identifier: int = 0
    message: str = ""
    is_error: bool = False
    required_identifiers: Tuple[int, ...] = ()

    @classmethod
    def header(cls, mode: Mode) -> "CommandItem":
        return cls(kind=ItemKind.HEADER, mode=mode)

    @classmethod
    def resolved(cls, identifier: int, outcome: Outcome) -> "CommandItem":
        """Build an item from the outcome selected for its identifier."""
        return cls(
            kind=ItemKind.ITEM,
            mode=outcome.mode,
            identifier=identifier,
            message=outcome.message,
            is_error=outcome.is_error,
            required_identifiers=tuple(sorted(outcome.prerequisites)),
        )

    @property
    def is_header(self) -> bool:
        return self.kind is ItemKind.HEADER


class CommandSequence:
    """
    Immutable ordered list of command items.

    Position 0 is always the header; positions 1..N are the resolved
    items in the order their identifiers appeared on the input line.
    """

    def __init__(self, header: CommandItem, items: Iterable[CommandItem]):
        if not header.is_header:
            raise ValueError("First item of a command sequence must be a header")
        items = tuple(items)
        for item in items:
            if item.is_header:
                raise ValueError("Only position 0 of a command sequence may be a header")
        self._items: Tuple[CommandItem, ...] = (header,) + items

    @property
    def header(self) -> CommandItem:
        return self._items[0]

    @property
    def mode(self) -> Mode:
        return self.header.mode

    @property
    def items(self) -> Tuple[CommandItem, ...]:
        """Resolved items, header excluded."""
        return self._items[1:]

    @property
    def identifiers(self) -> Tuple[int, ...]:
        return tuple(item.identifier for item in self.items)

    def __getitem__(self, index: int) -> CommandItem:
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[CommandItem]:
        return iter(self._items)

    def __repr__(self) -> str:
        ids = ",".join(str(i) for i in self.identifiers)
        return f"CommandSequence({self.mode.name} {ids})"
