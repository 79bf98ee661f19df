"""
Sequence Builder.

Turns one raw command line of the form ``<MODE> <id1,id2,...>`` into a
CommandSequence by resolving every identifier against the rule table.
Malformed lines raise a LineRejected subclass; the caller skips the line
and continues with the next one.

Checks run in a fixed order and the first violation wins:
    1. line is not blank
    2. exactly two space-separated parts
    3. first part is HOT or COLD (case-insensitive)
    4. second part has at least one comma-separated token
    5. tokens are coerced to integers (unparsable tokens become 0)
    6. every identifier is known to the rule table
    7. every identifier has an outcome for the line mode
"""

import re
from typing import List

from dress_checklist.models import CommandItem, CommandSequence, Mode
from dress_checklist.rule_table import RuleTable


INT32_MIN = -2 ** 31
INT32_MAX = 2 ** 31 - 1

_INTEGER_TOKEN = re.compile(r"^\s*[+-]?[0-9]+\s*$")


class LineRejected(Exception):
    """Raised when a command line cannot be turned into a sequence."""

    def __init__(self, line: str, reason: str):
        self.line = line
        self.reason = reason
        super().__init__(reason)


class EmptyLine(LineRejected):
    def __init__(self, line: str):
        super().__init__(line, "String is empty or null.")


class MalformedLine(LineRejected):
    def __init__(self, line: str, parts: int):
        self.parts = parts
        super().__init__(
            line,
            f"Number of commands is not valid: expected 2 parts, got {parts}."
        )


class UnknownMode(LineRejected):
    def __init__(self, line: str, token: str):
        self.token = token
        super().__init__(line, f"Head is not a valid type: '{token}'.")


class NoIdentifiers(LineRejected):
    def __init__(self, line: str):
        super().__init__(line, "No command was found.")


class UnknownIdentifier(LineRejected):
    def __init__(self, line: str, identifier: int):
        self.identifier = identifier
        super().__init__(line, f"Command id {identifier} is not valid.")


class UnresolvedOutcome(LineRejected):
    """An identifier exists but declares no outcome for the line mode."""

    def __init__(self, line: str, identifier: int, mode: Mode):
        self.identifier = identifier
        self.mode = mode
        super().__init__(
            line,
            f"Command id {identifier} has no response for type {mode.name}."
        )


def parse_identifier(token: str) -> int:
    """
    Coerce an identifier token to an integer.

    Tokens that are not a signed 32-bit decimal integer resolve to 0
    instead of being rejected.
    """
    if token is None or not _INTEGER_TOKEN.match(token):
        return 0
    value = int(token.strip())
    if value < INT32_MIN or value > INT32_MAX:
        return 0
    return value


def parse_line_mode(token: str) -> Mode:
    """Parse the head of a line; the unset mode is not accepted."""
    try:
        mode = Mode.parse(token)
    except ValueError:
        mode = Mode.NONE
    return mode


def build_sequence(raw_line: str, table: RuleTable) -> CommandSequence:
    """
    Build a command sequence from a raw line.

    Args:
        raw_line: Line in ``<MODE> <id1,id2,...>`` form
        table: Rule table used to resolve identifiers

    Returns:
        CommandSequence with the header at position 0

    Raises:
        LineRejected: If the line is malformed or references unknown
            identifiers or outcomes
    """
    line = (raw_line or "").strip()
    if not line:
        raise EmptyLine(raw_line)

    pair = line.split(" ")
    if len(pair) != 2:
        raise MalformedLine(raw_line, len(pair))
    head, body = pair

    mode = parse_line_mode(head)
    if not mode.is_set:
        raise UnknownMode(raw_line, head)

    if not body.strip(","):
        raise NoIdentifiers(raw_line)
    tokens = body.split(",")

    identifiers: List[int] = [parse_identifier(t) for t in tokens]
    for identifier in identifiers:
        if not table.contains(identifier):
            raise UnknownIdentifier(raw_line, identifier)

    items = []
    for identifier in identifiers:
        outcome = table.outcome_for(identifier, mode)
        if outcome is None:
            raise UnresolvedOutcome(raw_line, identifier, mode)
        items.append(CommandItem.resolved(identifier, outcome))

    return CommandSequence(CommandItem.header(mode), items)
