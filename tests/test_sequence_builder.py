"""
Tests for the Sequence Builder.

Covers line shape checks, their order, identifier coercion and outcome
resolution against the rule table.
"""

import pytest

from dress_checklist.models import Mode
from dress_checklist.rule_table import RuleTable
from dress_checklist.sequence_builder import (
    EmptyLine,
    LineRejected,
    MalformedLine,
    NoIdentifiers,
    UnknownIdentifier,
    UnknownMode,
    UnresolvedOutcome,
    build_sequence,
    parse_identifier,
    parse_line_mode,
)


class TestParseIdentifier:
    """Tests for identifier token coercion."""

    @pytest.mark.parametrize("token,expected", [
        ("12", 12),
        ("0", 0),
        ("+3", 3),
        ("-2", -2),
        (" 7 ", 7),
        ("2147483647", 2147483647),
        ("-2147483648", -2147483648),
    ])
    def test_integer_tokens(self, token, expected):
        assert parse_identifier(token) == expected

    @pytest.mark.parametrize("token", [
        "abc", "", "1.5", "1_000", "2147483648", "-2147483649", "0x1F", "٣", None,
    ])
    def test_unparsable_tokens_become_zero(self, token):
        assert parse_identifier(token) == 0


class TestParseLineMode:

    def test_known_modes(self):
        assert parse_line_mode("hot") is Mode.HOT
        assert parse_line_mode("COLD") is Mode.COLD

    def test_unknown_is_unset(self):
        assert parse_line_mode("WARM") is Mode.NONE


class TestBuildSequence:
    """Tests for build_sequence()."""

    def test_valid_line(self, simple_table):
        sequence = build_sequence("HOT 1,2", simple_table)

        assert sequence.mode is Mode.HOT
        assert sequence[0].is_header
        assert sequence.identifiers == (1, 2)
        assert [item.message for item in sequence.items] == ["hot_1", "hot_2"]
        assert sequence[2].required_identifiers == (1,)

    def test_mode_selects_outcome(self, simple_table):
        sequence = build_sequence("cold 3", simple_table)

        item = sequence.items[0]
        assert item.mode is Mode.COLD
        assert item.message == "cold_3"
        assert item.is_error is False

    def test_error_flag_carried(self, simple_table):
        item = build_sequence("HOT 3", simple_table).items[0]
        assert item.is_error is True
        assert item.message == "fail"

    def test_duplicates_kept_in_order(self, simple_table):
        assert build_sequence("HOT 1,2,1", simple_table).identifiers == (1, 2, 1)

    def test_surrounding_whitespace_ignored(self, simple_table):
        assert build_sequence("  HOT 1,2 \n", simple_table).identifiers == (1, 2)

    @pytest.mark.parametrize("line", ["", "   ", None])
    def test_empty_line(self, simple_table, line):
        with pytest.raises(EmptyLine):
            build_sequence(line, simple_table)

    @pytest.mark.parametrize("line,parts", [
        ("HOT", 1),
        ("HOT 1 2", 3),
        ("HOT  1", 3),
        ("HOT 1,2 COLD 3", 4),
    ])
    def test_malformed_line(self, simple_table, line, parts):
        with pytest.raises(MalformedLine) as exc_info:
            build_sequence(line, simple_table)
        assert exc_info.value.parts == parts

    @pytest.mark.parametrize("head", ["WARM", "NONE", "none", "1", "H0T"])
    def test_unknown_mode(self, simple_table, head):
        with pytest.raises(UnknownMode) as exc_info:
            build_sequence(f"{head} 1", simple_table)
        assert exc_info.value.token == head

    @pytest.mark.parametrize("line", ["HOT ,", "HOT ,,,"])
    def test_separators_only(self, simple_table, line):
        with pytest.raises(NoIdentifiers) as exc_info:
            build_sequence(line, simple_table)
        assert exc_info.value.reason == "No command was found."

    def test_empty_token_among_identifiers_is_zero(self, simple_table):
        with pytest.raises(UnknownIdentifier) as exc_info:
            build_sequence("HOT 1,,2", simple_table)
        assert exc_info.value.identifier == 0

    def test_unknown_identifier(self, simple_table):
        with pytest.raises(UnknownIdentifier) as exc_info:
            build_sequence("HOT 1,99", simple_table)
        assert exc_info.value.identifier == 99
        assert exc_info.value.reason == "Command id 99 is not valid."

    def test_unparsable_token_resolves_to_zero(self, simple_table):
        with pytest.raises(UnknownIdentifier) as exc_info:
            build_sequence("HOT 1,abc", simple_table)
        assert exc_info.value.identifier == 0

    def test_trailing_comma_resolves_to_zero(self, simple_table):
        with pytest.raises(UnknownIdentifier) as exc_info:
            build_sequence("HOT 1,", simple_table)
        assert exc_info.value.identifier == 0

    def test_coerced_zero_matches_rule_zero(self, rule_factory):
        table = RuleTable.build([rule_factory(0), rule_factory(1)])

        sequence = build_sequence("HOT x,1", table)

        assert sequence.identifiers == (0, 1)
        assert sequence.items[0].message == "hot_0"

    def test_unresolved_outcome_rejects_line(self, simple_table):
        with pytest.raises(UnresolvedOutcome) as exc_info:
            build_sequence("COLD 1,5", simple_table)

        assert exc_info.value.identifier == 5
        assert exc_info.value.mode is Mode.COLD

    def test_unknown_identifier_checked_before_resolution(self, simple_table):
        with pytest.raises(UnknownIdentifier):
            build_sequence("COLD 5,99", simple_table)

    def test_mode_checked_before_identifiers(self, simple_table):
        with pytest.raises(UnknownMode):
            build_sequence("WARM 99", simple_table)

    def test_rejections_are_line_rejected(self, simple_table):
        for line in ["", "HOT", "WARM 1", "HOT 99", "COLD 5"]:
            with pytest.raises(LineRejected) as exc_info:
                build_sequence(line, simple_table)
            assert exc_info.value.line == line
            assert exc_info.value.reason
