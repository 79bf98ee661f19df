"""
Tests for run orchestration: line reading, per-line processing and files.
"""

import io

import pytest

from dress_checklist.runner import (
    ChecklistRunner,
    LineDiagnostic,
    RunSummary,
    read_command_lines,
)
from dress_checklist.sequence_builder import UnknownIdentifier, UnknownMode


class TestReadCommandLines:

    def test_strips_terminators(self):
        stream = io.StringIO("HOT 8\r\nCOLD 8\n")
        assert list(read_command_lines(stream)) == ["HOT 8", "COLD 8"]

    def test_stops_at_first_empty_line(self):
        stream = io.StringIO("HOT 8\n\nCOLD 8\n")
        assert list(read_command_lines(stream)) == ["HOT 8"]

    def test_whitespace_line_is_yielded(self):
        stream = io.StringIO("HOT 8\n   \nCOLD 8\n")
        assert list(read_command_lines(stream)) == ["HOT 8", "   ", "COLD 8"]

    def test_last_line_without_newline(self):
        assert list(read_command_lines(io.StringIO("HOT 8"))) == ["HOT 8"]


class TestChecklistRunner:
    """Tests for ChecklistRunner.process_line() and run()."""

    @pytest.fixture
    def runner(self, dress_table):
        return ChecklistRunner(dress_table)

    def test_process_accepted_line(self, runner):
        result = runner.process_line("HOT 8,6", line_number=1)

        assert result.accepted
        assert result.rejection is None
        assert result.sequence.identifiers == (8, 6)
        assert result.trace.entries == ["Removing PJs", "shorts"]

    def test_process_rejected_line(self, runner):
        result = runner.process_line("HOT 8,9", line_number=4)

        assert not result.accepted
        assert isinstance(result.rejection, UnknownIdentifier)
        assert result.line_number == 4

    def test_run_skips_rejected_lines(self, runner):
        lines = ["HOT 8,6", "WARM 8", "HOT 9", "COLD 8", "HOT 8,8"]

        output = list(runner.run(lines))

        assert output == ["Removing PJs,shorts", "Removing PJs", "Removing PJs,false"]

    def test_run_summary(self, runner):
        list(runner.run(["HOT 8,6", "WARM 8", "HOT 9", "COLD 8", "HOT 8,8"]))
        summary = runner.summary

        assert summary.lines_read == 5
        assert summary.accepted == 3
        assert summary.rejected == 2
        assert summary.passed == 2
        assert summary.failed == 1
        assert [d.line_number for d in summary.diagnostics] == [2, 3, 5]
        assert [d.rejected for d in summary.diagnostics] == [True, True, False]
        assert str(summary.diagnostics[2]) == "ERR: Current item (8) has been used before."

    def test_rejected_line_leaves_table_unchanged(self, runner, dress_table):
        before = {i: dress_table.lookup(i) for i in dress_table}
        runner.process_line("WARM 8")
        assert {i: dress_table.lookup(i) for i in dress_table} == before

    def test_lines_are_independent(self, runner):
        first = list(runner.run(["HOT 8,6", "HOT 8,6"]))
        assert first == ["Removing PJs,shorts", "Removing PJs,shorts"]

    def test_rerun_is_identical(self, dress_table):
        lines = ["HOT 8,6,4,2,1,7", "HOT 8,6,6", "COLD 8,6,3,4,2,5,7", "COLD 6"]
        first = list(ChecklistRunner(dress_table).run(lines))
        second = list(ChecklistRunner(dress_table).run(lines))
        assert first == second

    def test_custom_separator(self, dress_table):
        runner = ChecklistRunner(dress_table, separator=", ")
        assert list(runner.run(["HOT 8,6"])) == ["Removing PJs, shorts"]

    def test_unknown_mode_rejection_reason(self, runner):
        result = runner.process_line("WARM 8")
        assert isinstance(result.rejection, UnknownMode)
        assert "WARM" in result.rejection.reason


class TestRunFiles:
    """Tests for ChecklistRunner.run_files()."""

    def test_run_files(self, dress_table, write_text, tmp_path):
        input_path = write_text("input.txt", "HOT 8,6,4,2,1,7\nHOT 8,6,6\nWARM 1\n\nCOLD 8\n")
        output_path = tmp_path / "output.txt"

        summary = ChecklistRunner(dress_table).run_files(input_path, output_path)

        assert output_path.read_text(encoding="utf-8") == (
            "Removing PJs,shorts,t-shirt,sunglasses,sandals,leaving house\n"
            "Removing PJs,shorts,false\n"
        )
        assert summary.lines_read == 3
        assert summary.rejected == 1

    def test_no_accepted_lines_writes_empty_file(self, dress_table, write_text, tmp_path):
        input_path = write_text("input.txt", "WARM 1\n")
        output_path = tmp_path / "output.txt"

        ChecklistRunner(dress_table).run_files(input_path, output_path)

        assert output_path.read_text(encoding="utf-8") == ""

    def test_missing_input_raises(self, dress_table, tmp_path):
        with pytest.raises(OSError):
            ChecklistRunner(dress_table).run_files(tmp_path / "absent.txt", tmp_path / "out.txt")
        assert not (tmp_path / "out.txt").exists()

    def test_summary_reset_per_file(self, dress_table, write_text, tmp_path):
        runner = ChecklistRunner(dress_table)
        input_path = write_text("input.txt", "HOT 8\n")

        runner.run_files(input_path, tmp_path / "a.txt")
        summary = runner.run_files(input_path, tmp_path / "b.txt")

        assert summary.lines_read == 1


class TestRunSummary:

    def test_to_dict(self):
        summary = RunSummary(lines_read=3, accepted=2, rejected=1, passed=1, failed=1)
        assert summary.to_dict() == {
            "lines_read": 3, "accepted": 2, "rejected": 1, "passed": 1, "failed": 1,
        }

    def test_diagnostic_str(self):
        assert str(LineDiagnostic(1, "HOT", "String is empty or null.")) == "ERR: String is empty or null."
