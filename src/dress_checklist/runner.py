"""
Run orchestration.

Reads command lines, builds a sequence for each one, validates it and
writes one comma-joined trace per accepted line. Rejected lines produce
a diagnostic on the log channel and no output line. Lines are processed
independently and in input order; the rule table is the only state
shared between them.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, TextIO, Union

from dress_checklist.logger import logger
from dress_checklist.models import CommandSequence
from dress_checklist.rule_table import RuleTable
from dress_checklist.sequence_builder import LineRejected, build_sequence
from dress_checklist import validator
from dress_checklist.validator import OutcomeTrace


def read_command_lines(stream: TextIO) -> Iterator[str]:
    """
    Yield raw command lines without their terminator.

    Reading stops at end of input or at the first empty line.
    """
    for raw in stream:
        line = raw.rstrip("\r\n")
        if not line:
            return
        yield line


@dataclass
class LineDiagnostic:
    """A rejected line or a failed sequence."""
    line_number: int
    line: str
    reason: str
    rejected: bool = True

    def __str__(self) -> str:
        return f"ERR: {self.reason}"


@dataclass
class LineResult:
    """Outcome of processing one input line."""
    line_number: int
    line: str
    sequence: Optional[CommandSequence] = None
    trace: Optional[OutcomeTrace] = None
    rejection: Optional[LineRejected] = None

    @property
    def accepted(self) -> bool:
        return self.trace is not None


@dataclass
class RunSummary:
    """Counters and diagnostics of a run."""
    lines_read: int = 0
    accepted: int = 0
    rejected: int = 0
    passed: int = 0
    failed: int = 0
    diagnostics: List[LineDiagnostic] = field(default_factory=list)

    def record(self, result: LineResult) -> None:
        self.lines_read += 1
        if not result.accepted:
            self.rejected += 1
            self.diagnostics.append(LineDiagnostic(
                result.line_number, result.line, result.rejection.reason
            ))
            return

        self.accepted += 1
        if result.trace.failed:
            self.failed += 1
            self.diagnostics.append(LineDiagnostic(
                result.line_number, result.line,
                result.trace.violation.message, rejected=False
            ))
        else:
            self.passed += 1

    def to_dict(self) -> dict:
        return {
            "lines_read": self.lines_read,
            "accepted": self.accepted,
            "rejected": self.rejected,
            "passed": self.passed,
            "failed": self.failed,
        }


class ChecklistRunner:
    """
    Feeds command lines through the builder and the validator.

    Example:
        runner = ChecklistRunner(RuleTable.from_file("rules.yaml"))
        for output_line in runner.run(["HOT 8,6,4,2,1,7"]):
            print(output_line)
    """

    def __init__(
        self,
        table: RuleTable,
        separator: str = ",",
        self_prerequisite_satisfied: bool = True
    ):
        self.table = table
        self.separator = separator
        self.self_prerequisite_satisfied = self_prerequisite_satisfied
        self.summary = RunSummary()

    def process_line(self, line: str, line_number: int = 0) -> LineResult:
        """Build and validate one line, logging any diagnostic."""
        logger.set_line(line_number)
        try:
            try:
                sequence = build_sequence(line, self.table)
            except LineRejected as e:
                logger.warning(f"ERR: {e.reason}")
                return LineResult(line_number, line, rejection=e)

            trace = validator.run(
                sequence,
                self_prerequisite_satisfied=self.self_prerequisite_satisfied
            )
            if trace.failed:
                logger.warning(f"ERR: {trace.violation.message}")
            return LineResult(line_number, line, sequence=sequence, trace=trace)
        finally:
            logger.clear_line()

    def run(self, lines: Iterable[str]) -> Iterator[str]:
        """Yield one output line per accepted input line."""
        for line_number, line in enumerate(lines, start=1):
            result = self.process_line(line, line_number)
            self.summary.record(result)
            if result.accepted:
                yield result.trace.to_line(self.separator)

    def run_files(
        self,
        input_path: Union[str, Path],
        output_path: Union[str, Path]
    ) -> RunSummary:
        """
        Process an input file and write the traces to an output file.

        Raises:
            OSError: If the input cannot be read or the output written
            UnicodeDecodeError: If the input is not valid UTF-8
        """
        self.summary = RunSummary()
        with open(input_path, "r", encoding="utf-8") as reader, \
                open(output_path, "w", encoding="utf-8") as writer:
            for output_line in self.run(read_command_lines(reader)):
                writer.write(output_line + "\n")

        logger.event("run_completed", **self.summary.to_dict())
        return self.summary
