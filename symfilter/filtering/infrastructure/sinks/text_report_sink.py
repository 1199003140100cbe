import sys
from typing import TextIO

from symfilter.filtering.application.contracts import FileOutcome, FilterJob
from symfilter.filtering.application.ports import OutcomeSinkPort
from symfilter.filtering.domain.entities import FilteredResult


def render_result(result: FilteredResult) -> str:
    lines: list[str] = []
    if result.export:
        lines.append("Exported:")
        lines.extend(f"\t{name}" for name in result.export)
    if result.strip:
        lines.append("Stripped:")
        lines.extend(f"\t{name}" for name in result.strip)
    return "".join(f"{line}\n" for line in lines)


class TextReportSink(OutcomeSinkPort):
    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream if stream is not None else sys.stdout

    def start_file(self, job: FilterJob) -> None:
        if job.rule_path:
            self.stream.write(f"Parsing {job.path} (rules: {job.rule_path})\n")
        else:
            self.stream.write(f"Parsing {job.path}\n")

    def write_outcome(self, outcome: FileOutcome) -> None:
        if not outcome.ok:
            self.stream.write(f"Error: {outcome.error}\n")
            return
        for failure in outcome.member_failures:
            self.stream.write(f"Error: archive member {failure.member}: {failure.error}\n")
        self.stream.write(render_result(outcome.result))

    def finish(self) -> None:
        self.stream.write("Done!\n")
        self.stream.flush()
