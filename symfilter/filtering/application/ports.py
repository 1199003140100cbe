from typing import Any, Protocol, runtime_checkable

from symfilter.filtering.application.contracts import FileOutcome, FilterJob, ParsedImage, RunReportRecord


@runtime_checkable
class ObjectSourcePort(Protocol):
    def parse(self, data: bytes) -> ParsedImage: ...
    """Parse one byte buffer into symbols, archive members or an unsupported marker."""


@runtime_checkable
class RuleLoaderPort(Protocol):
    def load(self, path: str) -> Any: ...
    """Read a rule file and return the parsed (not yet validated) document."""


@runtime_checkable
class OutcomeSinkPort(Protocol):
    def start_file(self, job: FilterJob) -> None: ...

    def write_outcome(self, outcome: FileOutcome) -> None: ...

    def finish(self) -> None: ...


@runtime_checkable
class ReportSinkPort(Protocol):
    def write_report(self, report: RunReportRecord) -> None: ...
    """Persist aggregate run report."""
