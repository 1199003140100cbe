from dataclasses import dataclass, field
from typing import Any, Literal

from symfilter.filtering.domain.entities import FilteredResult, Symbol

JobMode = Literal["export", "strip", "filter"]
OutcomeStatus = Literal["ok", "error"]


@dataclass(frozen=True)
class SymbolImage:
    symbols: tuple[Symbol, ...]
    format_name: str = "object"


@dataclass(frozen=True)
class ArchiveMember:
    name: str
    data: bytes


@dataclass(frozen=True)
class ArchiveImage:
    members: tuple[ArchiveMember, ...]


@dataclass(frozen=True)
class UnsupportedImage:
    kind: str


ParsedImage = SymbolImage | ArchiveImage | UnsupportedImage


@dataclass(frozen=True)
class MemberFailure:
    member: str
    error: str

    def to_dict(self) -> dict[str, Any]:
        return {"member": self.member, "error": self.error}


@dataclass(frozen=True)
class ProcessedImage:
    result: FilteredResult
    member_failures: tuple[MemberFailure, ...] = ()


@dataclass(frozen=True)
class FilterJob:
    mode: JobMode
    path: str
    rule_path: str | None = None


@dataclass(frozen=True)
class FileOutcome:
    job: FilterJob
    status: OutcomeStatus
    result: FilteredResult = field(default_factory=FilteredResult)
    error_kind: str | None = None
    error: str | None = None
    member_failures: tuple[MemberFailure, ...] = ()

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.job.mode,
            "path": self.job.path,
            "rule_path": self.job.rule_path,
            "status": self.status,
            "export_count": len(self.result.export),
            "strip_count": len(self.result.strip),
            "error_kind": self.error_kind,
            "error": self.error,
            "member_failures": [failure.to_dict() for failure in self.member_failures],
        }


@dataclass(frozen=True)
class RunReportRecord:
    total_jobs: int
    succeeded: int
    failed: int
    exported_count: int
    stripped_count: int
    outcomes: tuple[FileOutcome, ...]
    duration_ms: int
    generated_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_jobs": self.total_jobs,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "exported_count": self.exported_count,
            "stripped_count": self.stripped_count,
            "outcomes": [outcome.to_dict() for outcome in self.outcomes],
            "duration_ms": self.duration_ms,
            "generated_at": self.generated_at,
        }
