from dataclasses import dataclass
from datetime import datetime, timezone
from time import perf_counter

from tqdm import tqdm

from symfilter.config.logger_config import logger
from symfilter.filtering.application.contracts import FileOutcome, FilterJob, RunReportRecord
from symfilter.filtering.application.ports import OutcomeSinkPort, ReportSinkPort, RuleLoaderPort
from symfilter.filtering.application.workflows.symbol_pipeline import SymbolFilterPipeline
from symfilter.filtering.domain.errors import RuleError
from symfilter.filtering.domain.policies import DecisionPolicy, ExportAllPolicy, RuleBasedPolicy, StripAllPolicy
from symfilter.filtering.domain.rules import compile_rule_document


@dataclass(frozen=True)
class FilterSymbolsCommand:
    jobs: tuple[FilterJob, ...]
    show_progress: bool = False


@dataclass(frozen=True)
class FilterSymbolsResult:
    outcomes: tuple[FileOutcome, ...]
    succeeded: int
    failed: int
    exported_count: int
    stripped_count: int

    @property
    def has_failures(self) -> bool:
        return self.failed > 0


class FilterSymbolsUseCase:
    def __init__(
        self,
        pipeline: SymbolFilterPipeline,
        rule_loader: RuleLoaderPort,
        sink: OutcomeSinkPort,
        report_sink: ReportSinkPort | None = None,
    ) -> None:
        self.pipeline = pipeline
        self.rule_loader = rule_loader
        self.sink = sink
        self.report_sink = report_sink
        # Blanket policies are stateless and shared across jobs.
        self._export_policy = ExportAllPolicy()
        self._strip_policy = StripAllPolicy()

    def execute(self, command: FilterSymbolsCommand) -> FilterSymbolsResult:
        started = perf_counter()
        logger.info("Symbol filtering started: jobs={}", len(command.jobs))

        outcomes: list[FileOutcome] = []
        try:
            for job in tqdm(
                command.jobs,
                total=len(command.jobs),
                desc="Filtering symbols",
                unit="file",
                leave=False,
                disable=not command.show_progress,
            ):
                self.sink.start_file(job)
                outcome = self._run_job(job)
                self.sink.write_outcome(outcome)
                outcomes.append(outcome)
        finally:
            self.sink.finish()

        succeeded = sum(1 for outcome in outcomes if outcome.ok)
        result = FilterSymbolsResult(
            outcomes=tuple(outcomes),
            succeeded=succeeded,
            failed=len(outcomes) - succeeded,
            exported_count=sum(len(outcome.result.export) for outcome in outcomes),
            stripped_count=sum(len(outcome.result.strip) for outcome in outcomes),
        )
        duration_ms = int((perf_counter() - started) * 1000)
        if self.report_sink is not None:
            self.report_sink.write_report(
                RunReportRecord(
                    total_jobs=len(outcomes),
                    succeeded=result.succeeded,
                    failed=result.failed,
                    exported_count=result.exported_count,
                    stripped_count=result.stripped_count,
                    outcomes=result.outcomes,
                    duration_ms=duration_ms,
                    generated_at=datetime.now(timezone.utc).isoformat(),
                )
            )
        logger.info(
            "Symbol filtering completed: duration_ms={}, succeeded={}, failed={}, exported_count={}, stripped_count={}",
            duration_ms,
            result.succeeded,
            result.failed,
            result.exported_count,
            result.stripped_count,
        )
        return result

    def _run_job(self, job: FilterJob) -> FileOutcome:
        try:
            policy = self._policy_for(job)
        except RuleError as exc:
            logger.error("Rule file rejected, skipping file: rule_path={}, path={}, error={}", job.rule_path, job.path, str(exc))
            return FileOutcome(job=job, status="error", error_kind=exc.kind, error=f"{job.rule_path}: {exc}")
        return self.pipeline.run_file(job, policy)

    def _policy_for(self, job: FilterJob) -> DecisionPolicy:
        if job.mode == "export":
            return self._export_policy
        if job.mode == "strip":
            return self._strip_policy
        if job.mode == "filter":
            if not job.rule_path:
                raise ValueError(f"Filter job requires a rule file: path={job.path}")
            document = self.rule_loader.load(job.rule_path)
            policy = RuleBasedPolicy.from_rules(compile_rule_document(document))
            logger.debug(
                "Rule policy compiled: rule_path={}, export_matching={}, patterns={}",
                job.rule_path,
                policy.export_matching,
                list(policy.matcher.sources),
            )
            return policy
        raise ValueError(f"Unsupported job mode: {job.mode}")
