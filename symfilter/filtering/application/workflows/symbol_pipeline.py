from pathlib import Path

from symfilter.config.logger_config import logger
from symfilter.filtering.application.contracts import (
    ArchiveImage,
    FileOutcome,
    FilterJob,
    MemberFailure,
    ProcessedImage,
    SymbolImage,
    UnsupportedImage,
)
from symfilter.filtering.application.ports import ObjectSourcePort
from symfilter.filtering.domain.entities import FilteredResult
from symfilter.filtering.domain.errors import FormatParseError
from symfilter.filtering.domain.partition import partition_symbols
from symfilter.filtering.domain.policies import DecisionPolicy


class SymbolFilterPipeline:
    def __init__(self, source: ObjectSourcePort) -> None:
        self.source = source

    def process(self, data: bytes, policy: DecisionPolicy) -> ProcessedImage:
        """Classify every symbol in ``data``, descending into archive members.

        A parse error of ``data`` itself propagates. A parse error inside an
        archive member drops only that member and is reported as a
        ``MemberFailure``.
        """
        image = self.source.parse(data)

        if isinstance(image, SymbolImage):
            partition = partition_symbols(image.symbols)
            result = policy.classify(partition.candidates).with_forced_export(partition.forced_export)
            logger.debug(
                "Image classified: format={}, forced_export={}, candidates={}, exported={}, stripped={}",
                image.format_name,
                len(partition.forced_export),
                len(partition.candidates),
                len(result.export),
                len(result.strip),
            )
            return ProcessedImage(result=result)

        if isinstance(image, ArchiveImage):
            return self._process_archive(image, policy)

        if isinstance(image, UnsupportedImage):
            logger.warning("Unsupported container skipped: kind={}", image.kind)
            return ProcessedImage(result=FilteredResult.empty())

        raise TypeError(f"Unexpected parsed image: {type(image).__name__}")

    def _process_archive(self, archive: ArchiveImage, policy: DecisionPolicy) -> ProcessedImage:
        results: list[FilteredResult] = []
        failures: list[MemberFailure] = []
        for member in archive.members:
            logger.info("Parsing archive member: {}", member.name)
            try:
                processed = self.process(member.data, policy)
            except FormatParseError as exc:
                logger.warning("Archive member skipped: member={}, error={}", member.name, str(exc))
                failures.append(MemberFailure(member=member.name, error=str(exc)))
                continue
            results.append(processed.result)
            failures.extend(
                MemberFailure(member=f"{member.name}/{failure.member}", error=failure.error)
                for failure in processed.member_failures
            )
        return ProcessedImage(result=FilteredResult.concat(results), member_failures=tuple(failures))

    def run_file(self, job: FilterJob, policy: DecisionPolicy) -> FileOutcome:
        path = Path(job.path)
        try:
            data = path.read_bytes()
        except OSError as exc:
            logger.error("Failed to read input file: path={}, error={}", job.path, str(exc))
            return FileOutcome(job=job, status="error", error_kind="io", error=f"could not read {job.path}: {exc.strerror or exc}")

        try:
            processed = self.process(data, policy)
        except FormatParseError as exc:
            logger.error("Failed to parse input file: path={}, error={}", job.path, str(exc))
            return FileOutcome(job=job, status="error", error_kind=exc.kind, error=str(exc))

        logger.debug(
            "File classified: path={}, policy={}, exported={}, stripped={}, member_failures={}",
            job.path,
            policy.name,
            len(processed.result.export),
            len(processed.result.strip),
            len(processed.member_failures),
        )
        return FileOutcome(
            job=job,
            status="ok",
            result=processed.result,
            member_failures=processed.member_failures,
        )
