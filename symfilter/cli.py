import argparse
import sys
from typing import Sequence, TextIO

from symfilter import __version__
from symfilter.config.logger_config import configure_logging, logger
from symfilter.config.settings import get_settings
from symfilter.filtering.application.contracts import FilterJob
from symfilter.filtering.application.use_cases.filter_symbols import (
    FilterSymbolsCommand,
    FilterSymbolsResult,
    FilterSymbolsUseCase,
)
from symfilter.filtering.application.workflows.symbol_pipeline import SymbolFilterPipeline
from symfilter.filtering.infrastructure.rules.yaml_rule_loader import YamlRuleLoader
from symfilter.filtering.infrastructure.sinks.report_sink import JsonReportSink
from symfilter.filtering.infrastructure.sinks.text_report_sink import TextReportSink
from symfilter.filtering.infrastructure.sources.object_source import LiefObjectSource


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="symfilter",
        description="Decide which symbols of a binary stay exported and which get stripped.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--export",
        metavar="FILE",
        nargs="+",
        action="extend",
        default=[],
        help="export every defined symbol of FILE",
    )
    parser.add_argument(
        "--strip",
        metavar="FILE",
        nargs="+",
        action="extend",
        default=[],
        help="strip every defined symbol of FILE (undefined symbols stay exported)",
    )
    parser.add_argument(
        "--filter",
        metavar=("RULES", "FILE"),
        nargs=2,
        action="append",
        default=[],
        help="apply the YAML rule file RULES to FILE; may be repeated",
    )
    parser.add_argument("--report-json", metavar="PATH", default=None, help="also write a JSON run report to PATH")
    parser.add_argument("--strict", action="store_true", help="exit with status 1 if any file failed")
    parser.add_argument("--no-progress", action="store_true", help="never show a progress bar")
    parser.add_argument("--log-level", default=None, help="loguru level for diagnostics on stderr")
    return parser


def build_jobs(
    export_files: Sequence[str] = (),
    strip_files: Sequence[str] = (),
    filter_pairs: Sequence[Sequence[str]] = (),
) -> tuple[FilterJob, ...]:
    jobs: list[FilterJob] = []
    jobs.extend(FilterJob(mode="export", path=path) for path in export_files)
    jobs.extend(FilterJob(mode="strip", path=path) for path in strip_files)
    jobs.extend(FilterJob(mode="filter", path=path, rule_path=rule_path) for rule_path, path in filter_pairs)
    return tuple(jobs)


def run_symfilter(
    jobs: Sequence[FilterJob],
    stream: TextIO | None = None,
    report_path: str | None = None,
    show_progress: bool = False,
) -> FilterSymbolsResult:
    use_case = FilterSymbolsUseCase(
        pipeline=SymbolFilterPipeline(source=LiefObjectSource()),
        rule_loader=YamlRuleLoader(),
        sink=TextReportSink(stream=stream),
        report_sink=JsonReportSink(report_path) if report_path else None,
    )
    return use_case.execute(FilterSymbolsCommand(jobs=tuple(jobs), show_progress=show_progress))


def main(argv: Sequence[str] | None = None) -> int:
    settings = get_settings()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.log_level:
        configure_logging(args.log_level.upper(), settings.log_dir)

    jobs = build_jobs(args.export, args.strip, args.filter)
    if not jobs:
        parser.error("nothing to do: pass --export, --strip or --filter")

    result = run_symfilter(
        jobs,
        report_path=args.report_json,
        show_progress=settings.show_progress and not args.no_progress,
    )
    if result.has_failures:
        logger.warning("Some files could not be processed: failed={}, total={}", result.failed, len(result.outcomes))
        if args.strict:
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
