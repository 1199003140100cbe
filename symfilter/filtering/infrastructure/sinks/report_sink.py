import json
from pathlib import Path

from symfilter.config.logger_config import logger
from symfilter.filtering.application.contracts import RunReportRecord
from symfilter.filtering.application.ports import ReportSinkPort


class JsonReportSink(ReportSinkPort):
    def __init__(self, report_path: str) -> None:
        self.report_path = Path(report_path)
        self.report_path.parent.mkdir(parents=True, exist_ok=True)

    def write_report(self, report: RunReportRecord) -> None:
        self.report_path.write_text(
            json.dumps(report.to_dict(), ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
        logger.info("Symbol filter report written: report_path={}", str(self.report_path))
