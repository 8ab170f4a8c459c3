"""
Local submitter that writes reports into an outbox directory.

Useful offline and for dry runs: the files written are exactly what would
have been sent to the endpoint.
"""

import json
import logging
import re
from pathlib import Path
from typing import Union

from ..errors import ReportTransportError
from ..schemas.base import CreateErrorReportInput
from .base import BaseReportSubmitter

logger = logging.getLogger(__name__)

_REPORT_NAME_RE = re.compile(r"^report-(\d+)\.json$")


class LocalReportSubmitter(BaseReportSubmitter):
    """Writes ``report-<n>.json`` and ``report-<n>.zip`` into ``outbox``."""

    def __init__(self, outbox: Union[str, Path]):
        self.outbox = Path(outbox)

    def _next_id(self) -> int:
        ids = [
            int(m.group(1))
            for m in (_REPORT_NAME_RE.match(p.name) for p in self.outbox.iterdir())
            if m
        ]
        return max(ids, default=0) + 1

    def _report_id(self, upload_target: str) -> int:
        match = _REPORT_NAME_RE.match(Path(upload_target).name)
        if not match:
            raise ReportTransportError(f"Not a local report target: {upload_target}")
        return int(match.group(1))

    def open_report(self, data: CreateErrorReportInput) -> str:
        try:
            self.outbox.mkdir(parents=True, exist_ok=True)
            report_path = self.outbox / f"report-{self._next_id()}.json"
            record = {"completed": False, "data": data.to_payload()}
            report_path.write_text(json.dumps(record, indent=2), encoding="utf-8")
        except OSError as e:
            raise ReportTransportError(f"Cannot write report to {self.outbox}: {e}") from e
        logger.debug("Opened local report %s", report_path)
        return str(report_path)

    def upload_archive(self, archive: bytes, upload_target: str) -> None:
        self._report_id(upload_target)
        try:
            Path(upload_target).with_suffix(".zip").write_bytes(archive)
        except OSError as e:
            raise ReportTransportError(f"Cannot write archive: {e}") from e

    def complete_report(self, upload_target: str) -> int:
        report_id = self._report_id(upload_target)
        report_path = Path(upload_target)
        try:
            record = json.loads(report_path.read_text(encoding="utf-8"))
            record["completed"] = True
            report_path.write_text(json.dumps(record, indent=2), encoding="utf-8")
        except (OSError, ValueError) as e:
            raise ReportTransportError(f"Cannot complete report {report_path}: {e}") from e
        return report_id

    @classmethod
    def get_submitter_name(cls) -> str:
        return "local"
