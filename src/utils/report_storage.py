"""
In-process storage for generated reports, keyed by report id.

Entries expire after a TTL. Writes replace a whole record (last write wins)
and eviction works on a snapshot of the keys, so readers never take a lock;
a reader may still see an entry that is about to be evicted.
"""
import asyncio
import logging
import secrets
import string
import time
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from src.utils.data_models import SubmissionMetadata
from workflow.core.answers import AnswerSet
from workflow.core.scoring_models import ScoreResult

logger = logging.getLogger(__name__)

STATUS_READY = "ready"
STATUS_FAILED = "failed"

_BASE36 = string.digits + string.ascii_lowercase


def _base36(number: int) -> str:
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits)) or "0"


def generate_report_id() -> str:
    """Time-ordered id like 'lx3k2p9a-4fj2k9d0q'"""
    timestamp = _base36(int(time.time() * 1000))
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"{timestamp}-{suffix}"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReportRecord(BaseModel):
    """Everything kept for one submission"""
    model_config = ConfigDict(frozen=True)

    report_id: str
    status: str
    score_result: ScoreResult
    answers: AnswerSet
    metadata: Optional[SubmissionMetadata] = None
    narrative: Optional[str] = None
    html_report: Optional[str] = None
    error: Optional[str] = None
    created_at: datetime
    expires_at: Optional[datetime] = None


class ReportStore:
    """Key-value store of ReportRecords with time-based eviction"""

    def __init__(
        self,
        default_ttl: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] = utcnow
    ):
        self.default_ttl = default_ttl
        self._clock = clock
        self._reports: Dict[str, ReportRecord] = {}

    def put(self, report_id: str, record: ReportRecord, ttl: Optional[timedelta] = None) -> ReportRecord:
        expires_at = self._clock() + (ttl if ttl is not None else self.default_ttl)
        stored = record.model_copy(update={"report_id": report_id, "expires_at": expires_at})
        self._reports[report_id] = stored
        logger.info(f"Stored report {report_id} ({stored.status}), expires {expires_at.isoformat()}")
        return stored

    def get(self, report_id: str) -> Optional[ReportRecord]:
        record = self._reports.get(report_id)
        if record is None or self._is_expired(record):
            return None
        return record

    def delete(self, report_id: str) -> bool:
        return self._reports.pop(report_id, None) is not None

    def list(self) -> List[ReportRecord]:
        """Live records, newest first"""
        records = [r for r in list(self._reports.values()) if not self._is_expired(r)]
        return sorted(records, key=lambda r: r.created_at, reverse=True)

    def latest(self, status: str = STATUS_READY) -> Optional[ReportRecord]:
        for record in self.list():
            if record.status == status:
                return record
        return None

    def sweep(self) -> int:
        """Evict expired records, returning how many were removed"""
        removed = 0
        for report_id, record in list(self._reports.items()):
            if self._is_expired(record):
                self._reports.pop(report_id, None)
                removed += 1
        if removed:
            logger.info(f"Evicted {removed} expired reports, {len(self._reports)} remaining")
        return removed

    async def run_sweeper(self, interval_seconds: float) -> None:
        """Sweep forever; cancel the task to stop"""
        logger.info(f"Report sweeper started (every {interval_seconds}s)")
        while True:
            await asyncio.sleep(interval_seconds)
            try:
                self.sweep()
            except Exception as e:
                logger.error(f"Report sweep failed: {e}", exc_info=True)

    def clear(self) -> None:
        self._reports.clear()

    def __len__(self) -> int:
        return len(self._reports)

    def _is_expired(self, record: ReportRecord) -> bool:
        return record.expires_at is not None and record.expires_at <= self._clock()
