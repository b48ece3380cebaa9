"""
Batch dispatcher for remote delivery

Regular findings go out in concurrent chunks; the summary finding is submitted
on its own once every chunk has come back, successful or not.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Sequence

from botocore.exceptions import BotoCoreError, ClientError

from ..config import UPLOAD_CHUNK_SIZE
from ..mappers.base_mapper import utc_now
from .chunking import ChunkOutcome, DeliveryReport, chunk
from .securityhub import SecurityHubUploader

logger = logging.getLogger(__name__)


class BatchDispatcher:
    """Dispatcher for chunked Security Hub uploads"""

    def __init__(self, uploader: SecurityHubUploader, chunk_size: int = UPLOAD_CHUNK_SIZE,
                 max_workers: int = 4):
        self.uploader = uploader
        self.chunk_size = chunk_size
        self.max_workers = max_workers

    def dispatch(self, findings: Sequence[Dict[str, Any]],
                 summary: Optional[Dict[str, Any]] = None) -> DeliveryReport:
        """Upload findings, then the summary finding"""
        batches = chunk(findings, self.chunk_size)
        logger.info(f"Attempting to upload {len(findings)} findings to Security Hub")

        report = DeliveryReport()
        if batches:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = [
                    executor.submit(self._submit, index, batch)
                    for index, batch in enumerate(batches)
                ]
                report.chunks = [future.result() for future in futures]

        if summary is not None:
            refreshed = dict(summary, UpdatedAt=utc_now())
            report.summary = self._submit(len(batches), [refreshed])
            logger.info(f"Statistics: {refreshed.get('Description', '')}")
            logger.info(
                f"Uploaded results set info finding - Success: {report.summary.succeeded}, "
                f"Fail: {report.summary.failed}"
            )

        return report

    def _submit(self, index: int, batch: List[Dict[str, Any]]) -> ChunkOutcome:
        """Submit one chunk; failures are recorded, never raised"""
        outcome = ChunkOutcome(index=index, submitted=len(batch))
        try:
            response = self.uploader.upload(batch)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to upload chunk {index} ({len(batch)} findings): {e}")
            return self._failed(outcome, e)
        except Exception as e:
            logger.exception(f"Unexpected error uploading chunk {index} ({len(batch)} findings)")
            return self._failed(outcome, e)

        try:
            outcome.succeeded = response.get("SuccessCount", 0)
            outcome.failed = response.get("FailedCount", 0)
            outcome.failed_findings = [
                {
                    "Id": failure.get("Id"),
                    "ErrorCode": failure.get("ErrorCode"),
                    "ErrorMessage": failure.get("ErrorMessage"),
                }
                for failure in response.get("FailedFindings") or []
            ]
        except (AttributeError, TypeError) as e:
            logger.error(f"Unexpected response for chunk {index}: {response!r}")
            return self._failed(outcome, e)
        logger.info(
            f"Uploaded {len(batch)} findings. Success: {outcome.succeeded}, Fail: {outcome.failed}"
        )
        for failure in outcome.failed_findings:
            logger.error(f"  {failure['Id']}: {failure['ErrorCode']} {failure['ErrorMessage']}")
        return outcome

    @staticmethod
    def _failed(outcome: ChunkOutcome, error: Exception) -> ChunkOutcome:
        outcome.succeeded = 0
        outcome.failed = outcome.submitted
        outcome.failed_findings = []
        outcome.error = str(error) or type(error).__name__
        return outcome
