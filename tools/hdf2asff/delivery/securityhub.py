"""
AWS Security Hub client wrapper
"""

import logging
from typing import Any, Dict, Optional, Sequence

import boto3

logger = logging.getLogger(__name__)


class SecurityHubUploader:
    """Submits batches of findings through BatchImportFindings

    Without explicit keys the default boto3 credential chain is used
    (environment, shared config, instance role).
    """

    def __init__(self, region: str, access_key_id: Optional[str] = None,
                 secret_access_key: Optional[str] = None,
                 session_token: Optional[str] = None, client: Any = None):
        self.region = region
        if client is None:
            session = boto3.session.Session(
                aws_access_key_id=access_key_id,
                aws_secret_access_key=secret_access_key,
                aws_session_token=session_token,
                region_name=region,
            )
            client = session.client("securityhub")
        self.client = client

    def upload(self, findings: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
        """Import one batch; returns the raw BatchImportFindings response"""
        logger.debug(f"Submitting {len(findings)} findings to Security Hub in {self.region}")
        return self.client.batch_import_findings(Findings=list(findings))
