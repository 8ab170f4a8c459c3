"""
GraphQL submitter for the hosted error report service.
"""

import json
import logging
from typing import Any, Dict, Optional

import httpx

from ..config import DEFAULT_ENDPOINT, DEFAULT_TIMEOUT
from ..errors import ReportTransportError
from ..schemas.base import CreateErrorReportInput
from .base import BaseReportSubmitter

logger = logging.getLogger(__name__)

CREATE_REPORT_MUTATION = """mutation ($data: CreateErrorReportInput!) {
  createErrorReport(data: $data)
}"""

COMPLETE_REPORT_MUTATION = """mutation ($signedUrl: String!) {
  markErrorReportCompleted(signedUrl: $signedUrl)
}"""


class GraphQLReportSubmitter(BaseReportSubmitter):
    """Submits reports to a GraphQL endpoint and uploads archives to signed URLs.

    Proxy settings (``HTTPS_PROXY`` etc.) are taken from the environment.
    """

    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.Client] = None,
    ):
        self.endpoint = endpoint
        self.timeout = timeout
        self._owns_client = client is None
        self.client = client or httpx.Client(timeout=timeout, trust_env=True)

    def request(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        """
        Run a GraphQL operation and return its ``data``.

        Raises:
            ReportTransportError: On HTTP failures or GraphQL ``errors``
        """
        try:
            response = self.client.post(
                self.endpoint,
                json={"query": query, "variables": variables},
                headers={"Accept": "application/json"},
            )
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            raise ReportTransportError(
                f"Report endpoint returned {e.response.status_code}",
                status=e.response.status_code,
                payload=e.response.text or None,
            ) from e
        except httpx.HTTPError as e:
            raise ReportTransportError(f"Cannot reach report endpoint: {e}") from e
        except ValueError as e:
            raise ReportTransportError("Report endpoint returned invalid JSON") from e

        if not isinstance(body, dict):
            raise ReportTransportError("Unexpected response from report endpoint", payload=body)
        if body.get("errors"):
            raise ReportTransportError(json.dumps(body["errors"]), payload=body["errors"])
        return body.get("data") or {}

    def open_report(self, data: CreateErrorReportInput) -> str:
        result = self.request(CREATE_REPORT_MUTATION, {"data": data.to_payload()})
        signed_url = result.get("createErrorReport")
        if not signed_url:
            raise ReportTransportError("Report endpoint returned no upload URL", payload=result)
        logger.debug("Opened error report")
        return signed_url

    def upload_archive(self, archive: bytes, upload_target: str) -> None:
        try:
            response = self.client.put(
                upload_target,
                content=archive,
                headers={"Content-Length": str(len(archive))},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ReportTransportError(
                f"Archive upload returned {e.response.status_code}",
                status=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise ReportTransportError(f"Archive upload failed: {e}") from e
        logger.debug("Uploaded archive (%d bytes)", len(archive))

    def complete_report(self, upload_target: str) -> int:
        result = self.request(COMPLETE_REPORT_MUTATION, {"signedUrl": upload_target})
        report_id = result.get("markErrorReportCompleted")
        try:
            return int(report_id)
        except (TypeError, ValueError) as e:
            raise ReportTransportError(
                "Report endpoint returned no report id", payload=result
            ) from e

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    @classmethod
    def get_submitter_name(cls) -> str:
        return "graphql"
