# src/services/response_signaler.py
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import requests

from src.models.deployment import DeploymentOutcome, ProvisioningRequest
from src.models.errors import SignalError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10
LOCAL_LOG_STREAM = "local"


def log_stream_name(context: Any) -> str:
    return getattr(context, "log_stream_name", None) or LOCAL_LOG_STREAM


def build_body(outcome: DeploymentOutcome, request: ProvisioningRequest, log_stream: str) -> Dict[str, Any]:
    return {
        "Status": outcome.status.value,
        "Reason": f"See the details in CloudWatch Log Stream: {log_stream}",
        "PhysicalResourceId": outcome.physical_resource_id or log_stream,
        "StackId": request.stack_id,
        "RequestId": request.request_id,
        "LogicalResourceId": request.logical_resource_id,
        "Data": outcome.data,
    }


class ResponseSignaler:
    """
    Sends the single terminal response for a custom resource request.

    Callers must call signal() once per request. A failed PUT raises
    SignalError, which is the invocation's own failure and not part of the
    response that was being sent.
    """

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = DEFAULT_TIMEOUT):
        self.session = session or requests.Session()
        self.timeout = timeout

    def signal(self, outcome: DeploymentOutcome, request: ProvisioningRequest, context: Any = None) -> Dict[str, Any]:
        body = build_body(outcome, request, log_stream_name(context))
        payload = json.dumps(body)
        logger.info(f"Response body: {payload}")

        if not request.response_url:
            raise SignalError(f"No ResponseURL in request {request.request_id}")

        headers = {"content-type": "", "content-length": str(len(payload.encode("utf-8")))}
        try:
            resp = self.session.put(request.response_url, data=payload, headers=headers, timeout=self.timeout)
            resp.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.error(f"http request error: {e}")
            raise SignalError(f"http request error: {e}") from e

        logger.info("Sent %s response for request %s", body["Status"], request.request_id)
        return body
