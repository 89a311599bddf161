# src/services/notifier.py
import json
import logging
from enum import Enum
from typing import Any, Dict, Optional

import requests

from src.models.errors import NotificationError

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    STARTED = "STARTED"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    RESUMED = "RESUMED"


def build_log_link(region: str, project: str) -> str:
    return (
        f"https://console.aws.amazon.com/cloudwatch/home?region={region}"
        f"#logEventViewer:group=/aws/codebuild/{project};start=P1D"
    )


def build_pipeline_message(event: Dict[str, Any], project_prefix: str) -> Dict[str, Any]:
    """
    Turn a CodePipeline stage change event into a Slack webhook payload.
    Expected event:
    {
        "region": "us-east-1",
        "detail": {"pipeline": "site-pipeline", "stage": "Build", "state": "FAILED"}
    }
    """
    detail = event.get("detail") or {}
    stage = detail.get("stage", "")
    state = detail.get("state", "")
    pipeline = detail.get("pipeline", "")
    region = event.get("region", "")

    failed = state == PipelineState.FAILED.value
    message = {
        "username": "pipeline-bot",
        "icon_emoji": ":rocket:",
        "attachments": [
            {
                "pretext": f"Pipeline entered *[{stage}]* phase.",
                "title": "Pipeline execution details",
                "title_link": (
                    f"https://{region}.console.aws.amazon.com/codepipeline/home"
                    f"?region={region}#/view/{pipeline}"
                ),
                "color": "danger" if failed else "good",
                "fields": [
                    {"title": "STATUS", "value": state, "short": True},
                    {"title": "STAGE", "value": stage, "short": True},
                ],
            }
        ],
    }

    # failed stages get a shortcut to the build logs
    if failed:
        project = f"{project_prefix}_{stage.lower()}_build"
        log_link = build_log_link(region, project)
        message["attachments"].append({
            "fallback": f"View build logs {log_link}",
            "actions": [{"type": "button", "text": "View build logs", "url": log_link}],
        })
    return message


class SlackNotifier:
    def __init__(self, hook_url: Optional[str], session: Optional[requests.Session] = None, timeout: float = 10):
        self.hook_url = hook_url
        self.session = session or requests.Session()
        self.timeout = timeout

    def push(self, message: Dict[str, Any]) -> str:
        """POST the message to the webhook and return the response text."""
        if not self.hook_url:
            raise NotificationError("SLACK_HOOK_URL is not configured")
        logger.info(json.dumps(message))
        try:
            resp = self.session.post(self.hook_url, json=message, timeout=self.timeout)
            resp.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.error(f"Webhook delivery failed: {e}")
            raise NotificationError(f"Webhook delivery failed: {e}") from e
        return resp.text
