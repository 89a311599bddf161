import json
import logging
import os
from typing import Any, Dict

from src.lambdas.site_deployment.config import DeploymentConfig
from src.models.errors import NotificationError
from src.services.notifier import SlackNotifier, build_pipeline_message

logger = logging.getLogger()
logger.setLevel(logging.INFO)

BUILD_PROJECT_PREFIX = os.environ.get("BUILD_PROJECT_PREFIX", "site")


def _ok(body: Dict[str, Any], status=200): return {"statusCode": status, "body": json.dumps(body)}
def _err(msg: str, status=500):            return {"statusCode": status, "body": json.dumps({"error": msg})}


def lambda_handler(event, _context):
    """
    Posts CodePipeline stage changes to the team chat webhook.
    Delivery problems are reported in the return value only; they never
    reach the deployment custom resource.
    """
    logger.info("event: %s", json.dumps(event, default=str))
    if not isinstance(event, dict) or not (event.get("detail") or {}).get("stage"):
        return _err("event must carry detail.stage", 400)

    config = DeploymentConfig.from_env()
    message = build_pipeline_message(event, BUILD_PROJECT_PREFIX)
    try:
        result = SlackNotifier(config.slack_hook_url).push(message)
    except NotificationError as e:
        return _err(str(e), 502)
    return _ok({"delivered": True, "response": result})
