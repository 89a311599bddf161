import json
import logging
from typing import Optional

from src.services.cache_invalidator import CloudFrontInvalidator
from src.services.response_signaler import ResponseSignaler
from src.utils.s3_handler import S3Handler
from .aws_clients import s3, cloudfront
from .config import DeploymentConfig
from .orchestrator import DeploymentOrchestrator

logger = logging.getLogger()
logger.setLevel(logging.INFO)

_orchestrator: Optional[DeploymentOrchestrator] = None


def build_orchestrator(config: Optional[DeploymentConfig] = None) -> DeploymentOrchestrator:
    """Wire the orchestrator with real AWS clients and an HTTP session."""
    config = config or DeploymentConfig.from_env()
    return DeploymentOrchestrator(
        config=config,
        store=S3Handler(client=s3()),
        signaler=ResponseSignaler(timeout=config.callback_timeout),
        invalidator=CloudFrontInvalidator(cloudfront()),
    )


def _get_orchestrator() -> DeploymentOrchestrator:
    # built once per warm container
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = build_orchestrator()
    return _orchestrator


def lambda_handler(event, context):
    """
    CloudFormation custom resource entrypoint for the WebsiteDeployment resource.
    Expected event:
    {
        "RequestType": "Create" | "Update" | "Delete",
        "LogicalResourceId": "WebsiteDeployment",
        "ResourceProperties": {"Options": {"SourceBucket": "...", "SourceArtifact": "...",
                                           "DestinationBucket": "..."}},
        "PhysicalResourceId": "Deployment::<bucket>",   # Update/Delete only
        "ResponseURL": "https://...", "StackId": "...", "RequestId": "..."
    }
    Returns the response body that was PUT to ResponseURL. A failed PUT raises
    SignalError so the invocation itself is marked failed.
    """
    logger.info("Received event: %s", json.dumps(event, default=str))
    return _get_orchestrator().handle(event, context)
