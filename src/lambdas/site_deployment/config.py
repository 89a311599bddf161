# src/lambdas/site_deployment/config.py
import logging
import os
import tempfile
from dataclasses import dataclass
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_LOGICAL_RESOURCE_ID = "WebsiteDeployment"
DEFAULT_PUBLISH_CONCURRENCY = 8
DEFAULT_CALLBACK_TIMEOUT = 10


def _int_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %d", name, raw, default)
        return default
    return max(1, value)


@dataclass(frozen=True)
class DeploymentConfig:
    distribution_id: Optional[str] = None        # CLOUD_FRONT_DISTRIBUTION_ID
    slack_hook_url: Optional[str] = None         # SLACK_HOOK_URL
    logical_resource_id: str = DEFAULT_LOGICAL_RESOURCE_ID
    scratch_dir: str = tempfile.gettempdir()     # where artifact.zip, package.zip and dist/ live
    publish_concurrency: int = DEFAULT_PUBLISH_CONCURRENCY
    callback_timeout: int = DEFAULT_CALLBACK_TIMEOUT

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "DeploymentConfig":
        env = os.environ if env is None else env
        return cls(
            distribution_id=env.get("CLOUD_FRONT_DISTRIBUTION_ID") or None,
            slack_hook_url=env.get("SLACK_HOOK_URL") or None,
            logical_resource_id=env.get("LOGICAL_RESOURCE_ID") or DEFAULT_LOGICAL_RESOURCE_ID,
            scratch_dir=env.get("SCRATCH_DIR") or tempfile.gettempdir(),
            publish_concurrency=_int_env(env, "PUBLISH_CONCURRENCY", DEFAULT_PUBLISH_CONCURRENCY),
            callback_timeout=_int_env(env, "CALLBACK_TIMEOUT", DEFAULT_CALLBACK_TIMEOUT),
        )
