# src/services/cache_invalidator.py
import logging
import time
import uuid
from typing import Sequence

from botocore.exceptions import BotoCoreError, ClientError

from src.models.errors import InvalidationError

logger = logging.getLogger(__name__)

ALL_PATHS = ("/*",)


def _caller_reference() -> str:
    # CloudFront deduplicates batches that reuse a CallerReference
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"


class CloudFrontInvalidator:
    def __init__(self, client):
        self.cloudfront = client

    def invalidate_all(self, distribution_id: str, paths: Sequence[str] = ALL_PATHS) -> str:
        """Submit one invalidation batch for the distribution and return its id."""
        items = list(paths)
        try:
            resp = self.cloudfront.create_invalidation(
                DistributionId=distribution_id,
                InvalidationBatch={
                    "CallerReference": _caller_reference(),
                    "Paths": {"Quantity": len(items), "Items": items},
                },
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"CloudFront invalidation failed for {distribution_id}: {e}")
            raise InvalidationError(f"Error while invalidating distribution {distribution_id}: {e}") from e

        inv_id = resp["Invalidation"]["Id"]
        logger.info("CloudFront invalidation created id=%s distribution=%s paths=%s", inv_id, distribution_id, items)
        return inv_id
