# src/lambdas/site_deployment/orchestrator.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from src.models.deployment import (
    DeploymentOptions,
    DeploymentOutcome,
    ProvisioningRequest,
    RequestType,
    bucket_from_physical_resource_id,
    physical_resource_id_for,
)
from src.models.errors import (
    CleanupError,
    DeploymentError,
    ExtractionError,
    FetchError,
    InvalidationError,
    StorageError,
    ValidationError,
)
from src.services.archive_extractor import ArchiveExtractor, reset_directory
from src.services.object_publisher import ObjectPublisher, build_task
from src.services.response_signaler import ResponseSignaler
from .config import DeploymentConfig

logger = logging.getLogger(__name__)

PACKAGE_ENTRY = "package.zip"
ARTIFACT_FILE = "artifact.zip"
DEPLOYMENT_DIR = "dist"


class DeploymentOrchestrator:
    """
    Drives one custom resource request from event to callback.

    Create/Update: fetch the artifact, pull package.zip out of it, unpack the
    package into a clean scratch dir, publish every file to the destination
    bucket, then optionally invalidate CloudFront.
    Delete: empty the bucket named in the physical resource id.

    Every call to handle() ends with exactly one ResponseSignaler.signal().
    """

    def __init__(
        self,
        config: DeploymentConfig,
        store,
        signaler: ResponseSignaler,
        invalidator=None,
        extractor: Optional[ArchiveExtractor] = None,
        publisher: Optional[ObjectPublisher] = None,
    ) -> None:
        self.config = config
        self.store = store
        self.signaler = signaler
        self.invalidator = invalidator
        self.extractor = extractor or ArchiveExtractor()
        self.publisher = publisher or ObjectPublisher(store, max_workers=config.publish_concurrency)

    def handle(self, request: Union[ProvisioningRequest, Dict[str, Any]], context: Any = None) -> Dict[str, Any]:
        if not isinstance(request, ProvisioningRequest):
            request = ProvisioningRequest.from_event(request)
        outcome = self.run(request)
        return self.signaler.signal(outcome, request, context)

    def run(self, request: ProvisioningRequest) -> DeploymentOutcome:
        """Compute the single outcome for a request. Never raises."""
        logger.info(
            "Handling %s for %s (request %s)",
            request.request_type, request.logical_resource_id, request.request_id,
        )
        try:
            if request.logical_resource_id != self.config.logical_resource_id:
                raise ValidationError(f"Invalid LogicalResourceId: {request.logical_resource_id}")

            if request.request_type in (RequestType.CREATE.value, RequestType.UPDATE.value):
                resource_id = self.upload_artifacts(request.options)
            elif request.request_type == RequestType.DELETE.value:
                resource_id = self.clean_bucket(request.physical_resource_id)
            else:
                raise ValidationError(f"Invalid request type {request.request_type}")
        except DeploymentError as e:
            logger.error(f"{request.request_type} failed: {e}")
            return DeploymentOutcome.failed(str(e))
        except Exception as e:
            logger.exception("Unexpected error while handling %s", request.request_type)
            return DeploymentOutcome.failed(f"Unexpected error: {type(e).__name__}: {e}")

        logger.info("%s succeeded for %s", request.request_type, resource_id)
        return DeploymentOutcome.succeeded(resource_id)

    # ------------------------------------------------------------------
    # Create / Update
    # ------------------------------------------------------------------

    def upload_artifacts(self, options: DeploymentOptions) -> str:
        missing = options.missing()
        if missing:
            logger.warning("Missing options: %s", ", ".join(missing))
            raise ValidationError("Missing required options: SourceBucket, SourceArtifact, DestinationBucket")
        if self.config.distribution_id and self.invalidator is None:
            raise InvalidationError(
                f"No invalidator configured for distribution {self.config.distribution_id}"
            )

        scratch = Path(self.config.scratch_dir)
        artifact_path = self._download_artifact(options.source_bucket, options.source_artifact, scratch)

        logger.info("Looking for %s in %s", PACKAGE_ENTRY, options.source_artifact)
        if not self.extractor.find_entry(artifact_path, PACKAGE_ENTRY):
            raise ExtractionError(f"{PACKAGE_ENTRY} not found in artifact")
        logger.info(f"Found {PACKAGE_ENTRY} file")
        package_path = self.extractor.extract(artifact_path, PACKAGE_ENTRY, scratch)

        deployment_dir = reset_directory(scratch / DEPLOYMENT_DIR)
        entries = self.extractor.extract_all(package_path, deployment_dir)
        tasks = [build_task(entry.name, entry.data) for entry in entries]

        keys = self.publisher.publish_all(tasks, options.destination_bucket)
        logger.info("Uploaded %d files to %s", len(keys), options.destination_bucket)

        if self.config.distribution_id:
            self.invalidator.invalidate_all(self.config.distribution_id)

        return physical_resource_id_for(options.destination_bucket)

    def _download_artifact(self, bucket: str, key: str, scratch: Path) -> Path:
        try:
            body = self.store.get_object(bucket, key)
        except StorageError as e:
            raise FetchError(f"Could not fetch artifact: {bucket}/{key}: {e}") from e

        path = scratch / ARTIFACT_FILE
        try:
            scratch.mkdir(parents=True, exist_ok=True)
            path.write_bytes(body)
        except OSError as e:
            raise FetchError(f"Could not save artifact to disk: {e}") from e
        return path

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def clean_bucket(self, resource_id: Optional[str]) -> str:
        bucket = bucket_from_physical_resource_id(resource_id)

        try:
            keys = self.store.list_keys(bucket)
        except StorageError as e:
            raise CleanupError(f"Could not list bucket objects: {e}") from e

        # best effort: one bad key does not stop the rest
        failures: List[str] = []
        for key in keys:
            try:
                self.store.delete_object(bucket, key)
            except StorageError as e:
                logger.error(f"Could not delete object: {key}: {e}")
                failures.append(key)

        if failures:
            logger.warning("%d of %d objects in %s could not be deleted", len(failures), len(keys), bucket)
        else:
            logger.info("Deleted %d objects from %s", len(keys), bucket)
        return resource_id
