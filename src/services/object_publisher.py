# src/services/object_publisher.py
from __future__ import annotations

import logging
import mimetypes
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Iterable, List

from src.models.deployment import PublishTask
from src.models.errors import PublishError

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"
DEFAULT_MAX_WORKERS = 8


def resolve_content_type(path: str) -> str:
    content_type, _ = mimetypes.guess_type(path)
    return content_type or DEFAULT_CONTENT_TYPE


def build_task(relative_path: str, body: bytes) -> PublishTask:
    return PublishTask(relative_path=relative_path, body=body, content_type=resolve_content_type(relative_path))


class ObjectPublisher:
    """
    Uploads a set of independent files to one bucket with a bounded worker pool.

    The fan-out is not a transaction: uploads that finished before a sibling
    failed stay in the bucket.
    """

    def __init__(self, store, max_workers: int = DEFAULT_MAX_WORKERS):
        self.store = store
        self.max_workers = max(1, int(max_workers))

    def _publish_one(self, task: PublishTask, bucket: str) -> str:
        return self.store.put_object(bucket, task.relative_path, task.body, task.content_type)

    def publish_all(self, tasks: Iterable[PublishTask], bucket: str) -> List[str]:
        """
        Upload every task and return the written keys, sorted.
        Raises PublishError naming a failing key as soon as any upload fails;
        queued uploads are cancelled, ones already running are left to finish.
        """
        tasks = list(tasks)
        if not tasks:
            logger.info("Nothing to publish to %s", bucket)
            return []

        workers = min(self.max_workers, len(tasks))
        logger.info("Publishing %d objects to %s with %d workers", len(tasks), bucket, workers)

        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = {pool.submit(self._publish_one, task, bucket): task for task in tasks}
            done, pending = wait(futures, return_when=FIRST_EXCEPTION)
            failed = sorted(
                (f for f in done if f.exception() is not None),
                key=lambda f: futures[f].relative_path,
            )
            if failed:
                for future in pending:
                    future.cancel()
                key = futures[failed[0]].relative_path
                error = failed[0].exception()
                logger.error(f"Upload of {key} to {bucket} failed: {error}")
                raise PublishError(
                    f"Error while uploading {key} to destination bucket: {error}",
                    key=key,
                ) from error

        keys = sorted(f.result() for f in futures)
        logger.info("Published %d objects to %s", len(keys), bucket)
        return keys
