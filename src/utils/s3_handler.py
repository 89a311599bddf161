import boto3
import logging
from typing import List, Optional
from botocore.exceptions import BotoCoreError, ClientError

from src.models.errors import StorageError

logger = logging.getLogger(__name__)


class S3Handler:
    """Object store used by the deployment: reads artifacts, writes and removes site files."""

    def __init__(self, client=None, region_name: str = "us-east-1"):
        self.s3 = client or boto3.client("s3", region_name=region_name)
        logger.info("S3Handler initialized")

    def get_object(self, bucket: str, key: str) -> bytes:
        """Downloads and returns the raw body of s3://bucket/key."""
        try:
            logger.info(f"Downloading object from s3://{bucket}/{key}")
            response = self.s3.get_object(Bucket=bucket, Key=key)
            body = response["Body"].read()
            logger.info(f"Downloaded {len(body)} bytes from s3://{bucket}/{key}")
            return body
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to download s3://{bucket}/{key}: {e}")
            raise StorageError(str(e)) from e

    def put_object(self, bucket: str, key: str, body: bytes, content_type: Optional[str] = None) -> str:
        """Uploads bytes to s3://bucket/key and returns the key."""
        extra = {}
        if content_type:
            extra["ContentType"] = content_type
        try:
            response = self.s3.put_object(
                Bucket=bucket,
                Key=key,
                Body=body,
                ContentLength=len(body),
                **extra,
            )
            status_code = response.get("ResponseMetadata", {}).get("HTTPStatusCode", 0)
            if status_code != 200:
                logger.warning(f"Upload of {key} returned status code {status_code}")
            return key
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to upload {key} to bucket {bucket}: {e}")
            raise StorageError(str(e)) from e

    def list_keys(self, bucket: str) -> List[str]:
        """Lists every key in the bucket, following continuation tokens."""
        keys: List[str] = []
        try:
            paginator = self.s3.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=bucket):
                for obj in page.get("Contents", []) or []:
                    keys.append(obj["Key"])
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to list objects in bucket {bucket}: {e}")
            raise StorageError(str(e)) from e
        logger.info("Listed %d objects in %s", len(keys), bucket)
        return keys

    def delete_object(self, bucket: str, key: str) -> None:
        try:
            self.s3.delete_object(Bucket=bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to delete s3://{bucket}/{key}: {e}")
            raise StorageError(str(e)) from e
