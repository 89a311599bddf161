import os, boto3
from botocore.config import Config

def _region() -> str:
    return os.environ.get("AWS_REGION") or os.environ.get("AWS_DEFAULT_REGION") or "us-east-1"

def s3():
    kwargs = {"region_name": _region(), "config": Config(signature_version="s3v4")}
    ep = os.environ.get("AWS_ENDPOINT_URL_S3")
    if ep: kwargs["endpoint_url"] = ep
    return boto3.client("s3", **kwargs)

def cloudfront():
    # CloudFront is a global service homed in us-east-1
    return boto3.client("cloudfront", region_name="us-east-1")
