# src/models/deployment.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from src.models.errors import ValidationError

PHYSICAL_ID_PREFIX = "Deployment"
PHYSICAL_ID_SEPARATOR = "::"


class RequestType(str, Enum):
    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"


class ResponseStatus(str, Enum):
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


# Options bag passed through ResourceProperties.Options
@dataclass(frozen=True)
class DeploymentOptions:
    source_bucket: str = ""       # Options["SourceBucket"]
    source_artifact: str = ""     # Options["SourceArtifact"]
    destination_bucket: str = ""  # Options["DestinationBucket"]

    @classmethod
    def from_properties(cls, options: Optional[Dict[str, Any]]) -> "DeploymentOptions":
        # template-controlled; anything but a mapping counts as no options
        if not isinstance(options, dict):
            options = {}
        return cls(
            source_bucket=str(options.get("SourceBucket") or ""),
            source_artifact=str(options.get("SourceArtifact") or ""),
            destination_bucket=str(options.get("DestinationBucket") or ""),
        )

    def missing(self) -> List[str]:
        """Names of the required options that are absent or empty."""
        required = {
            "SourceBucket": self.source_bucket,
            "SourceArtifact": self.source_artifact,
            "DestinationBucket": self.destination_bucket,
        }
        return [name for name, value in required.items() if not value]


# The triggering custom resource event, read-only once parsed
@dataclass(frozen=True)
class ProvisioningRequest:
    """Fields of a CloudFormation custom resource request that this handler reads."""
    logical_resource_id: str
    request_type: str
    response_url: str = ""
    stack_id: str = ""
    request_id: str = ""
    physical_resource_id: Optional[str] = None
    options: DeploymentOptions = field(default_factory=DeploymentOptions)

    @classmethod
    def from_event(cls, event: Dict[str, Any]) -> "ProvisioningRequest":
        if not isinstance(event, dict):
            event = {}
        request_type = str(event.get("RequestType") or "")
        properties = event.get("ResourceProperties")
        if not isinstance(properties, dict):
            properties = {}
        # Delete ignores whatever options the template still carries
        options = {} if request_type == RequestType.DELETE.value else properties.get("Options")
        return cls(
            logical_resource_id=str(event.get("LogicalResourceId") or ""),
            request_type=request_type,
            response_url=str(event.get("ResponseURL") or ""),
            stack_id=str(event.get("StackId") or ""),
            request_id=str(event.get("RequestId") or ""),
            physical_resource_id=event.get("PhysicalResourceId"),
            options=DeploymentOptions.from_properties(options),
        )


@dataclass(frozen=True)
class ArchiveEntry:
    name: str
    is_dir: bool
    data: bytes = b""


@dataclass(frozen=True)
class PublishTask:
    relative_path: str
    body: bytes
    content_type: str


@dataclass(frozen=True)
class DeploymentOutcome:
    """Terminal result of one provisioning request."""
    status: ResponseStatus
    message: str
    physical_resource_id: Optional[str] = None

    @classmethod
    def succeeded(cls, physical_resource_id: Optional[str], message: str = "OK") -> "DeploymentOutcome":
        return cls(ResponseStatus.SUCCESS, message, physical_resource_id)

    @classmethod
    def failed(cls, message: str, physical_resource_id: Optional[str] = None) -> "DeploymentOutcome":
        return cls(ResponseStatus.FAILED, message, physical_resource_id)

    @property
    def ok(self) -> bool:
        return self.status is ResponseStatus.SUCCESS

    @property
    def data(self) -> Dict[str, Any]:
        return {"message": self.message}


def physical_resource_id_for(destination_bucket: str) -> str:
    return f"{PHYSICAL_ID_PREFIX}{PHYSICAL_ID_SEPARATOR}{destination_bucket}"


def bucket_from_physical_resource_id(resource_id: Optional[str]) -> str:
    """Parse '<prefix>::<bucket>' and return the bucket name."""
    if not resource_id or PHYSICAL_ID_SEPARATOR not in resource_id:
        raise ValidationError(f"Invalid physical resource id: {resource_id}")
    _, bucket = resource_id.split(PHYSICAL_ID_SEPARATOR, 1)
    if not bucket:
        raise ValidationError(f"Invalid physical resource id: {resource_id}")
    return bucket


__all__ = [
    "RequestType",
    "ResponseStatus",
    "DeploymentOptions",
    "ProvisioningRequest",
    "ArchiveEntry",
    "PublishTask",
    "DeploymentOutcome",
    "physical_resource_id_for",
    "bucket_from_physical_resource_id",
]
