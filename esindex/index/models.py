# Copyright 2025 ApeCloud, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from esindex.index.exceptions import InvalidEventError, UnknownRequestType

# Keys of the output data returned to the orchestrator
INDEX_NAME_KEY = "IndexName"
OLD_INDEX_NAME_KEY = "OldIndexName"
TASK_ID_KEY = "TaskId"


class RequestType(str, Enum):
    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"


def index_full_name(prefix: str, version_id: str) -> str:
    return f"{prefix}-{version_id}"


class LifecycleEvent(BaseModel):
    """
    Lifecycle event sent by the orchestrator.

    Accepts the orchestrator's PascalCase keys. Extra metadata such as
    RequestId or StackId is kept as-is but never interpreted.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    request_type: RequestType = Field(alias="RequestType")
    physical_resource_id: Optional[str] = Field(default=None, alias="PhysicalResourceId")
    resource_properties: Dict[str, Any] = Field(default_factory=dict, alias="ResourceProperties")
    data: Optional[Dict[str, Any]] = Field(default=None, alias="Data")

    @classmethod
    def parse(cls, raw: Mapping[str, Any]) -> "LifecycleEvent":
        """
        Build an event from a raw orchestrator payload and enforce its invariants

        Raises:
            UnknownRequestType: RequestType is not Create, Update or Delete
            InvalidEventError: the payload is malformed or misses PhysicalResourceId
        """
        if isinstance(raw, cls):
            raw.check()
            return raw
        if not isinstance(raw, Mapping):
            raise InvalidEventError(f"Lifecycle event must be a mapping, got {type(raw).__name__}")

        request_type = raw.get("RequestType", raw.get("request_type"))
        try:
            RequestType(request_type)
        except ValueError:
            raise UnknownRequestType(request_type) from None

        try:
            event = cls.model_validate(dict(raw))
        except ValidationError as e:
            raise InvalidEventError(f"Malformed lifecycle event: {e}") from e
        event.check()
        return event

    def check(self):
        """Update and Delete target an existing version, so they must name it"""
        if self.request_type in (RequestType.UPDATE, RequestType.DELETE) and not self.physical_resource_id:
            raise InvalidEventError("event.PhysicalResourceId is required")


@dataclass(frozen=True)
class IndexVersion:
    """One physical instantiation of the index"""

    prefix: str
    version_id: str

    @property
    def full_name(self) -> str:
        return index_full_name(self.prefix, self.version_id)


@dataclass(frozen=True)
class ReindexTask:
    """Reference to a reindex running in the background on the cluster"""

    task_id: str
    source_index: str
    dest_index: str


@dataclass
class LifecycleResult:
    physical_resource_id: str
    data: Optional[Dict[str, Any]] = None

    def to_response(self) -> Dict[str, Any]:
        response: Dict[str, Any] = {"PhysicalResourceId": self.physical_resource_id}
        if self.data is not None:
            response["Data"] = self.data
        return response


class MappingLocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    bucket: str
    key: str


# ResourceProperties key -> ControllerConfig field
_PROPERTY_OVERRIDES = {
    "IndexNamePrefix": "index_name_prefix",
    "MaxHealthRetries": "max_health_retries",
    "RequestTimeoutMs": "request_timeout_ms",
}


class ControllerConfig(BaseModel):
    """Settings the lifecycle controller needs for one call"""

    model_config = ConfigDict(frozen=True)

    mapping_location: MappingLocation
    index_name_prefix: str = Field(min_length=1)
    max_health_retries: int = 10
    request_timeout_ms: int = Field(default=120 * 1000, gt=0)

    @property
    def request_timeout(self) -> float:
        """Request timeout in seconds, as the search client expects it"""
        return self.request_timeout_ms / 1000

    def with_overrides(self, resource_properties: Optional[Mapping[str, Any]]) -> "ControllerConfig":
        """
        Apply per-resource overrides carried by the event's ResourceProperties.

        Orchestrators stringify property values, so numeric fields are re-validated.
        """
        if not resource_properties:
            return self

        values = self.model_dump()
        for prop, field_name in _PROPERTY_OVERRIDES.items():
            if resource_properties.get(prop) is not None:
                values[field_name] = resource_properties[prop]

        bucket = resource_properties.get("MappingBucket")
        key = resource_properties.get("MappingKey")
        if bucket is not None:
            values["mapping_location"]["bucket"] = bucket
        if key is not None:
            values["mapping_location"]["key"] = key

        try:
            return ControllerConfig.model_validate(values)
        except ValidationError as e:
            raise InvalidEventError(f"Invalid ResourceProperties: {e}") from e
