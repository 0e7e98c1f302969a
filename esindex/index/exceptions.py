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

from typing import Optional


class IndexLifecycleError(Exception):
    """Base class for every failure raised by the index lifecycle controller"""


class InvalidEventError(IndexLifecycleError):
    """The lifecycle event is malformed and must be fixed by the caller"""


class UnknownRequestType(InvalidEventError):
    def __init__(self, request_type):
        self.request_type = request_type
        super().__init__(f"Unknown Request Type: {request_type!r}")


class MappingFetchError(IndexLifecycleError):
    """The mapping document could not be downloaded or parsed"""


class DependencyUnavailable(IndexLifecycleError):
    """The search cluster did not become healthy within the retry budget"""

    def __init__(self, message: str, attempts: int = 0):
        self.attempts = attempts
        super().__init__(message)


class ClusterOperationError(IndexLifecycleError):
    """The search cluster rejected an index operation"""

    def __init__(self, message: str, index_name: str, status_code: Optional[int] = None):
        self.index_name = index_name
        self.status_code = status_code
        super().__init__(message)


class IndexCreateError(ClusterOperationError):
    pass


class IndexDeleteError(ClusterOperationError):
    pass


class ReindexStartError(IndexLifecycleError):
    """The background reindex could not be started"""

    def __init__(self, message: str, source_index: str, dest_index: str):
        self.source_index = source_index
        self.dest_index = dest_index
        super().__init__(message)


class ReindexStartTimeout(ReindexStartError):
    pass


class TaskLookupError(IndexLifecycleError):
    """The background task could not be looked up"""

    def __init__(self, message: str, task_id: Optional[str] = None):
        self.task_id = task_id
        super().__init__(message)


class ReindexTaskFailed(IndexLifecycleError):
    """The background task finished but reported an error"""

    def __init__(self, message: str, task_id: str, error: Optional[dict] = None):
        self.task_id = task_id
        self.error = error
        super().__init__(message)


class BlobStoreError(IndexLifecycleError):
    """Raised by blob store adapters when an object cannot be read"""
