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

import logging
from typing import Any, Dict

from elasticsearch import ApiError, ConnectionTimeout, Elasticsearch, NotFoundError, TransportError
from elasticsearch import ConnectionError as ESConnectionError

from esindex.clients.base import ClusterHealth, ReindexStart, SearchCluster, TaskStatus
from esindex.index.exceptions import (
    DependencyUnavailable,
    IndexCreateError,
    IndexDeleteError,
    ReindexStartError,
    TaskLookupError,
)

logger = logging.getLogger(__name__)

# Top-level keys accepted in an index definition
INDEX_BODY_FIELDS = ("aliases", "mappings", "settings")

# The health call blocks server-side, the client must wait longer than that
DEFAULT_HEALTH_REQUEST_TIMEOUT = 90

# Statuses a booting or overloaded cluster answers with, counted as a timed-out attempt
TRANSIENT_HEALTH_STATUSES = (429, 502, 503, 504)


class ElasticsearchCluster(SearchCluster):
    """SearchCluster backed by the official Elasticsearch client"""

    def __init__(self, client: Elasticsearch, health_request_timeout: float = DEFAULT_HEALTH_REQUEST_TIMEOUT):
        self._client = client
        self._health_request_timeout = health_request_timeout

    @classmethod
    def from_endpoint(cls, endpoint: str, **kwargs) -> "ElasticsearchCluster":
        return cls(Elasticsearch(endpoint), **kwargs)

    def health(self, min_status: str, wait_timeout: str) -> ClusterHealth:
        try:
            # 408 is how the cluster says wait_for_status timed out
            response = self._client.options(
                request_timeout=self._health_request_timeout, ignore_status=408
            ).cluster.health(wait_for_status=min_status, timeout=wait_timeout)
        except (ConnectionTimeout, ESConnectionError) as e:
            logger.warning(f"Cluster health request did not complete: {e}")
            return ClusterHealth(timed_out=True)
        except ApiError as e:
            if e.meta.status in TRANSIENT_HEALTH_STATUSES:
                logger.warning(f"Cluster health returned {e.meta.status}: {e.message}")
                return ClusterHealth(timed_out=True)
            raise DependencyUnavailable(f"Cluster health request failed: {e.message}") from e
        except TransportError as e:
            raise DependencyUnavailable(f"Cluster health request failed: {e}") from e

        body = response.body
        return ClusterHealth(timed_out=bool(body.get("timed_out", False)), status=body.get("status"))

    def create_index(self, name: str, body: Dict[str, Any], timeout: float, retries: int = 0) -> bool:
        unknown = sorted(set(body) - set(INDEX_BODY_FIELDS))
        if unknown:
            raise IndexCreateError(f"Unsupported fields in index definition for {name}: {unknown}", name)

        fields = {field: body[field] for field in INDEX_BODY_FIELDS if field in body}
        try:
            response = self._client.options(request_timeout=timeout, max_retries=retries).indices.create(
                index=name, **fields
            )
        except ApiError as e:
            raise IndexCreateError(f"Failed to create index {name}: {e.message}", name, e.meta.status) from e
        except TransportError as e:
            raise IndexCreateError(f"Failed to create index {name}: {e}", name) from e

        return bool(response.body.get("acknowledged", False))

    def delete_index(self, name: str, timeout: float, retries: int = 0) -> int:
        try:
            response = self._client.options(request_timeout=timeout, max_retries=retries).indices.delete(index=name)
        except ApiError as e:
            logger.warning(f"Delete of index {name} returned {e.meta.status}: {e.message}")
            return e.meta.status
        except TransportError as e:
            raise IndexDeleteError(f"Failed to delete index {name}: {e}", name) from e

        return response.meta.status

    def reindex(self, source: str, dest: str, wait_for_completion: bool = False, refresh: bool = True) -> ReindexStart:
        try:
            response = self._client.reindex(
                source={"index": source},
                dest={"index": dest},
                wait_for_completion=wait_for_completion,
                refresh=refresh,
            )
        except ConnectionTimeout as e:
            logger.warning(f"Reindex request {source} -> {dest} timed out: {e}")
            return ReindexStart(timed_out=True)
        except ApiError as e:
            raise ReindexStartError(f"Failed to start reindex {source} -> {dest}: {e.message}", source, dest) from e
        except TransportError as e:
            raise ReindexStartError(f"Failed to start reindex {source} -> {dest}: {e}", source, dest) from e

        body = response.body
        return ReindexStart(timed_out=bool(body.get("timed_out", False)), task_id=body.get("task"))

    def get_task(self, task_id: str) -> TaskStatus:
        try:
            response = self._client.tasks.get(task_id=task_id)
        except NotFoundError as e:
            raise TaskLookupError(f"Unknown task {task_id}", task_id) from e
        except (ApiError, TransportError) as e:
            raise TaskLookupError(f"Failed to look up task {task_id}: {e}", task_id) from e

        body = response.body
        error = body.get("error")
        failures = (body.get("response") or {}).get("failures")
        if error is None and failures:
            error = {"failures": failures}
        return TaskStatus(completed=bool(body.get("completed", False)), error=error)
