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
from typing import Any, Mapping, Optional, Union

from esindex.clients.base import BlobStore, SearchCluster
from esindex.index.exceptions import IndexDeleteError
from esindex.index.health import HealthChecker
from esindex.index.mapping import MappingFetcher
from esindex.index.models import (
    INDEX_NAME_KEY,
    OLD_INDEX_NAME_KEY,
    TASK_ID_KEY,
    ControllerConfig,
    IndexVersion,
    LifecycleEvent,
    LifecycleResult,
    RequestType,
    index_full_name,
)
from esindex.index.reindexer import Reindexer
from esindex.index.versioner import IndexVersioner

logger = logging.getLogger(__name__)

DELETE_SUCCESS_STATUS = 200


class LifecycleController:
    """
    Create, update or delete a versioned index in response to lifecycle events.

    Each call is independent. Everything a later call needs (new version id,
    index names, reindex task id) is returned in the result and handed back
    by the orchestrator, nothing is kept between calls.

    - Create: build a new version from the mapping document
    - Update: build a new version and start copying the old version into it
    - Delete: drop the version named by the event

    Old versions are never removed eagerly: the version replaced by an
    update stays until a Delete event targets it.
    """

    def __init__(
        self,
        config: ControllerConfig,
        blob_store: BlobStore,
        cluster: SearchCluster,
        mapping_fetcher: Optional[MappingFetcher] = None,
        health_checker: Optional[HealthChecker] = None,
        versioner: Optional[IndexVersioner] = None,
        reindexer: Optional[Reindexer] = None,
    ):
        self.config = config
        self.cluster = cluster
        self.mapping_fetcher = mapping_fetcher or MappingFetcher(blob_store)
        self.health_checker = health_checker or HealthChecker(cluster)
        self.versioner = versioner or IndexVersioner(cluster)
        self.reindexer = reindexer or Reindexer(cluster)

    def handle(self, event: Union[LifecycleEvent, Mapping[str, Any]]) -> LifecycleResult:
        """
        Run one lifecycle event

        Args:
            event: LifecycleEvent or the raw orchestrator payload

        Returns:
            LifecycleResult with the physical id of the live version and output data

        Raises:
            UnknownRequestType: RequestType is not Create, Update or Delete
            InvalidEventError: Update/Delete without PhysicalResourceId
            MappingFetchError, DependencyUnavailable, IndexCreateError,
            IndexDeleteError, ReindexStartError: a dependency failed
        """
        event = LifecycleEvent.parse(event)
        logger.info(f"Received {event.request_type.value} event for {event.physical_resource_id or 'a new index'}")
        config = self.config.with_overrides(event.resource_properties)

        if event.request_type == RequestType.CREATE:
            return self.on_create(event, config)
        if event.request_type == RequestType.UPDATE:
            return self.on_update(event, config)
        return self.on_delete(event, config)

    def _create_version(self, config: ControllerConfig) -> IndexVersion:
        mapping = self.mapping_fetcher.fetch(config.mapping_location)
        logger.info(f"Downloaded mapping from {config.mapping_location.bucket}/{config.mapping_location.key}")

        self.health_checker.wait_for_healthy(config.max_health_retries)
        return self.versioner.create_version(config.index_name_prefix, mapping, timeout=config.request_timeout)

    def on_create(self, event: LifecycleEvent, config: ControllerConfig) -> LifecycleResult:
        version = self._create_version(config)
        return LifecycleResult(
            physical_resource_id=version.version_id,
            data={INDEX_NAME_KEY: version.full_name},
        )

    def on_update(self, event: LifecycleEvent, config: ControllerConfig) -> LifecycleResult:
        old_index_name = index_full_name(config.index_name_prefix, event.physical_resource_id)
        version = self._create_version(config)

        # Not awaited: the orchestrator polls the task through CompletionPoller
        task = self.reindexer.start_reindex(old_index_name, version.full_name)
        return LifecycleResult(
            physical_resource_id=version.version_id,
            data={
                INDEX_NAME_KEY: version.full_name,
                OLD_INDEX_NAME_KEY: task.source_index,
                TASK_ID_KEY: task.task_id,
            },
        )

    def on_delete(self, event: LifecycleEvent, config: ControllerConfig) -> LifecycleResult:
        index_name = index_full_name(config.index_name_prefix, event.physical_resource_id)
        logger.info(f"Deleting older index: {index_name}")

        status_code = self.cluster.delete_index(index_name, timeout=config.request_timeout, retries=0)
        if status_code != DELETE_SUCCESS_STATUS:
            raise IndexDeleteError("Error when deleting the older index.", index_name, status_code)

        logger.info(f"Deleted index {index_name}")
        return LifecycleResult(physical_resource_id=event.physical_resource_id)
