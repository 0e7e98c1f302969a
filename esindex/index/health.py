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

from tenacity import RetryError, Retrying, before_sleep_log, retry_if_exception_type, stop_after_attempt

from esindex.clients.base import SearchCluster
from esindex.index.exceptions import DependencyUnavailable

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 10
MIN_HEALTH_STATUS = "yellow"
HEALTH_WAIT_TIMEOUT = "60s"


class HealthTimeout(Exception):
    """One health query ran out of time before the cluster reached the wanted status"""


class HealthChecker:
    """
    Waits until the search cluster is at least degraded but serving.

    Every attempt is a blocking health query, so no delay is added between
    attempts: the server-side wait already throttles them.
    """

    def __init__(
        self,
        cluster: SearchCluster,
        min_status: str = MIN_HEALTH_STATUS,
        wait_timeout: str = HEALTH_WAIT_TIMEOUT,
    ):
        self.cluster = cluster
        self.min_status = min_status
        self.wait_timeout = wait_timeout

    def _probe(self):
        health = self.cluster.health(self.min_status, self.wait_timeout)
        if health.timed_out:
            raise HealthTimeout(f"cluster did not reach {self.min_status} within {self.wait_timeout}")
        logger.debug(f"Cluster health is {health.status or self.min_status}")

    def wait_for_healthy(self, max_retries: int = DEFAULT_MAX_RETRIES):
        """
        Block until the cluster is healthy

        Args:
            max_retries: Number of health queries allowed, 0 fails without querying

        Raises:
            DependencyUnavailable: the cluster was not healthy after max_retries queries
        """
        if max_retries <= 0:
            raise DependencyUnavailable("Cluster health retry budget is empty", attempts=0)

        retrying = Retrying(
            stop=stop_after_attempt(max_retries),
            retry=retry_if_exception_type(HealthTimeout),
            before_sleep=before_sleep_log(logger, logging.WARNING),
        )
        try:
            retrying(self._probe)
        except RetryError as e:
            raise DependencyUnavailable(
                f"Cluster did not reach {self.min_status} after {max_retries} attempts",
                attempts=max_retries,
            ) from e.last_attempt.exception()
