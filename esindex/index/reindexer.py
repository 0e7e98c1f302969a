import logging

from esindex.clients.base import SearchCluster
from esindex.index.exceptions import ReindexStartError, ReindexStartTimeout
from esindex.index.models import ReindexTask

logger = logging.getLogger(__name__)


class Reindexer:
    """Starts background copies between index versions"""

    def __init__(self, cluster: SearchCluster):
        self.cluster = cluster

    def start_reindex(self, source_index: str, dest_index: str) -> ReindexTask:
        """
        Start copying source_index into dest_index without waiting for the copy.

        dest_index is refreshed by the cluster once the copy finishes so it is
        immediately searchable.

        Raises:
            ReindexStartTimeout: the start request itself timed out
            ReindexStartError: the cluster did not return a task to poll
        """
        logger.info(f"Starting reindex {source_index} -> {dest_index}")
        started = self.cluster.reindex(source_index, dest_index, wait_for_completion=False, refresh=True)

        if started.timed_out:
            raise ReindexStartTimeout(
                f"Reindex request {source_index} -> {dest_index} timed out", source_index, dest_index
            )
        if not started.task_id:
            raise ReindexStartError(
                f"Reindex {source_index} -> {dest_index} returned no task id", source_index, dest_index
            )

        logger.info(f"Reindex {source_index} -> {dest_index} running as task {started.task_id}")
        return ReindexTask(task_id=started.task_id, source_index=source_index, dest_index=dest_index)
