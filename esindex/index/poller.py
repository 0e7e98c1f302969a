import logging
from typing import Any, Dict, Mapping, Optional, Union

from esindex.clients.base import SearchCluster
from esindex.index.exceptions import InvalidEventError, ReindexTaskFailed, UnknownRequestType
from esindex.index.models import TASK_ID_KEY, RequestType

logger = logging.getLogger(__name__)


class CompletionPoller:
    """Reports whether the background work started by an event has finished"""

    def __init__(self, cluster: SearchCluster):
        self.cluster = cluster

    def is_complete(self, event: Union[Mapping[str, Any], Any], data: Optional[Mapping[str, Any]] = None) -> bool:
        """
        Check completion of the work started for event

        Only Update starts background work; Create and Delete are complete
        once the lifecycle call returned. False means the task is still
        running, any lookup failure raises instead.

        Args:
            event: LifecycleEvent or raw payload carrying the request type
            data: Output data of the lifecycle call, defaults to the event's Data

        Raises:
            InvalidEventError: an Update without a task id
            TaskLookupError: the task could not be looked up
            ReindexTaskFailed: the task finished with an error
        """
        request_type, event_data = _read_event(event)
        if data is None:
            data = event_data or {}

        if request_type != RequestType.UPDATE.value:
            return True

        task_id = data.get(TASK_ID_KEY)
        if not task_id:
            raise InvalidEventError(f"Update completion check requires Data.{TASK_ID_KEY}")

        status = self.cluster.get_task(task_id)
        if not status.completed:
            logger.info(f"Reindex task {task_id} not completed")
            return False

        if status.error:
            raise ReindexTaskFailed(f"Reindex task {task_id} failed: {status.error}", task_id, status.error)

        logger.info(f"Reindex task {task_id} completed")
        return True


def _read_event(event) -> tuple:
    if isinstance(event, Mapping):
        request_type = event.get("RequestType", event.get("request_type"))
        event_data: Optional[Dict[str, Any]] = event.get("Data", event.get("data"))
    else:
        request_type = getattr(event, "request_type", None)
        event_data = getattr(event, "data", None)

    if isinstance(request_type, RequestType):
        request_type = request_type.value
    if request_type is None:
        raise UnknownRequestType(request_type)
    return request_type, event_data
