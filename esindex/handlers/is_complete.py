"""
Entry point the orchestrator polls after an event until it reports completion.

    handler({"RequestType": "Update", "Data": {"TaskId": "<task>"}, ...}, context)
    -> {"IsComplete": False, "Data": {"TaskId": "<task>"}}
"""

import logging
from typing import Any, Callable, Dict, Optional

from esindex.config import setup_logging
from esindex.index.exceptions import IndexLifecycleError
from esindex.index.poller import CompletionPoller

logger = logging.getLogger(__name__)

IsCompleteHandler = Callable[[Dict[str, Any], Any], Dict[str, Any]]

_handler: Optional[IsCompleteHandler] = None


def create_is_complete_handler(poller: CompletionPoller) -> IsCompleteHandler:
    def is_complete(event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
        logger.info(f"Received event: {event}")
        try:
            complete = poller.is_complete(event)
        except IndexLifecycleError:
            logger.exception(f"Completion check failed for event: {event}")
            raise
        response: Dict[str, Any] = {"IsComplete": complete}
        if event.get("Data") is not None:
            response["Data"] = event["Data"]
        return response

    return is_complete


def handler(event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
    global _handler
    if _handler is None:
        from esindex.handlers.factory import create_poller

        setup_logging()
        _handler = create_is_complete_handler(create_poller())
    return _handler(event, context)
