"""
Entry point invoked by the orchestrator for every lifecycle event.

    handler({"RequestType": "Update", "PhysicalResourceId": "<id>", ...}, context)
    -> {"PhysicalResourceId": "<new id>", "Data": {"IndexName": ..., "OldIndexName": ..., "TaskId": ...}}
"""

import logging
from typing import Any, Callable, Dict, Optional

from esindex.config import setup_logging
from esindex.index.controller import LifecycleController
from esindex.index.exceptions import IndexLifecycleError

logger = logging.getLogger(__name__)

OnEventHandler = Callable[[Dict[str, Any], Any], Dict[str, Any]]

_handler: Optional[OnEventHandler] = None


def create_on_event_handler(controller: LifecycleController) -> OnEventHandler:
    def on_event(event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
        logger.info(f"Received event: {event}")
        try:
            result = controller.handle(event)
        except IndexLifecycleError:
            logger.exception(f"Lifecycle event failed: {event}")
            raise

        response = result.to_response()
        logger.info(f"Responding with {response}")
        return response

    return on_event


def handler(event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
    global _handler
    if _handler is None:
        from esindex.handlers.factory import create_controller

        setup_logging()
        _handler = create_on_event_handler(create_controller())
    return _handler(event, context)
