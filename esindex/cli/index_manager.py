#!/usr/bin/env python3
"""
CLI tool for driving the index lifecycle by hand

Usage:
    python -m esindex.cli.index_manager --help
    python -m esindex.cli.index_manager create
    python -m esindex.cli.index_manager update --physical-id 3f2a...
    python -m esindex.cli.index_manager status --task-id node:1234
    python -m esindex.cli.index_manager delete --physical-id 3f2a...

Connection settings are read from the environment (see esindex.config).
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from esindex.config import setup_logging
from esindex.index.exceptions import IndexLifecycleError
from esindex.index.models import TASK_ID_KEY, RequestType

logger = logging.getLogger(__name__)


def run_event(request_type: RequestType, physical_id: Optional[str] = None, prefix: Optional[str] = None):
    """Send one lifecycle event through the controller and print the response"""
    from esindex.handlers.factory import create_controller

    event = {"RequestType": request_type.value, "ResourceProperties": {}}
    if physical_id:
        event["PhysicalResourceId"] = physical_id
    if prefix:
        event["ResourceProperties"]["IndexNamePrefix"] = prefix

    result = create_controller().handle(event)
    response = result.to_response()
    print(json.dumps(response, indent=2, ensure_ascii=False))
    return response


def check_status(task_id: str):
    """Report whether a reindex task started by an update has finished"""
    from esindex.handlers.factory import create_poller

    complete = create_poller().is_complete({"RequestType": RequestType.UPDATE.value}, {TASK_ID_KEY: task_id})
    print(json.dumps({"IsComplete": complete}, indent=2))
    return complete


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Search Index Lifecycle CLI")
    parser.add_argument('--log-level', help='Override LOG_LEVEL')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    create_parser = subparsers.add_parser('create', help='Create a new index version')
    create_parser.add_argument('--prefix', help='Index name prefix (default: ELASTICSEARCH_INDEX)')

    update_parser = subparsers.add_parser('update', help='Create a new version and reindex the current one into it')
    update_parser.add_argument('--physical-id', required=True, help='Version id of the live index')
    update_parser.add_argument('--prefix', help='Index name prefix (default: ELASTICSEARCH_INDEX)')

    delete_parser = subparsers.add_parser('delete', help='Delete an index version')
    delete_parser.add_argument('--physical-id', required=True, help='Version id to delete')
    delete_parser.add_argument('--prefix', help='Index name prefix (default: ELASTICSEARCH_INDEX)')

    status_parser = subparsers.add_parser('status', help='Check whether a reindex task has finished')
    status_parser.add_argument('--task-id', required=True, help='Task id returned by update')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(args.log_level)

    try:
        if args.command == 'create':
            run_event(RequestType.CREATE, prefix=args.prefix)
        elif args.command == 'update':
            run_event(RequestType.UPDATE, args.physical_id, args.prefix)
        elif args.command == 'delete':
            run_event(RequestType.DELETE, args.physical_id, args.prefix)
        elif args.command == 'status':
            check_status(args.task_id)
    except IndexLifecycleError as e:
        logger.error(f"Command failed: {e}")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
