from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class ClusterHealth:
    """Result of a cluster health query"""

    timed_out: bool
    status: Optional[str] = None


@dataclass
class ReindexStart:
    """Result of starting a reindex without waiting for it"""

    timed_out: bool
    task_id: Optional[str] = None


@dataclass
class TaskStatus:
    """State of a background task as reported by the cluster"""

    completed: bool
    error: Optional[Dict[str, Any]] = None


class BlobStore(ABC):
    """Abstract read-only access to the store holding the mapping document"""

    @abstractmethod
    def get(self, bucket: str, key: str) -> bytes:
        """
        Read a whole object

        Args:
            bucket: Bucket holding the object
            key: Object key

        Returns:
            Raw object content

        Raises:
            BlobStoreError: the object cannot be read
        """
        pass


class SearchCluster(ABC):
    """Abstract base class for the search cluster operations used by the controller"""

    @abstractmethod
    def health(self, min_status: str, wait_timeout: str) -> ClusterHealth:
        """
        Block until the cluster reaches min_status or wait_timeout elapses

        Args:
            min_status: Lowest acceptable status (green, yellow)
            wait_timeout: Server-side wait, e.g. "60s"

        Returns:
            ClusterHealth, timed_out is True if the status was not reached
        """
        pass

    @abstractmethod
    def create_index(self, name: str, body: Dict[str, Any], timeout: float, retries: int = 0) -> bool:
        """
        Create an index

        Args:
            name: Full index name
            body: Index definition (settings, mappings, aliases)
            timeout: Request timeout in seconds
            retries: Automatic client retries

        Returns:
            Whether the cluster acknowledged the creation

        Raises:
            IndexCreateError: the cluster rejected the request
        """
        pass

    @abstractmethod
    def delete_index(self, name: str, timeout: float, retries: int = 0) -> int:
        """
        Delete an index

        Returns:
            HTTP status code of the delete call
        """
        pass

    @abstractmethod
    def reindex(self, source: str, dest: str, wait_for_completion: bool = False, refresh: bool = True) -> ReindexStart:
        """
        Copy every document of source into dest

        Args:
            source: Source index name
            dest: Destination index name
            wait_for_completion: Block until the copy is done
            refresh: Refresh dest once the copy is done

        Returns:
            ReindexStart carrying the background task id

        Raises:
            ReindexStartError: the cluster rejected the request
        """
        pass

    @abstractmethod
    def get_task(self, task_id: str) -> TaskStatus:
        """
        Look up a background task

        Raises:
            TaskLookupError: the task is unknown or the lookup failed
        """
        pass
