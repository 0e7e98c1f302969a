from .base import BlobStore, ClusterHealth, ReindexStart, SearchCluster, TaskStatus

__all__ = [
    "BlobStore",
    "SearchCluster",
    "ClusterHealth",
    "ReindexStart",
    "TaskStatus",
]
