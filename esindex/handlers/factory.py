import logging
from typing import Optional

from esindex.clients.elasticsearch_cluster import ElasticsearchCluster
from esindex.clients.s3_store import S3BlobStore
from esindex.config import Settings, settings
from esindex.index.controller import LifecycleController
from esindex.index.health import HealthChecker
from esindex.index.poller import CompletionPoller
from esindex.index.versioner import IndexVersioner

logger = logging.getLogger(__name__)


def create_cluster(config: Optional[Settings] = None) -> ElasticsearchCluster:
    config = config or settings
    return ElasticsearchCluster.from_endpoint(config.elasticsearch_endpoint)


def create_controller(config: Optional[Settings] = None, cluster: Optional[ElasticsearchCluster] = None):
    """Build a LifecycleController talking to the configured S3 endpoint and cluster"""
    config = config or settings
    cluster = cluster or create_cluster(config)
    logger.debug(
        f"Controller for index prefix {config.elasticsearch_index}, "
        f"mapping s3://{config.s3_bucket_name}/{config.s3_object_key}, cluster {config.elasticsearch_endpoint}"
    )
    return LifecycleController(
        config.controller_config(),
        S3BlobStore.from_endpoint(config.s3_endpoint),
        cluster,
        health_checker=HealthChecker(cluster, wait_timeout=config.health_wait_timeout),
        versioner=IndexVersioner(cluster, timeout=config.request_timeout_ms / 1000),
    )


def create_poller(config: Optional[Settings] = None, cluster: Optional[ElasticsearchCluster] = None):
    return CompletionPoller(cluster or create_cluster(config))
