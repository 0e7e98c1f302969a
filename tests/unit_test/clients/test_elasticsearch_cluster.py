"""
Unit tests for the Elasticsearch-backed SearchCluster.

The Elasticsearch client is mocked; `options()` returns the same mock so
per-request options can be asserted separately from the API call.
"""

from unittest.mock import Mock

import pytest
from elastic_transport import ApiResponseMeta, HttpHeaders, NodeConfig
from elasticsearch import ApiError, ConnectionTimeout, NotFoundError, TransportError
from elasticsearch import ConnectionError as ESConnectionError

from esindex.clients.elasticsearch_cluster import ElasticsearchCluster
from esindex.index.exceptions import (
    DependencyUnavailable,
    IndexCreateError,
    IndexDeleteError,
    ReindexStartError,
    TaskLookupError,
)
from esindex.index.health import HealthChecker


def _meta(status):
    return ApiResponseMeta(
        status=status,
        http_version="1.1",
        headers=HttpHeaders(),
        duration=0.0,
        node=NodeConfig("http", "localhost", 9200),
    )


def _response(body, status=200):
    return Mock(body=body, meta=_meta(status))


@pytest.fixture
def es():
    client = Mock()
    client.options.return_value = client
    return client


@pytest.fixture
def cluster(es):
    return ElasticsearchCluster(es)


class TestHealth:
    def test_healthy(self, es, cluster):
        es.cluster.health.return_value = _response({"timed_out": False, "status": "yellow"})

        health = cluster.health("yellow", "60s")

        assert health.timed_out is False
        assert health.status == "yellow"
        es.cluster.health.assert_called_once_with(wait_for_status="yellow", timeout="60s")
        es.options.assert_called_once_with(request_timeout=90, ignore_status=408)

    def test_timed_out(self, es, cluster):
        es.cluster.health.return_value = _response({"timed_out": True, "status": "red"}, status=408)

        assert cluster.health("yellow", "60s").timed_out is True

    @pytest.mark.parametrize("error", [ConnectionTimeout("timed out"), ESConnectionError("refused")])
    def test_transport_failure_counts_as_timeout(self, es, cluster, error):
        es.cluster.health.side_effect = error

        assert cluster.health("yellow", "60s").timed_out is True

    def test_api_error(self, es, cluster):
        es.cluster.health.side_effect = ApiError("security_exception", meta=_meta(403), body={})

        with pytest.raises(DependencyUnavailable):
            cluster.health("yellow", "60s")

    @pytest.mark.parametrize("status", [429, 502, 503, 504])
    def test_transient_status_counts_as_timeout(self, es, cluster, status):
        es.cluster.health.side_effect = ApiError("master_not_discovered_exception", meta=_meta(status), body={})

        assert cluster.health("yellow", "60s").timed_out is True

    def test_other_transport_error(self, es, cluster):
        es.cluster.health.side_effect = TransportError("unexpected response")

        with pytest.raises(DependencyUnavailable):
            cluster.health("yellow", "60s")

    def test_booting_cluster_uses_whole_retry_budget(self, es, cluster):
        es.cluster.health.side_effect = ApiError("master_not_discovered_exception", meta=_meta(503), body={})

        with pytest.raises(DependencyUnavailable) as exc_info:
            HealthChecker(cluster).wait_for_healthy(5)

        assert exc_info.value.attempts == 5
        assert es.cluster.health.call_count == 5

    def test_recovers_after_transient_status(self, es, cluster):
        es.cluster.health.side_effect = [
            ApiError("master_not_discovered_exception", meta=_meta(503), body={}),
            _response({"timed_out": False, "status": "green"}),
        ]

        HealthChecker(cluster).wait_for_healthy(3)

        assert es.cluster.health.call_count == 2


class TestCreateIndex:
    def test_create_passes_definition_fields(self, es, cluster):
        es.indices.create.return_value = _response({"acknowledged": True})
        body = {"settings": {"number_of_shards": 1}, "mappings": {"properties": {}}}

        assert cluster.create_index("myindex-abc", body, timeout=120.0, retries=0) is True

        es.options.assert_called_once_with(request_timeout=120.0, max_retries=0)
        es.indices.create.assert_called_once_with(
            index="myindex-abc", settings={"number_of_shards": 1}, mappings={"properties": {}}
        )

    def test_empty_definition(self, es, cluster):
        es.indices.create.return_value = _response({"acknowledged": True})

        cluster.create_index("myindex-abc", {}, timeout=120.0)

        es.indices.create.assert_called_once_with(index="myindex-abc")

    def test_unknown_definition_field(self, es, cluster):
        with pytest.raises(IndexCreateError, match="Unsupported fields"):
            cluster.create_index("myindex-abc", {"mapping": {}}, timeout=120.0)

        es.indices.create.assert_not_called()

    def test_rejected(self, es, cluster):
        es.indices.create.side_effect = ApiError("resource_already_exists_exception", meta=_meta(400), body={})

        with pytest.raises(IndexCreateError) as exc_info:
            cluster.create_index("myindex-abc", {}, timeout=120.0)

        assert exc_info.value.status_code == 400
        assert exc_info.value.index_name == "myindex-abc"


class TestDeleteIndex:
    def test_deleted(self, es, cluster):
        es.indices.delete.return_value = _response({"acknowledged": True})

        assert cluster.delete_index("myindex-abc", timeout=120.0) == 200
        es.options.assert_called_once_with(request_timeout=120.0, max_retries=0)
        es.indices.delete.assert_called_once_with(index="myindex-abc")

    def test_not_found_status_returned(self, es, cluster):
        es.indices.delete.side_effect = NotFoundError("index_not_found_exception", meta=_meta(404), body={})

        assert cluster.delete_index("myindex-abc", timeout=120.0) == 404

    def test_unreachable(self, es, cluster):
        es.indices.delete.side_effect = ESConnectionError("refused")

        with pytest.raises(IndexDeleteError):
            cluster.delete_index("myindex-abc", timeout=120.0)


class TestReindex:
    def test_started_in_background(self, es, cluster):
        es.reindex.return_value = _response({"task": "node-1:42"})

        started = cluster.reindex("myindex-old", "myindex-new")

        assert started.timed_out is False
        assert started.task_id == "node-1:42"
        es.reindex.assert_called_once_with(
            source={"index": "myindex-old"},
            dest={"index": "myindex-new"},
            wait_for_completion=False,
            refresh=True,
        )

    def test_start_timeout(self, es, cluster):
        es.reindex.side_effect = ConnectionTimeout("timed out")

        assert cluster.reindex("myindex-old", "myindex-new").timed_out is True

    def test_source_missing(self, es, cluster):
        es.reindex.side_effect = NotFoundError("index_not_found_exception", meta=_meta(404), body={})

        with pytest.raises(ReindexStartError) as exc_info:
            cluster.reindex("myindex-old", "myindex-new")

        assert exc_info.value.source_index == "myindex-old"


class TestGetTask:
    def test_running(self, es, cluster):
        es.tasks.get.return_value = _response({"completed": False, "task": {}})

        status = cluster.get_task("node-1:42")

        assert status.completed is False
        es.tasks.get.assert_called_once_with(task_id="node-1:42")

    def test_completed(self, es, cluster):
        es.tasks.get.return_value = _response({"completed": True, "response": {"failures": []}})

        status = cluster.get_task("node-1:42")

        assert status.completed is True
        assert status.error is None

    def test_completed_with_failures(self, es, cluster):
        failure = {"index": "myindex-new", "cause": {"type": "mapper_parsing_exception"}}
        es.tasks.get.return_value = _response({"completed": True, "response": {"failures": [failure]}})

        assert cluster.get_task("node-1:42").error == {"failures": [failure]}

    def test_unknown_task(self, es, cluster):
        es.tasks.get.side_effect = NotFoundError("resource_not_found_exception", meta=_meta(404), body={})

        with pytest.raises(TaskLookupError) as exc_info:
            cluster.get_task("node-1:42")

        assert exc_info.value.task_id == "node-1:42"
