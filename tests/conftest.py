import pytest

from esindex.index.controller import LifecycleController
from esindex.index.models import ControllerConfig, MappingLocation
from esindex.index.poller import CompletionPoller
from tests.unit_test.fakes import FakeSearchCluster, InMemoryBlobStore

BUCKET = "bucket"
KEY = "key"
PREFIX = "myindex"


@pytest.fixture
def controller_config():
    return ControllerConfig(
        mapping_location=MappingLocation(bucket=BUCKET, key=KEY),
        index_name_prefix=PREFIX,
        max_health_retries=3,
    )


@pytest.fixture
def blob_store():
    return InMemoryBlobStore({(BUCKET, KEY): b"{}"})


@pytest.fixture
def cluster():
    return FakeSearchCluster()


@pytest.fixture
def controller(controller_config, blob_store, cluster):
    return LifecycleController(controller_config, blob_store, cluster)


@pytest.fixture
def poller(cluster):
    return CompletionPoller(cluster)
