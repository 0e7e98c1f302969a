import logging
import secrets
from typing import Any, Dict, Optional

from esindex.clients.base import SearchCluster
from esindex.index.exceptions import IndexCreateError
from esindex.index.models import IndexVersion

logger = logging.getLogger(__name__)

CREATE_INDEX_TIMEOUT = 120.0


def new_version_id() -> str:
    """128 random bits, lowercase hex"""
    return secrets.token_hex(16)


class IndexVersioner:
    """Creates a new, uniquely named version of the index on every call"""

    def __init__(self, cluster: SearchCluster, timeout: float = CREATE_INDEX_TIMEOUT):
        self.cluster = cluster
        self.timeout = timeout

    def create_version(self, prefix: str, mapping: Dict[str, Any], timeout: Optional[float] = None) -> IndexVersion:
        version = IndexVersion(prefix=prefix, version_id=new_version_id())
        logger.info(f"Attempting to create index {version.full_name}")

        # Exactly one attempt, the client must not retry a create
        acknowledged = self.cluster.create_index(
            version.full_name, mapping, timeout=timeout or self.timeout, retries=0
        )
        if not acknowledged:
            raise IndexCreateError(f"Creation of index {version.full_name} was not acknowledged", version.full_name)

        logger.info(f"Created index {version.full_name}")
        return version
