import json
import logging
from typing import Any, Dict

from esindex.clients.base import BlobStore
from esindex.index.exceptions import BlobStoreError, MappingFetchError
from esindex.index.models import MappingLocation

logger = logging.getLogger(__name__)


class MappingFetcher:
    """Downloads the desired index definition from the blob store"""

    def __init__(self, blob_store: BlobStore):
        self.blob_store = blob_store

    def fetch(self, location: MappingLocation) -> Dict[str, Any]:
        try:
            raw = self.blob_store.get(location.bucket, location.key)
        except BlobStoreError as e:
            raise MappingFetchError(str(e)) from e

        try:
            mapping = json.loads(raw.decode("utf-8"))
        except ValueError as e:
            raise MappingFetchError(f"Mapping {location.bucket}/{location.key} is not valid UTF-8 JSON: {e}") from e

        if not isinstance(mapping, dict):
            raise MappingFetchError(
                f"Mapping {location.bucket}/{location.key} must be a JSON object, got {type(mapping).__name__}"
            )

        logger.debug(f"Downloaded mapping from {location.bucket}/{location.key}: {mapping}")
        return mapping
