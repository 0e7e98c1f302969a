import logging
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from esindex.clients.base import BlobStore
from esindex.index.exceptions import BlobStoreError

logger = logging.getLogger(__name__)


class S3BlobStore(BlobStore):
    """BlobStore reading objects from S3 or an S3-compatible endpoint"""

    def __init__(self, client):
        self._client = client

    @classmethod
    def from_endpoint(cls, endpoint: Optional[str] = None) -> "S3BlobStore":
        # Path-style addressing keeps local S3 mocks and MinIO working
        client = boto3.client(
            "s3",
            endpoint_url=endpoint or None,
            config=Config(s3={"addressing_style": "path"}),
        )
        return cls(client)

    def get(self, bucket: str, key: str) -> bytes:
        logger.debug(f"Reading s3://{bucket}/{key}")
        try:
            response = self._client.get_object(Bucket=bucket, Key=key)
            return response["Body"].read()
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            raise BlobStoreError(f"Failed to read s3://{bucket}/{key}: {code}") from e
        except BotoCoreError as e:
            raise BlobStoreError(f"Failed to read s3://{bucket}/{key}: {e}") from e
