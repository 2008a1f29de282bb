import json
import logging
import os
from typing import Any

import boto3

from common.serialization import to_jsonable

logger = logging.getLogger(__name__)


def get_s3_client():
    """Create S3 client."""
    return boto3.client("s3")


class S3SnapshotStore:
    """Snapshot store uploading each key to `s3://<bucket>/<prefix>/<key>.json`."""

    def __init__(self, bucket: str | None = None, prefix: str = "api", client=None):
        self.bucket = bucket or os.environ["S3_BUCKET_NAME"]
        self.prefix = prefix.strip("/")
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = get_s3_client()
        return self._client

    def key_for(self, key: str) -> str:
        return f"{self.prefix}/{key}.json" if self.prefix else f"{key}.json"

    def put(self, key: str, value: Any) -> None:
        body = json.dumps(to_jsonable(value), ensure_ascii=False, indent=2)
        self.client.put_object(
            Bucket=self.bucket,
            Key=self.key_for(key),
            Body=body.encode("utf-8"),
            ContentType="application/json",
        )
        logger.debug("Uploaded s3://%s/%s", self.bucket, self.key_for(key))
