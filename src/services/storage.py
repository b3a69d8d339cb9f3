import asyncio
import logging
from typing import Protocol

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from src.errors import SigningError, StorageWriteError

logger = logging.getLogger(__name__)


class ObjectStore(Protocol):
    bucket: str
    region: str

    async def put_object(self, key: str, body: bytes, content_type: str) -> None: ...

    async def presign_get(self, key: str, expires_in: int) -> str: ...


class S3ObjectStore:
    """S3 bucket accessed with the ambient boto3 credential chain.

    boto3 is blocking, so each call runs in a worker thread.
    """

    def __init__(self, bucket: str, region: str, client=None):
        self.bucket = bucket
        self.region = region
        self._client = client or boto3.client(
            "s3", region_name=region, config=Config(signature_version="s3v4")
        )

    async def put_object(self, key: str, body: bytes, content_type: str) -> None:
        try:
            await asyncio.to_thread(
                self._client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            raise StorageWriteError(str(e)) from e
        logger.debug(f"PutObject s3://{self.bucket}/{key} ({len(body)} bytes)")

    async def presign_get(self, key: str, expires_in: int) -> str:
        try:
            return await asyncio.to_thread(
                self._client.generate_presigned_url,
                ClientMethod="get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=expires_in,
            )
        except (BotoCoreError, ClientError) as e:
            raise SigningError(str(e)) from e
