import asyncio
import logging
import os
import stat
from dataclasses import dataclass

from src.errors import (
    NotAFileError,
    NotFoundOrUnreadableError,
    ReadError,
    UnsupportedTypeError,
)
from src.services.keys import build_object_key, content_type_for
from src.services.storage import ObjectStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadResult:
    url: str
    bucket: str
    key: str
    content_type: str
    size: int
    region: str

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "bucket": self.bucket,
            "key": self.key,
            "contentType": self.content_type,
            "size": self.size,
            "region": self.region,
        }


class UploadService:
    """Upload a local image and mint a presigned GET URL for it.

    No step is retried. If signing fails after the upload succeeded, the
    object stays in the bucket.
    """

    def __init__(self, store: ObjectStore, default_prefix: str, default_expires_in: int):
        self.store = store
        self.default_prefix = default_prefix
        self.default_expires_in = default_expires_in

    async def upload(
        self,
        path: str | os.PathLike,
        prefix: str | None = None,
        expires_in: int | None = None,
    ) -> UploadResult:
        abs_path = os.path.abspath(path)
        try:
            st = await asyncio.to_thread(os.stat, abs_path)
        except (OSError, ValueError) as e:
            # ValueError: NUL バイトを含むパス
            raise NotFoundOrUnreadableError(
                f"File not found or unreadable: {abs_path} ({getattr(e, 'strerror', None) or e})"
            ) from e
        if not stat.S_ISREG(st.st_mode):
            raise NotAFileError(f"Not a file: {abs_path}")

        content_type = content_type_for(abs_path)
        if not content_type.startswith("image/"):
            raise UnsupportedTypeError(f"Not an image (by extension): {abs_path}")

        if prefix is None:
            prefix = self.default_prefix
        ext = os.path.splitext(abs_path)[1]
        key = build_object_key(prefix.lstrip("/"), ext)

        try:
            body = await asyncio.to_thread(_read_bytes, abs_path)
        except OSError as e:
            raise ReadError(f"Failed to read {abs_path}: {e.strerror or e}") from e

        await self.store.put_object(key, body, content_type)
        url = await self.store.presign_get(
            key, expires_in if expires_in is not None else self.default_expires_in
        )

        logger.info(f"Uploaded {abs_path} to s3://{self.store.bucket}/{key} ({st.st_size} bytes)")
        return UploadResult(
            url=url,
            bucket=self.store.bucket,
            key=key,
            content_type=content_type,
            size=st.st_size,
            region=self.store.region,
        )


def _read_bytes(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()
