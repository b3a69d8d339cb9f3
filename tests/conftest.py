from pathlib import Path

import pytest

from src.config import Settings
from src.errors import ClipboardReadError, SigningError, StorageWriteError
from src.services.uploader import UploadService

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 24


class InMemoryObjectStore:
    def __init__(self, bucket: str = "test-bucket", region: str = "ap-northeast-2"):
        self.bucket = bucket
        self.region = region
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.presigned: list[tuple[str, int]] = []
        self.fail_put: str | None = None
        self.fail_presign: str | None = None

    async def put_object(self, key: str, body: bytes, content_type: str) -> None:
        if self.fail_put:
            raise StorageWriteError(self.fail_put)
        self.objects[key] = (body, content_type)

    async def presign_get(self, key: str, expires_in: int) -> str:
        if self.fail_presign:
            raise SigningError(self.fail_presign)
        self.presigned.append((key, expires_in))
        return (
            f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"
            f"?X-Amz-Expires={expires_in}&X-Amz-Signature=fake"
        )

    @property
    def calls(self) -> int:
        return len(self.objects) + len(self.presigned)


class FakeClipboard:
    def __init__(self, temp_dir: Path, data: bytes | None = PNG_BYTES):
        self.temp_dir = temp_dir
        self.data = data
        self.captured: list[Path] = []

    async def capture_to_temp_png(self) -> Path:
        if self.data is None:
            raise ClipboardReadError("Failed to read clipboard image.")
        path = self.temp_dir / f"mcp-clipboard-{len(self.captured)}.png"
        path.write_bytes(self.data)
        self.captured.append(path)
        return path


@pytest.fixture
def settings():
    return Settings(_env_file=None, s3_bucket="test-bucket", aws_region="ap-northeast-2")


@pytest.fixture
def store():
    return InMemoryObjectStore()


@pytest.fixture
def uploader(store):
    return UploadService(store, default_prefix="codex-v0/", default_expires_in=86400)


@pytest.fixture
def png_file(tmp_path):
    path = tmp_path / "screenshot.png"
    path.write_bytes(PNG_BYTES)
    return path
