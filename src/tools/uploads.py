import json
from typing import Annotated

from mcp.server.fastmcp import FastMCP
from mcp.types import TextContent
from pydantic import Field

from src.config import MAX_EXPIRES_IN
from src.services.clipboard import ClipboardCapture, captured_clipboard_image
from src.services.uploader import UploadResult, UploadService
from src.tools._error_handler import handle_errors

KeyPrefix = Annotated[
    str | None,
    Field(description="S3 key prefix (default: env S3_PREFIX or codex-v0/)"),
]
ExpiresIn = Annotated[
    Annotated[int, Field(strict=True, gt=0, le=MAX_EXPIRES_IN)] | None,
    Field(description="Presigned URL TTL in seconds (default: env URL_EXPIRES_IN or 86400)"),
]


def _success_response(result: UploadResult) -> list[TextContent]:
    # 1行目は URL のみ（他ツールへそのまま渡せるように）
    return [
        TextContent(type="text", text=result.url),
        TextContent(type="text", text=json.dumps(result.to_dict(), indent=2)),
    ]


def register(mcp: FastMCP, uploader: UploadService, clipboard: ClipboardCapture):
    @mcp.tool(structured_output=False)
    @handle_errors
    async def upload_image(
        path: Annotated[str, Field(description="Local image path (.png/.jpg/.webp/.gif/.svg)")],
        keyPrefix: KeyPrefix = None,
        expiresInSeconds: ExpiresIn = None,
    ) -> list[TextContent]:
        """Upload a local image file to S3 and return a presigned GET URL (useful for v0-mcp imageUrl)."""
        result = await uploader.upload(path, prefix=keyPrefix, expires_in=expiresInSeconds)
        return _success_response(result)

    @mcp.tool(structured_output=False)
    @handle_errors
    async def upload_clipboard_image(
        keyPrefix: KeyPrefix = None,
        expiresInSeconds: ExpiresIn = None,
    ) -> list[TextContent]:
        """Upload the current clipboard image (macOS) to S3 and return a presigned GET URL."""
        async with captured_clipboard_image(clipboard) as tmp_path:
            result = await uploader.upload(
                tmp_path, prefix=keyPrefix, expires_in=expiresInSeconds
            )
        return _success_response(result)
