"""Clipboard image capture.

macOS only. ``pngpaste`` (``brew install pngpaste``) is preferred; the
preinstalled ``pbpaste -Prefer png`` is tried next but is less reliable.
"""

import asyncio
import contextlib
import logging
import os
import sys
import tempfile
import uuid
from pathlib import Path
from typing import AsyncIterator, Protocol

from src.errors import ClipboardReadError, UnsupportedPlatformError

logger = logging.getLogger(__name__)

CLIPBOARD_HELP = "\n".join(
    [
        "Failed to read clipboard image.",
        "- Ensure clipboard currently contains an IMAGE (e.g., take a screenshot, then copy)",
        "- Recommended: brew install pngpaste (more reliable)",
        "- Fallback used: pbpaste -Prefer png (may fail depending on clipboard format)",
    ]
)


class ClipboardCapture(Protocol):
    async def capture_to_temp_png(self) -> Path: ...


async def _run(*cmd: str) -> tuple[int, bytes, bytes]:
    proc = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    out, err = await proc.communicate()
    return proc.returncode, out, err


def _non_empty_file(path: Path) -> bool:
    try:
        return path.stat().st_size > 0
    except OSError:
        return False


class MacClipboard:
    def __init__(self, temp_dir: str | os.PathLike | None = None):
        self.temp_dir = Path(temp_dir or tempfile.gettempdir())

    def _new_temp_path(self) -> Path:
        return self.temp_dir / f"mcp-clipboard-{uuid.uuid4()}.png"

    async def capture_to_temp_png(self) -> Path:
        tmp_path = self._new_temp_path()

        if await self._try_pngpaste(tmp_path):
            return tmp_path
        if await self._try_pbpaste(tmp_path):
            return tmp_path

        tmp_path.unlink(missing_ok=True)
        raise ClipboardReadError(CLIPBOARD_HELP)

    async def _try_pngpaste(self, tmp_path: Path) -> bool:
        try:
            returncode, _, err = await _run("pngpaste", str(tmp_path))
        except OSError as e:
            logger.debug(f"pngpaste unavailable: {e}")
            return False
        if returncode != 0:
            logger.debug(f"pngpaste failed ({returncode}): {err.decode('utf-8', 'ignore').strip()}")
            return False
        return await asyncio.to_thread(_non_empty_file, tmp_path)

    async def _try_pbpaste(self, tmp_path: Path) -> bool:
        try:
            returncode, out, err = await _run("pbpaste", "-Prefer", "png")
        except OSError as e:
            logger.debug(f"pbpaste unavailable: {e}")
            return False
        if returncode != 0 or not out:
            logger.debug(f"pbpaste returned no image ({returncode}): {err.decode('utf-8', 'ignore').strip()}")
            return False
        try:
            await asyncio.to_thread(tmp_path.write_bytes, out)
        except OSError as e:
            logger.warning(f"Failed to write clipboard PNG to {tmp_path}: {e}")
            return False
        return await asyncio.to_thread(_non_empty_file, tmp_path)


class UnsupportedClipboard:
    def __init__(self, platform: str):
        self.platform = platform

    async def capture_to_temp_png(self) -> Path:
        raise UnsupportedPlatformError(
            f"upload_clipboard_image currently supports macOS only (platform: {self.platform})."
        )


def clipboard_for_platform(platform: str = sys.platform) -> ClipboardCapture:
    if platform == "darwin":
        return MacClipboard()
    return UnsupportedClipboard(platform)


@contextlib.asynccontextmanager
async def captured_clipboard_image(capture: ClipboardCapture) -> AsyncIterator[Path]:
    """Yield a temp PNG of the clipboard and remove it on exit, whatever happens."""
    tmp_path = await capture.capture_to_temp_png()
    try:
        yield tmp_path
    finally:
        try:
            await asyncio.to_thread(tmp_path.unlink, missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to remove temp file {tmp_path}: {e}")
