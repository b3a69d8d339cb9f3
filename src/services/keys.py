"""Storage key and content type helpers.

Keys look like ``<prefix>/<YYYY>/<MM>/<DD>/<uuid4><ext>`` so uploads group by
day when listed, while the UUID keeps concurrent uploads from colliding.
"""

import os
import re
import uuid
from datetime import datetime

DEFAULT_EXT = ".bin"
OCTET_STREAM = "application/octet-stream"

_CONTENT_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".tif": "image/tiff",
    ".tiff": "image/tiff",
}

_SLASH_RUN_RE = re.compile(r"/{2,}")


def safe_posix_join(*parts: str) -> str:
    """Join key segments with ``/``, dropping empty segments and stray slashes."""
    segments = []
    for part in parts:
        segment = (part or "").replace("\\", "/").strip("/")
        if segment:
            segments.append(segment)
    return _SLASH_RUN_RE.sub("/", "/".join(segments))


def content_type_for(path: str) -> str:
    ext = os.path.splitext(path)[1].lower()
    return _CONTENT_TYPES.get(ext, OCTET_STREAM)


def normalize_ext(ext: str | None) -> str:
    ext = (ext or "").lower()
    if not ext:
        return DEFAULT_EXT
    return ext if ext.startswith(".") else f".{ext}"


def build_object_key(prefix: str, ext: str | None, *, now: datetime | None = None) -> str:
    now = now or datetime.now()
    return safe_posix_join(
        prefix,
        f"{now.year:04d}",
        f"{now.month:02d}",
        f"{now.day:02d}",
        f"{uuid.uuid4()}{normalize_ext(ext)}",
    )
