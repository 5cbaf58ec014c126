from __future__ import annotations

import httpx

from snapai.core.config import settings
from snapai.core.errors import DownloadFailedError
from snapai.core.logging import log

DEFAULT_CONTENT_TYPE = "image/png"


async def fetch_image(url: str, timeout_s: float | None = None) -> tuple[bytes, str]:
    """Fetch the bytes of a generated image.

    Returns:
        Tuple of (content, content_type)

    Raises:
        DownloadFailedError: On a transport error or a non-2xx status
    """
    try:
        async with httpx.AsyncClient(
            timeout=settings.download_timeout_s if timeout_s is None else timeout_s,
            follow_redirects=True,
        ) as client:
            r = await client.get(url)
    except httpx.HTTPError as e:
        log.error(f"IMAGE_FETCH_ERROR error={e!r}")
        raise DownloadFailedError(f"Could not fetch image: {e}") from e

    if not 200 <= r.status_code < 300:
        log.error(f"IMAGE_FETCH_FAILED status={r.status_code}")
        raise DownloadFailedError(f"Image fetch returned status {r.status_code}")

    content_type = r.headers.get("content-type") or DEFAULT_CONTENT_TYPE
    return r.content, content_type
