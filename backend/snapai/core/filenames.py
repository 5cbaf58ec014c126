from __future__ import annotations

import re

from snapai.core.config import settings

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9]")


def download_filename(
    prompt: str,
    prefix: str | None = None,
    max_chars: int | None = None,
) -> str:
    """Derive the download filename for an image from its prompt.

    The prompt is cut to ``max_chars`` characters first, then every character
    that is not an ASCII letter or digit becomes a hyphen (one for one).

    Example:
        >>> download_filename("A cat! @ the/beach")
        'snapai-A-cat----the-beach.png'
    """
    prefix = settings.filename_prefix if prefix is None else prefix
    max_chars = settings.filename_max_chars if max_chars is None else max_chars

    slug = _UNSAFE_CHARS.sub("-", prompt[:max_chars])
    return f"{prefix}-{slug}.png"
