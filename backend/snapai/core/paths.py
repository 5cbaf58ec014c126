from __future__ import annotations

from pathlib import Path

from snapai.core.config import settings


def get_data_path(filename: str = "") -> Path:
    """Get path to file in the configured data directory.

    Args:
        filename: Optional filename to append to data directory path

    Returns:
        Path object pointing to the data directory or a file inside it
    """
    data_dir = Path(settings.data_dir)
    if filename:
        return data_dir / filename
    return data_dir
