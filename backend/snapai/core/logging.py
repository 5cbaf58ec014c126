from __future__ import annotations

import logging
from pathlib import Path

from snapai.core.config import settings
from snapai.core.paths import get_data_path

# Oversized log files are cut back to their newest KEEP_LOG_LINES at startup
KEEP_LOG_LINES = 10000
MAX_LOG_LINES = 15000

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

log = logging.getLogger("snapai")


def trim_log_file(log_path: Path, keep: int = KEEP_LOG_LINES, limit: int = MAX_LOG_LINES) -> bool:
    """Keep only the newest ``keep`` lines once the file exceeds ``limit``.

    Returns:
        True if the file was rewritten
    """
    if not log_path.exists():
        return False

    lines = log_path.read_text(encoding="utf-8").splitlines(keepends=True)
    if len(lines) <= limit:
        return False

    tmp_path = log_path.with_name(log_path.name + ".tmp")
    tmp_path.write_text("".join(lines[-keep:]), encoding="utf-8")
    tmp_path.replace(log_path)
    return True


def configure_logging(level: int = logging.INFO) -> None:
    """Send application logs to the data directory log file.

    Safe to call more than once; only the first call installs a handler.
    """
    get_data_path().mkdir(parents=True, exist_ok=True)
    log_path = get_data_path(settings.log_file)
    trimmed = trim_log_file(log_path)

    logging.basicConfig(
        filename=str(log_path),
        level=level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    if trimmed:
        log.info(f"LOG_TRIMMED path={log_path} kept={KEEP_LOG_LINES}")
