"""Concurrency control for image generation.

The session's busy flag is the only gate: one generation at a time, no queue,
no lock (everything runs on the event loop).
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Generator

from snapai.core.errors import SessionBusyError

if TYPE_CHECKING:
    from snapai.core.session import ImageSession


@contextmanager
def generation_slot(session: "ImageSession") -> Generator[None, None, None]:
    """Hold the session's busy flag for the duration of one generation.

    Usage:
        with generation_slot(session):
            url = await client.generate(prompt, credential)

    Raises:
        SessionBusyError: If a generation is already in flight
    """
    if session.is_generating:
        raise SessionBusyError("A generation is already in progress")

    session.is_generating = True
    try:
        yield
    finally:
        session.is_generating = False
