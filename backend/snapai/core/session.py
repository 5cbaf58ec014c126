"""Session state and the interaction controller.

One ``InteractionController`` owns one ``ImageSession``. The controller is the
only writer; generation moves the session idle → generating → idle, downloads
run beside it without touching the busy flag.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import partial
from typing import Any, Awaitable, Callable

from snapai.clients.dalle import DalleClient
from snapai.clients.image_fetch import fetch_image
from snapai.core.concurrency import generation_slot
from snapai.core.config import Settings, settings as default_settings
from snapai.core.errors import (
    DownloadFailedError,
    GenerationFailedError,
    InputValidationError,
    SessionBusyError,
)
from snapai.core.filenames import download_filename
from snapai.core.logging import log
from snapai.core.notifications import (
    DOWNLOADED_MESSAGE,
    GENERATED_MESSAGE,
    Notification,
    NotificationFeed,
)

ImageFetcher = Callable[[str], Awaitable[tuple[bytes, str]]]


@dataclass(frozen=True)
class GeneratedImage:
    url: str
    prompt: str
    timestamp: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "prompt": self.prompt,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class DownloadedImage:
    filename: str
    content: bytes
    content_type: str


@dataclass
class ImageSession:
    prompt: str = ""
    credential: str = ""
    is_generating: bool = False
    images: list[GeneratedImage] = field(default_factory=list)


@dataclass(frozen=True)
class GenerationOutcome:
    status: str  # "generated" | "invalid" | "failed" | "busy"
    image: GeneratedImage | None = None
    notification: Notification | None = None


@dataclass(frozen=True)
class DownloadOutcome:
    status: str  # "downloaded" | "failed"
    download: DownloadedImage | None = None
    notification: Notification | None = None


class InteractionController:
    """Drives generation and download for a single session."""

    def __init__(
        self,
        client: DalleClient | None = None,
        fetcher: ImageFetcher | None = None,
        settings: Settings | None = None,
        session: ImageSession | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.settings = settings or default_settings
        self.client = client or DalleClient(
            images_url=self.settings.images_url,
            model=self.settings.image_model,
            size=self.settings.image_size,
            quality=self.settings.image_quality,
            count=self.settings.image_count,
            timeout_s=self.settings.request_timeout_s,
        )
        self.fetcher = fetcher or partial(fetch_image, timeout_s=self.settings.download_timeout_s)
        self.session = session or ImageSession()
        self.notifications = NotificationFeed(ttl_s=self.settings.notification_ttl_s)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def set_prompt(self, prompt: str) -> None:
        if self.session.is_generating:
            raise SessionBusyError("Prompt cannot change while an image is generating")
        self.session.prompt = prompt

    def set_credential(self, credential: str) -> None:
        self.session.credential = credential

    @property
    def can_generate(self) -> bool:
        return (
            not self.session.is_generating
            and bool(self.session.prompt.strip())
            and bool(self.session.credential.strip())
        )

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def _validate(self) -> None:
        if not self.session.prompt.strip():
            raise InputValidationError("prompt")
        if not self.session.credential.strip():
            raise InputValidationError("credential")

    async def generate(self) -> GenerationOutcome:
        """Run one generation for the current prompt.

        A call made while another generation is in flight does nothing.
        On failure the image list and the prompt stay as they were.
        """
        if self.session.is_generating:
            log.info("GENERATION_IGNORED reason=busy")
            return GenerationOutcome(status="busy")

        try:
            self._validate()
        except InputValidationError as e:
            log.info(f"GENERATION_REJECTED field={e.field}")
            return GenerationOutcome(status="invalid", notification=self.notifications.error(e))

        prompt = self.session.prompt
        with generation_slot(self.session):
            try:
                url = await self.client.generate(prompt, self.session.credential)
            except GenerationFailedError as e:
                log.error(f"GENERATION_FAILED kind={e.kind.value} status={e.status_code} detail={e}")
                return GenerationOutcome(status="failed", notification=self.notifications.error(e))

            image = GeneratedImage(url=url, prompt=prompt, timestamp=self._clock())
            self.session.images.insert(0, image)
            self.session.prompt = ""

        log.info(f"GENERATION_SUCCEEDED total_images={len(self.session.images)}")
        return GenerationOutcome(
            status="generated",
            image=image,
            notification=self.notifications.success(GENERATED_MESSAGE),
        )

    # ------------------------------------------------------------------
    # Download
    # ------------------------------------------------------------------

    def get_image(self, index: int) -> GeneratedImage:
        if index < 0:
            raise IndexError(index)
        return self.session.images[index]

    async def download(self, index: int) -> DownloadOutcome:
        """Fetch the bytes of an image from the gallery for saving.

        Raises:
            IndexError: If no image exists at ``index``
        """
        image = self.get_image(index)
        try:
            content, content_type = await self.fetcher(image.url)
        except DownloadFailedError as e:
            log.error(f"DOWNLOAD_FAILED index={index} detail={e}")
            return DownloadOutcome(status="failed", notification=self.notifications.error(e))

        filename = download_filename(
            image.prompt,
            prefix=self.settings.filename_prefix,
            max_chars=self.settings.filename_max_chars,
        )
        log.info(f"DOWNLOAD_READY filename={filename} bytes={len(content)}")
        return DownloadOutcome(
            status="downloaded",
            download=DownloadedImage(filename=filename, content=content, content_type=content_type),
            notification=self.notifications.success(DOWNLOADED_MESSAGE),
        )

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def snapshot(self) -> dict[str, Any]:
        """Current session view. The credential itself is never included."""
        return {
            "prompt": self.session.prompt,
            "has_credential": bool(self.session.credential.strip()),
            "is_generating": self.session.is_generating,
            "can_generate": self.can_generate,
            "images": [image.to_dict() for image in self.session.images],
            "notifications": [n.to_dict() for n in self.notifications.active()],
        }
