"""Progressive disclosure of the target dish photo.

While a game is running only a pixelated rendition leaves the server. The
coarse resolution grows with the attempt count read from the verified
session; the original bytes are released once the game is over.
"""

import io
import logging
import math
from dataclasses import dataclass
from enum import StrEnum

from PIL import Image, ImageOps

from almadle.domain.game import MAX_ATTEMPTS, GameSession

logger = logging.getLogger(__name__)

FRAME_SIZE = (350, 250)
COARSE_WIDTHS = (8, 10, 13, 18, 29, 70)
PIXELATED_MEDIA_TYPE = "image/png"


class DisclosureMode(StrEnum):
    """What kind of image a response carries."""

    PIXELATED = "pixelated"
    ORIGINAL = "original"


class RenderError(Exception):
    """Raised when the secret image cannot be decoded or resampled."""


@dataclass(frozen=True)
class DisclosureLevel:
    """Coarse grid used for one attempt tier."""

    tier: int
    coarse_width: int
    coarse_height: int
    pixel_factor: int

    @property
    def coarse_size(self) -> tuple[int, int]:
        return (self.coarse_width, self.coarse_height)


@dataclass(frozen=True)
class DisclosedImage:
    """Image bytes ready to send, plus how they were produced."""

    content: bytes
    media_type: str
    mode: DisclosureMode
    level: DisclosureLevel | None = None


def disclosure_level(
    attempts: int,
    frame_size: tuple[int, int] = FRAME_SIZE,
    coarse_widths: tuple[int, ...] = COARSE_WIDTHS,
) -> DisclosureLevel:
    """Map an attempt count to its coarse grid."""
    tier = min(len(coarse_widths) - 1, max(0, min(MAX_ATTEMPTS, attempts)))
    frame_width, frame_height = frame_size
    coarse_width = coarse_widths[tier]
    coarse_height = max(1, math.floor(coarse_width * frame_height / frame_width + 0.5))
    return DisclosureLevel(
        tier=tier,
        coarse_width=coarse_width,
        coarse_height=coarse_height,
        pixel_factor=max(1, frame_width // coarse_width),
    )


def pixelate(
    image_bytes: bytes, level: DisclosureLevel, frame_size: tuple[int, int] = FRAME_SIZE
) -> bytes:
    """Crop to the frame, then shrink and enlarge with nearest-neighbour only."""
    try:
        with Image.open(io.BytesIO(image_bytes)) as source:
            frame = ImageOps.fit(
                source.convert("RGB"), frame_size, method=Image.Resampling.NEAREST
            )
        coarse = frame.resize(level.coarse_size, Image.Resampling.NEAREST)
        blocky = coarse.resize(frame_size, Image.Resampling.NEAREST)
        buffer = io.BytesIO()
        blocky.save(buffer, format="PNG")
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise RenderError("Failed to pixelate image") from exc
    return buffer.getvalue()


@dataclass
class DisclosureRenderer:
    """Turns the secret image into what the current session may see."""

    frame_size: tuple[int, int] = FRAME_SIZE
    coarse_widths: tuple[int, ...] = COARSE_WIDTHS

    def level_for(self, session: GameSession) -> DisclosureLevel:
        return disclosure_level(session.attempts, self.frame_size, self.coarse_widths)

    def render(self, image_bytes: bytes, session: GameSession) -> DisclosedImage:
        """Return the original once the game ended, else the tier's pixelation."""
        if session.is_finished:
            return DisclosedImage(
                content=image_bytes,
                media_type=detect_media_type(image_bytes),
                mode=DisclosureMode.ORIGINAL,
            )
        level = self.level_for(session)
        return DisclosedImage(
            content=pixelate(image_bytes, level, self.frame_size),
            media_type=PIXELATED_MEDIA_TYPE,
            mode=DisclosureMode.PIXELATED,
            level=level,
        )


def detect_media_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "application/octet-stream"
