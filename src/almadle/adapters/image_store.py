"""Secret image storage for dish photos."""

import logging
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Protocol

import httpx
from anyio import to_thread

logger = logging.getLogger(__name__)

_REMOTE_PREFIXES = ("http://", "https://")


class ImageStore(Protocol):
    """Interface for resolving a dish image reference to bytes."""

    async def load(self, image_ref: str) -> bytes | None:
        """Return image bytes, or None when the asset is unavailable."""


@dataclass
class AssetImageStore(ImageStore):
    """Image store reading local asset folders and remote URLs."""

    roots: tuple[Path, ...]
    http_client: httpx.AsyncClient
    timeout: float = 10.0

    @classmethod
    def create(cls, roots: list[str], timeout: float) -> "AssetImageStore":
        """Create an image store with a managed httpx session."""
        return cls(
            roots=tuple(Path(root) for root in roots),
            http_client=httpx.AsyncClient(follow_redirects=True),
            timeout=timeout,
        )

    async def load(self, image_ref: str) -> bytes | None:
        """Resolve a reference from the catalog to image bytes."""
        if not image_ref:
            return None
        if image_ref.startswith(_REMOTE_PREFIXES):
            return await self._fetch(image_ref)
        return await to_thread.run_sync(self._read_local, image_ref)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _fetch(self, url: str) -> bytes | None:
        try:
            response = await self.http_client.get(url, timeout=self.timeout)
            response.raise_for_status()
        except httpx.HTTPError:
            logger.warning("Failed to fetch dish image", extra={"url": url})
            return None
        return response.content

    def _read_local(self, image_ref: str) -> bytes | None:
        # Runs in a worker thread; filesystem calls block.
        # Only the basename is honoured so references cannot escape the roots.
        name = PurePosixPath(image_ref.replace("\\", "/")).name
        if name in {"", ".", ".."}:
            return None
        for root in self.roots:
            path = root / name
            if not path.is_file():
                continue
            try:
                return path.read_bytes()
            except OSError:
                logger.warning("Failed to read dish image", extra={"path": str(path)})
                return None
        logger.warning("Dish image not found", extra={"image_ref": image_ref})
        return None
