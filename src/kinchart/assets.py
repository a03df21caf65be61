"""Loading portrait images, with a generated placeholder as fallback."""

from __future__ import annotations

import http.client
import io
import logging
import urllib.request
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import matplotlib.image as mpimg
import numpy as np

logger = logging.getLogger(__name__)


def default_placeholder(size: int = 128) -> np.ndarray:
    """A grey head-and-shoulders silhouette on a light background (RGBA floats)."""
    image = np.ones((size, size, 4), dtype=float)
    image[..., :3] = 0.93

    yy, xx = np.mgrid[0:size, 0:size] / size
    head = (xx - 0.5) ** 2 + (yy - 0.38) ** 2 < 0.17**2
    shoulders = ((xx - 0.5) / 0.36) ** 2 + ((yy - 0.98) / 0.36) ** 2 < 1.0
    image[head | shoulders, :3] = 0.62
    return image


class AssetLoader:
    """
    Resolves image references (file paths or http(s) URLs) to image arrays.

    Any failure falls back to the placeholder; loading never raises.
    Results are cached per reference.
    """

    def __init__(self, placeholder: np.ndarray | None = None, timeout: float = 10.0):
        self.placeholder = default_placeholder() if placeholder is None else placeholder
        self.timeout = timeout
        self._cache: dict[str, np.ndarray] = {}

    def _read(self, ref: str) -> np.ndarray:
        if ref.startswith(("http://", "https://")):
            with urllib.request.urlopen(ref, timeout=self.timeout) as response:
                return mpimg.imread(io.BytesIO(response.read()))
        return mpimg.imread(Path(ref))

    def load(self, ref: str | None) -> np.ndarray:
        if not ref:
            return self.placeholder
        if ref in self._cache:
            return self._cache[ref]

        try:
            image = self._read(ref)
        # PIL reports a truncated or mislabelled file as SyntaxError
        except (OSError, ValueError, SyntaxError, http.client.HTTPException) as exc:
            logger.warning("Could not load image %r, using placeholder: %s", ref, exc)
            image = self.placeholder

        self._cache[ref] = image
        return image

    def preload(self, refs: Iterable[str | None], max_workers: int = 4) -> None:
        """Fetch several references concurrently so later ``load`` calls hit the cache."""
        pending = sorted({ref for ref in refs if ref and ref not in self._cache})
        if not pending:
            return
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            list(pool.map(self.load, pending))
        logger.debug("Preloaded %d images", len(pending))
