"""Cached download of the menu wallpaper image."""

from __future__ import annotations

import logging
import os
import time
import urllib.request
from pathlib import Path

__all__ = ["is_fresh", "download", "ensure_wallpaper"]

log = logging.getLogger(__name__)

MIN_SIZE = 1024
DEFAULT_MAX_AGE = 86400
DOWNLOAD_TIMEOUT = 6.0
USER_AGENT = "Mozilla/5.0"
URL_ENV = "NENET_WALLPAPER_URL"


def is_fresh(path: str | os.PathLike[str], max_age_seconds: int) -> bool:
    """Whether ``path`` holds a plausible image written less than the max age ago."""
    try:
        st = Path(path).stat()
    except OSError:
        return False
    if st.st_size < MIN_SIZE:
        return False
    age = int(time.time() - st.st_mtime)
    return 0 <= age < max_age_seconds


def download(out_path: str | os.PathLike[str], url: str) -> Path:
    """Fetch ``url`` into ``out_path``; raise if it fails or the file is too small."""
    out = Path(out_path)
    request = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
    log.info("downloading wallpaper from %s", url)
    with urllib.request.urlopen(request, timeout=DOWNLOAD_TIMEOUT) as resp:
        body = resp.read()
    out.write_bytes(body)
    if len(body) < MIN_SIZE:
        raise ValueError(f"wallpaper is only {len(body)} bytes")
    return out


def ensure_wallpaper(
    cache_path: str | os.PathLike[str],
    max_age_seconds: int = DEFAULT_MAX_AGE,
    url: str | None = None,
) -> Path | None:
    """Return a usable wallpaper path, downloading when the cache is stale.

    The URL falls back to the ``NENET_WALLPAPER_URL`` environment variable.
    """
    cache = Path(cache_path)
    if is_fresh(cache, max_age_seconds):
        log.info("wallpaper cached at %s", cache)
        return cache
    url = url or os.environ.get(URL_ENV)
    if url:
        try:
            cache.parent.mkdir(parents=True, exist_ok=True)
            download(cache, url)
        except (OSError, ValueError) as exc:
            log.warning("wallpaper download failed: %s", exc)
        else:
            log.info("wallpaper downloaded to %s", cache)
            return cache
    if cache.exists():
        log.info("using old wallpaper cache %s", cache)
        return cache
    return None