# ABOUTME: Input acquisition for the converter: local files, uploads, and URLs.
# ABOUTME: Each source is tried once and yields raw bytes; failures surface as InputAcquisitionError.

import asyncio
from pathlib import Path
from urllib.parse import urlparse

import httpx
import structlog

from atom2opml.config import Settings, get_settings
from atom2opml.errors import InputAcquisitionError

log = structlog.get_logger()


def is_url(source: str) -> bool:
    return urlparse(source).scheme in ("http", "https")


def _too_large(settings: Settings, source: str | None, size: int) -> InputAcquisitionError:
    log.error("feed_too_large", source=source, size=size, limit=settings.max_feed_bytes)
    return InputAcquisitionError(f"Feed is larger than {settings.max_feed_bytes} bytes.", source=source)


def check_feed_size(
    content: bytes, settings: Settings | None = None, source: str | None = None
) -> bytes:
    """Enforce the configured size limit on already-buffered feed bytes.

    The bytes are returned undecoded so the XML declaration decides the encoding.
    """
    settings = settings or get_settings()
    if len(content) > settings.max_feed_bytes:
        raise _too_large(settings, source, len(content))
    return content


async def read_feed_file(path: Path | str, settings: Settings | None = None) -> bytes:
    """Read a local feed file without blocking the event loop."""
    path = Path(path)
    try:
        content = await asyncio.to_thread(path.read_bytes)
    except OSError as e:
        log.error("feed_read_error", path=str(path), error=str(e))
        raise InputAcquisitionError(f"Could not read file {path}: {e.strerror or e}", source=str(path)) from e

    log.info("feed_file_read", path=str(path), size=len(content))
    return check_feed_size(content, settings, source=str(path))


async def _download(client: httpx.AsyncClient, url: str, settings: Settings) -> bytes:
    """Stream the body, giving up as soon as it passes max_feed_bytes."""
    try:
        async with client.stream("GET", url) as response:
            response.raise_for_status()

            declared = response.headers.get("Content-Length")
            if declared and declared.isdigit() and int(declared) > settings.max_feed_bytes:
                raise _too_large(settings, url, int(declared))

            chunks: list[bytes] = []
            size = 0
            async for chunk in response.aiter_bytes():
                size += len(chunk)
                if size > settings.max_feed_bytes:
                    raise _too_large(settings, url, size)
                chunks.append(chunk)
    except httpx.HTTPStatusError as e:
        status = e.response.status_code
        log.error("feed_fetch_error", url=url, status=status)
        raise InputAcquisitionError(
            f"Fetching {url} failed with HTTP status {status}.", source=url, status_code=status
        ) from e
    except httpx.HTTPError as e:
        log.error("feed_fetch_error", url=url, error=str(e))
        raise InputAcquisitionError(f"Could not fetch {url}: {e}", source=url) from e

    log.info("feed_fetched", url=url, status=response.status_code, size=size)
    return b"".join(chunks)


async def fetch_feed(
    url: str, settings: Settings | None = None, client: httpx.AsyncClient | None = None
) -> bytes:
    """Download a feed with a single GET request.

    Returns the raw response body. Non-2xx responses, transport errors and
    oversized bodies raise InputAcquisitionError; nothing is retried.
    """
    settings = settings or get_settings()
    if not is_url(url):
        raise InputAcquisitionError(f"Not an http(s) URL: {url}", source=url)

    log.info("fetching_feed", url=url)
    if client is not None:
        return await _download(client, url, settings)

    async with httpx.AsyncClient(
        timeout=settings.fetch_timeout,
        headers={"User-Agent": settings.fetch_user_agent},
        follow_redirects=True,
    ) as own_client:
        return await _download(own_client, url, settings)
