#!/usr/bin/env python3
import logging
from pathlib import Path
import requests

from style_adder import config
from style_adder.errors import DownloadError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


def _remove_partial(destination: Path):
    try:
        destination.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"Could not remove partial download {destination}: {e}")


def download(url: str, destination: Path,
             timeout: float | None = config.DOWNLOAD_TIMEOUT,
             session: requests.Session | None = None) -> Path:
    """
    Streams the resource at url into destination.

    Args:
        url (str): HTTP(S) URL of the asset.
        destination (Path): File to write; its directory must already exist.
        timeout (float | None): Request timeout in seconds. None waits indefinitely.
        session (requests.Session | None): Session to use instead of the requests module.

    Returns:
        Path: The destination path.

    Raises:
        DownloadError: on transport, HTTP status or write failure. A partially
                       written file is removed first. No checksum, no resume.
    """
    destination = Path(destination)
    http = session or requests
    logger.info(f"Downloading {url} -> {destination}")
    try:
        with http.get(url, stream=True, timeout=timeout) as response:
            response.raise_for_status()
            with open(destination, 'wb') as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
    except requests.RequestException as e:
        _remove_partial(destination)
        raise DownloadError(f"Failed to download {url}: {e}") from e
    except OSError as e:
        _remove_partial(destination)
        raise DownloadError(f"Failed to write {destination}: {e}") from e

    logger.info(f"Saved {destination} ({destination.stat().st_size} bytes)")
    return destination
