import os
import time
import logging
import tempfile

import requests

from .errors import FileWriteError, NetworkError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def extract(url: str, file_path: str, timeout: int = 10) -> str:
    """
    Download a remote file to a local path.

    The body is streamed into a temporary file next to the destination and
    moved into place only once the download completes, so a failed fetch
    never leaves a half-written destination behind. The timeout bounds the
    whole download, not just the connect and each socket read.

    Args:
        url: Source URL
        file_path: Destination path, overwritten if present
        timeout: Download timeout in seconds

    Returns:
        The destination path
    """
    if timeout is None or timeout <= 0:
        raise NetworkError(f"Timeout must be positive, got {timeout}")

    logger.info(f"Downloading {url} to {file_path} (timeout {timeout}s)")
    deadline = time.monotonic() + timeout
    try:
        response = requests.get(url, timeout=timeout, stream=True)
        response.raise_for_status()
    except requests.RequestException as e:
        raise NetworkError(f"Failed to fetch {url}: {e}") from e

    directory = os.path.dirname(os.path.abspath(file_path))
    tmp_path = None
    bytes_written = 0
    try:
        os.makedirs(directory, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="wb", dir=directory, prefix=".download-", delete=False
        ) as tmp:
            tmp_path = tmp.name
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if time.monotonic() > deadline:
                    raise NetworkError(f"Download of {url} exceeded {timeout}s")
                tmp.write(chunk)
                bytes_written += len(chunk)
        os.replace(tmp_path, file_path)
        tmp_path = None
    except requests.RequestException as e:
        raise NetworkError(f"Download of {url} interrupted: {e}") from e
    except OSError as e:
        raise FileWriteError(f"Failed to write {file_path}: {e}") from e
    finally:
        response.close()
        if tmp_path is not None and os.path.exists(tmp_path):
            os.remove(tmp_path)

    logger.info(f"Saved {bytes_written} bytes to {file_path}")
    return file_path
