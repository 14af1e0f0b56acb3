"""
Handles the low-level downloading of files over HTTP, streaming the response
body to disk while updating a Rich progress bar.
"""

import asyncio
import logging
import os

import aiofiles
import aiohttp
from rich.console import Console

from pls_cli import __version__
from pls_cli.cli.progress_manager import ProgressManager
from pls_cli.exceptions import DownloadTransportError

log = logging.getLogger(__name__)

USER_AGENT = f"pls/{__version__}"


class Downloader:
    """A single-file HTTP downloader. No retries and no timeouts."""

    CHUNK_SIZE = 131072  # 128 KB

    def __init__(self, console: Console | None = None, show_progress: bool = True):
        self.console = console or Console()
        self.show_progress = show_progress

    def fetch(self, url: str, destination_path: str) -> None:
        """
        Downloads ``url`` to ``destination_path``, blocking until done.

        Raises:
            DownloadTransportError: On any HTTP, network or filesystem failure.
        """
        try:
            asyncio.run(self.download_file(url, destination_path))
        except aiohttp.ClientResponseError as e:
            raise DownloadTransportError(f"HTTP {e.status}: {e.message}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            raise DownloadTransportError(str(e) or type(e).__name__) from e

    async def download_file(self, url: str, destination_path: str) -> None:
        """Streams the response body of ``url`` into ``destination_path``."""
        timeout = aiohttp.ClientTimeout(total=None)
        async with aiohttp.ClientSession(
            timeout=timeout, headers={"User-Agent": USER_AGENT}
        ) as session:
            async with session.get(url, allow_redirects=True) as response:
                response.raise_for_status()
                total = response.content_length
                log.debug(
                    f"GET {url} -> {response.status}, "
                    f"content length {total if total is not None else 'unknown'}"
                )

                if not self.show_progress:
                    await self._write_body(response, destination_path, None)
                    return

                with ProgressManager(self.console) as progress:
                    progress.start_file(url, destination_path)
                    progress.set_total(total)
                    await self._write_body(response, destination_path, progress)
                    progress.finish(destination_path)

    async def _write_body(
        self,
        response: aiohttp.ClientResponse,
        destination_path: str,
        progress: ProgressManager | None,
    ) -> None:
        bytes_downloaded = 0
        async with aiofiles.open(destination_path, "wb") as f:
            async for chunk in response.content.iter_chunked(self.CHUNK_SIZE):
                await f.write(chunk)
                bytes_downloaded += len(chunk)
                if progress:
                    progress.advance(len(chunk))
        log.debug(
            f"Wrote {bytes_downloaded} bytes to '{os.path.basename(destination_path)}'"
        )
