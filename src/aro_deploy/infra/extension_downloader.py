"""httpx-backed implementation of :class:`~aro_deploy.core.protocols.ExtensionSource`.

All httpx exceptions are caught here and re-raised as
:class:`~aro_deploy.exceptions.ExtensionInstallError`.
"""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

from aro_deploy.exceptions import ExtensionInstallError

LOG = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


class HttpExtensionSource:
    """Fetch the ARO extension wheel behind a redirecting "latest" link.

    Parameters
    ----------
    latest_url:
        Short link that redirects to the current wheel.
    timeout:
        Per-request timeout in seconds.
    transport:
        Optional httpx transport, used by tests to avoid the network.
    """

    def __init__(
        self,
        latest_url: str,
        *,
        timeout: float = 60.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._latest_url: str = latest_url
        self._timeout: float = timeout
        self._transport: httpx.BaseTransport | None = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self._timeout),
            follow_redirects=True,
            transport=self._transport,
        )

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def resolve_latest_url(self) -> str:
        """Follow redirects from the "latest" link and return the final URL.

        Raises
        ------
        ExtensionInstallError
            On network errors or an error status at the end of the chain.
        """
        try:
            with self._client() as client:
                response = client.head(self._latest_url)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            raise ExtensionInstallError(
                f"Could not resolve {self._latest_url}: {exc}",
                hint="Check your network connection or ARO_EXTENSION_URL.",
            ) from exc
        LOG.debug("Redirect chain: %s", [str(r.url) for r in response.history])
        return str(response.url)

    def download(self, url: str, destination: Path) -> Path:
        """Stream the wheel at *url* into *destination*.

        Raises
        ------
        ExtensionInstallError
            When the transfer fails; a partial file is removed.
        """
        try:
            with self._client() as client, client.stream("GET", url) as response:
                response.raise_for_status()
                with destination.open("wb") as handle:
                    for chunk in response.iter_bytes(_CHUNK_SIZE):
                        handle.write(chunk)
        except httpx.HTTPError as exc:
            destination.unlink(missing_ok=True)
            raise ExtensionInstallError(
                f"Failed to download {url}: {exc}",
                hint="Retry later or install the extension manually with "
                "'az extension add --source <wheel>'.",
            ) from exc
        LOG.debug("Saved %s (%d bytes)", destination, destination.stat().st_size)
        return destination
