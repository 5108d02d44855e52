"""Waiting for an HTTP endpoint to become reachable."""

from __future__ import annotations

import http.client
import logging
import time
import urllib.error
import urllib.request

logger = logging.getLogger(__name__)


class ConnectivityError(RuntimeError):
    """Raised when an endpoint cannot be reached for a reason other than an outage."""


class HttpConnectivityService:
    """Probes an endpoint with OPTIONS requests until it answers."""

    def __init__(self, retry_interval: float = 1.0) -> None:
        self.retry_interval = retry_interval

    def wait_for_connectivity(self, endpoint: str, timeout: float | None = None) -> None:
        """Block until ``endpoint`` answers any HTTP response.

        Raises TimeoutError once ``timeout`` seconds have passed, and
        ConnectivityError when the endpoint fails in a way that is not an outage.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        had_outage = False

        while True:
            remaining = self._remaining(deadline, endpoint)
            try:
                request = urllib.request.Request(
                    endpoint, method="OPTIONS", headers={"Connection": "close"}
                )
            except ValueError as err:
                raise ConnectivityError(f"failed to create request: {err}") from err

            try:
                self._probe(request, remaining)
            except http.client.RemoteDisconnected:
                if not had_outage:
                    had_outage = True
                    logger.warning(
                        "Internet connectivity outage detected, waiting for it to be restored..."
                    )
                pause = self.retry_interval
                if deadline is not None:
                    pause = min(pause, max(0.0, deadline - time.monotonic()))
                time.sleep(pause)
                continue
            except TimeoutError as err:
                raise TimeoutError(f"failed to connect to {endpoint}: deadline exceeded") from err
            except urllib.error.URLError as err:
                if isinstance(err.reason, TimeoutError):
                    raise TimeoutError(
                        f"failed to connect to {endpoint}: deadline exceeded"
                    ) from err
                raise ConnectivityError(f"failed to connect to {endpoint}: {err.reason}") from err
            except (OSError, http.client.HTTPException) as err:
                raise ConnectivityError(f"failed to connect to {endpoint}: {err}") from err

            if had_outage:
                logger.warning("Internet connectivity restored")
            return

    @staticmethod
    def _remaining(deadline: float | None, endpoint: str) -> float | None:
        if deadline is None:
            return None
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise TimeoutError(f"failed to connect to {endpoint}: deadline exceeded")
        return remaining

    @staticmethod
    def _probe(request: urllib.request.Request, timeout: float | None) -> None:
        try:
            if timeout is None:
                response = urllib.request.urlopen(request)
            else:
                response = urllib.request.urlopen(request, timeout=timeout)
        except urllib.error.HTTPError as err:
            # Any status code means the endpoint is reachable.
            err.close()
            return
        response.close()