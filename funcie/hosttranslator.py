"""Translation of local host names to a host reachable from inside Docker."""

from __future__ import annotations

import ipaddress
import logging
import socket
import threading
from collections.abc import Callable, Sequence

logger = logging.getLogger(__name__)

_DOCKER_HOST = "host.docker.internal"


def _lookup_host(host: str) -> list[str]:
    infos = socket.getaddrinfo(host, None)
    return [str(info[4][0]) for info in infos]


def _is_local_ip(host: str) -> bool | None:
    """Return whether ``host`` is a loopback or unspecified IP, or None if not an IP."""
    try:
        address = ipaddress.ip_address(host)
    except ValueError:
        return None
    if isinstance(address, ipaddress.IPv6Address) and address.ipv4_mapped is not None:
        address = address.ipv4_mapped
    return address.is_loopback or address.is_unspecified


class DockerHostTranslator:
    """Redirects localhost addresses to the Docker host when one resolves.

    On platforms where containers reach the host through ``host.docker.internal``,
    loopback and unspecified addresses as well as ``localhost`` are rewritten to it.
    """

    def __init__(self, lookup_host: Callable[[str], Sequence[str]] | None = None) -> None:
        self._lookup_host = lookup_host or _lookup_host
        self._translated_host = ""
        self._required = False
        self._checked = False
        self._lock = threading.Lock()

    def is_host_translation_required(self) -> bool:
        """Return whether local hosts must be rewritten; resolved only once."""
        with self._lock:
            if not self._checked:
                self._set_host_if_resolves(_DOCKER_HOST)
                if self._translated_host:
                    logger.info(
                        "redirecting localhost requests to resolved host %s",
                        self._translated_host,
                    )
                self._checked = True
            return self._required

    def _set_host_if_resolves(self, host: str) -> None:
        if self._translated_host:
            return
        try:
            self._lookup_host(host)
        except OSError:
            # Any lookup failure is treated as the host not existing.
            return
        self._translated_host = host
        self._required = True

    def translate_local_host_to_resolved_host(self, host: str) -> str:
        """Return the host to use for ``host``, rewritten if it is local."""
        if not self.is_host_translation_required():
            return host

        is_local = _is_local_ip(host)
        if is_local is not None:
            return self._translated_host if is_local else host

        if host == "localhost":
            return self._translated_host
        return host