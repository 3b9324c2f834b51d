"""Network membership resolution for create-container requests.

Brief:
  Decides whether a container being created should be attached to the weave
  network, based on its ``--net`` mode and its ``WEAVE_CIDR`` environment
  variable. Interceptors depend only on the NetworkResolver protocol so tests
  and alternative deployments can plug in their own policy.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Protocol, Tuple

logger = logging.getLogger(__name__)

WEAVE_CIDR_ENV = "WEAVE_CIDR"

# Allocate from the default subnet via IPAM.
DEFAULT_ALLOCATION = "net:default"

# Network modes docker routes through its default bridge.
_BRIDGED_MODES = frozenset({"", "default", "bridge"})


@dataclass(frozen=True)
class NetworkVerdict:
    """Brief: Result of asking whether a container joins the network.

    Inputs:
      - enabled: True when the container should be attached.
      - cidrs: Non-empty tuple of CIDR/allocation specs when enabled.
      - reason: Why the container is left alone when not enabled.

    Example:
        >>> NetworkVerdict.attach(["10.2.1.1/24"]).enabled
        True
        >>> NetworkVerdict.skip("no").reason
        'no'
    """

    enabled: bool
    cidrs: Tuple[str, ...] = ()
    reason: str = ""

    @classmethod
    def attach(cls, cidrs: Iterable[str]) -> "NetworkVerdict":
        cidrs = tuple(cidrs)
        if not cidrs:
            raise ValueError("an enabled verdict needs at least one CIDR")
        return cls(enabled=True, cidrs=cidrs)

    @classmethod
    def skip(cls, reason: str) -> "NetworkVerdict":
        return cls(enabled=False, reason=reason)


class NetworkResolver(Protocol):
    def resolve(self, network_mode: str, env: Iterable[str]) -> NetworkVerdict:
        ...


class WeaveCIDRResolver:
    """Brief: Default resolver driven by ``--net`` and ``WEAVE_CIDR``.

    Inputs:
      - no_default_ipam: When True, containers without an explicit
        ``WEAVE_CIDR`` are left alone instead of receiving a default
        allocation.

    Example:
        >>> r = WeaveCIDRResolver()
        >>> r.resolve("bridge", ["WEAVE_CIDR=10.2.1.1/24 10.2.2.1/24"]).cidrs
        ('10.2.1.1/24', '10.2.2.1/24')
        >>> r.resolve("host", []).enabled
        False
    """

    def __init__(self, no_default_ipam: bool = False) -> None:
        self.no_default_ipam = no_default_ipam

    def resolve(self, network_mode: str, env: Iterable[str]) -> NetworkVerdict:
        if network_mode not in _BRIDGED_MODES:
            return NetworkVerdict.skip(f"the container has '--net={network_mode}'")

        cidr_value = None
        prefix = WEAVE_CIDR_ENV + "="
        for entry in env:
            if entry.startswith(prefix):
                cidr_value = entry[len(prefix):]

        if cidr_value is not None:
            if cidr_value.strip() == "none":
                return NetworkVerdict.skip(
                    "the container was created with the '-e WEAVE_CIDR=none' option"
                )
            cidrs = cidr_value.split()
            if cidrs:
                return NetworkVerdict.attach(cidrs)

        if self.no_default_ipam:
            return NetworkVerdict.skip(
                "the container was created without specifying an IP address with "
                "'-e WEAVE_CIDR=...' and the proxy was started with the "
                "'no_default_ipam' option"
            )
        return NetworkVerdict.attach([DEFAULT_ALLOCATION])
