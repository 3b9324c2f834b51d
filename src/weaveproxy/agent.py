"""Query the weave network agent for its DNS domain."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import requests

from .config.proxy_config import ProxyConfig
from .docker_client import Inspector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DNSDomainFact:
    """DNS domain in use and whether the agent answered for it."""

    domain: str
    running: bool


def agent_address(container: Optional[dict]) -> str:
    """Brief: Extract the agent's IP address from a container inspect record.

    Inputs:
      - container: Inspect mapping or None.

    Outputs:
      - str: NetworkSettings.IPAddress, or "" when unavailable.

    Example:
        >>> agent_address({"NetworkSettings": {"IPAddress": "172.17.0.2"}})
        '172.17.0.2'
        >>> agent_address({"NetworkSettings": None})
        ''
    """

    if not container:
        return ""
    settings = container.get("NetworkSettings") or {}
    return str(settings.get("IPAddress") or "").strip()


def probe_dns_domain(
    inspector: Inspector,
    config: ProxyConfig,
    session: Optional[requests.Session] = None,
) -> DNSDomainFact:
    """Brief: Ask the sibling agent container which DNS domain it serves.

    Inputs:
      - inspector: Used to find the agent container and its address.
      - config: Supplies agent_container, agent_http_port,
        agent_timeout_seconds and default_dns_domain.
      - session: Optional requests session (defaults to module-level requests).

    Outputs:
      - DNSDomainFact. Any failure along the way yields
        ``DNSDomainFact(config.default_dns_domain, running=False)``.
    """

    fallback = DNSDomainFact(config.default_dns_domain, False)

    address = agent_address(inspector.inspect_container(config.agent_container))
    if not address:
        logger.debug("%s container has no address; using default DNS domain", config.agent_container)
        return fallback

    url = f"http://{address}:{config.agent_http_port}/domain"
    http = session or requests
    try:
        resp = http.get(url, timeout=config.agent_timeout_seconds)
    except requests.RequestException as exc:
        logger.debug("DNS domain probe %s failed: %s", url, exc)
        return fallback

    if resp.status_code != 200:
        logger.debug("DNS domain probe %s returned HTTP %s", url, resp.status_code)
        return fallback

    domain = resp.text.strip()
    if not domain:
        return fallback
    return DNSDomainFact(domain, True)
