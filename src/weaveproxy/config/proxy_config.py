"""Typed, read-only proxy configuration shared by every request handler."""

from __future__ import annotations

import re
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, Field, root_validator, validator

# Mount point of the helper volume inside every network-enabled container.
WAIT_MOUNT_POINT = "/w"

# Docker refuses hostnames longer than this.
MAX_DOCKER_HOSTNAME = 64


class ProxyConfig(BaseModel):
    """Brief: Settings consulted by the create-container interceptor.

    Inputs:
      - docker_url: Docker endpoint URL used for image/container inspection.
      - docker_timeout_seconds: Timeout applied to every daemon API call.
      - weave_wait_volume: Source of the read-only helper volume bound at
        ``/w``.
      - wait_entrypoint: Wrapper command tokens prepended to the entrypoint.
      - hostname_from_label: Optional label key whose value overrides the
        container name when deriving the hostname.
      - hostname_match / hostname_replacement: Regex replace-all applied to the
        derived hostname (Python ``re.sub`` template syntax).
      - without_dns: Never touch DNS settings.
      - with_dns: Configure DNS even when the network agent is not running.
      - no_default_ipam: Leave containers alone unless WEAVE_CIDR is given.
      - max_hostname_length: Upper bound for ``hostname.domain``.
      - default_dns_domain: Domain used when the agent cannot be asked.
      - agent_container / agent_http_port / agent_timeout_seconds: Where and
        how to query the network agent for its DNS domain.
      - docker_bridge_ip: DNS server address handed to containers; discovered
        from the docker bridge network when omitted.
      - logging: Mapping passed to init_logging().

    Outputs:
      - Frozen ProxyConfig instance.

    Example:
        >>> cfg = ProxyConfig(hostname_match=r"^([^.]*)\\..*$")
        >>> cfg.rewrite_hostname("web.example")
        'web'
    """

    docker_url: str = "unix:///var/run/docker.sock"
    docker_timeout_seconds: float = Field(default=10.0, gt=0)
    weave_wait_volume: str = "weavewait"
    wait_entrypoint: Tuple[str, ...] = ("/w/w",)
    hostname_from_label: Optional[str] = None
    hostname_match: str = "^(.*)$"
    hostname_replacement: str = r"\1"
    without_dns: bool = False
    with_dns: bool = False
    no_default_ipam: bool = False
    max_hostname_length: int = Field(default=MAX_DOCKER_HOSTNAME, ge=1)
    default_dns_domain: str = "weave.local."
    agent_container: str = "weave"
    agent_http_port: int = Field(default=6784, ge=1, le=65535)
    agent_timeout_seconds: float = Field(default=2.0, gt=0)
    docker_bridge_ip: Optional[str] = None
    logging: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        frozen = True
        extra = "forbid"

    @validator("wait_entrypoint", pre=True)
    def _normalize_wait_entrypoint(cls, v):  # type: ignore[no-untyped-def]
        if isinstance(v, str):
            v = v.split()
        if not v:
            raise ValueError("wait_entrypoint must contain at least one token")
        return tuple(v)

    @validator("hostname_match")
    def _check_hostname_match(cls, v):  # type: ignore[no-untyped-def]
        try:
            re.compile(v)
        except re.error as exc:
            raise ValueError(f"invalid hostname_match pattern {v!r}: {exc}") from exc
        return v

    @validator("hostname_from_label", pre=True)
    def _blank_label_is_none(cls, v):  # type: ignore[no-untyped-def]
        if v is None or not str(v).strip():
            return None
        return str(v).strip()

    @root_validator(skip_on_failure=True)
    def _dns_flags_exclusive(cls, values):  # type: ignore[no-untyped-def]
        if values.get("with_dns") and values.get("without_dns"):
            raise ValueError("with_dns and without_dns are mutually exclusive")
        return values

    def rewrite_hostname(self, name: str) -> str:
        """Apply hostname_match/hostname_replacement to ``name``."""
        return re.sub(self.hostname_match, self.hostname_replacement, name)

    @property
    def wait_bind(self) -> str:
        """Bind spec for the helper volume, always read-only."""
        return f"{self.weave_wait_volume}:{WAIT_MOUNT_POINT}:ro"
