"""Docker daemon inspection used while rewriting create-container requests.

Brief:
  - Wraps ``docker.DockerClient`` with the few read-only calls the
    interceptor needs: image defaults, sibling container lookup and the
    docker bridge gateway.
  - Every client is created with an explicit timeout so a stalled daemon
    cannot block a request handler forever.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

import docker
import requests
from docker.errors import DockerException, ImageNotFound, NotFound

from .config.proxy_config import ProxyConfig
from .errors import NoSuchImageError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageDefaults:
    """Default command and entrypoint baked into an image."""

    cmd: List[str]
    entrypoint: List[str]

    @classmethod
    def from_inspect(cls, attrs: Dict[str, Any]) -> "ImageDefaults":
        """Brief: Build ImageDefaults from a docker image inspect record.

        Inputs:
          - attrs: Mapping as returned by ``docker image inspect``.

        Outputs:
          - ImageDefaults with empty lists where the image defines nothing.

        Example:
            >>> ImageDefaults.from_inspect({"Config": {"Cmd": ["sh"], "Entrypoint": None}})
            ImageDefaults(cmd=['sh'], entrypoint=[])
        """

        cfg = attrs.get("Config") or {}
        return cls(
            cmd=_as_list(cfg.get("Cmd")),
            entrypoint=_as_list(cfg.get("Entrypoint")),
        )


def _as_list(value: Any) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


class Inspector(Protocol):
    def inspect_image(self, name: str) -> ImageDefaults:
        ...

    def inspect_container(self, name: str) -> Optional[Dict[str, Any]]:
        ...


class DockerInspector:
    """Read-only daemon queries backed by the Docker SDK."""

    def __init__(self, client: "docker.DockerClient") -> None:
        self.client = client

    @classmethod
    def from_config(cls, config: ProxyConfig) -> "DockerInspector":
        """Brief: Create an inspector for ``config.docker_url``.

        Inputs:
          - config: ProxyConfig with docker_url and docker_timeout_seconds.

        Outputs:
          - DockerInspector.

        Raises:
          - DockerException: when the client cannot be created.
        """

        client = docker.DockerClient(
            base_url=config.docker_url,
            timeout=config.docker_timeout_seconds,
        )
        return cls(client)

    def inspect_image(self, name: str) -> ImageDefaults:
        """Return the image's default Cmd/Entrypoint.

        Raises NoSuchImageError (carrying ``name``) when the daemon does not
        know the image; other daemon errors propagate unchanged.
        """
        try:
            image = self.client.images.get(name)
        except ImageNotFound as exc:
            raise NoSuchImageError(name) from exc
        return ImageDefaults.from_inspect(image.attrs)

    def inspect_container(self, name: str) -> Optional[Dict[str, Any]]:
        """Brief: Return the inspect record of container ``name``.

        Inputs:
          - name: Container name or ID.

        Outputs:
          - dict inspect record, or None when the container does not exist
            or the daemon call fails.
        """

        try:
            return self.client.containers.get(name).attrs
        except NotFound:
            logger.debug("container %s not found", name)
        except (DockerException, requests.RequestException) as exc:
            logger.debug("failed to inspect container %s: %s", name, exc)
        return None

    def bridge_gateway(self, network: str = "bridge") -> Optional[str]:
        """Return the IPAM gateway of the docker bridge network, if any."""
        try:
            attrs = self.client.networks.get(network).attrs
        except (DockerException, requests.RequestException) as exc:
            logger.warning("failed to inspect network %s: %s", network, exc)
            return None

        for entry in (attrs.get("IPAM") or {}).get("Config") or []:
            gateway = str((entry or {}).get("Gateway") or "").strip()
            if gateway:
                # Gateways are occasionally reported with a prefix length.
                return gateway.split("/", 1)[0]
        return None
