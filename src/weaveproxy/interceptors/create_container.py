"""Rewrite ``POST /containers/create`` so new containers join the weave network.

Brief:
  - Asks the network resolver whether the container should be attached; when
    it should not, the request body is forwarded byte for byte.
  - Otherwise, in this order: binds the weavewait helper volume at ``/w``,
    wraps the entrypoint with the wait command (resolving image defaults when
    the request has none), derives the hostname, and points the container's
    DNS at the weave agent.

Inputs:
  - The ``name`` query parameter and raw JSON body of the create request.

Outputs:
  - The rewritten body, or an InterceptError when the request cannot be
    rewritten safely.
"""

from __future__ import annotations

import logging
from typing import List, Optional

import requests

from ..agent import probe_dns_domain
from ..config.logging_config import init_logging
from ..config.proxy_config import WAIT_MOUNT_POINT, ProxyConfig
from ..docker_client import DockerInspector, Inspector
from ..document import (
    CommandValue,
    JSONObject,
    lookup_object,
    lookup_string,
    lookup_string_array,
    parse_body,
    require_string,
    serialize_body,
)
from ..errors import NoCommandSpecifiedError, WrongTypeError
from ..network import NetworkResolver, WeaveCIDRResolver
from .base import BaseInterceptor, InterceptedRequest, InterceptedResponse

logger = logging.getLogger(__name__)


class CreateContainerInterceptor(BaseInterceptor):
    """Attach newly created containers to the weave network.

    Example use:
        >>> from weaveproxy.network import NetworkVerdict
        >>> class Never:
        ...     def resolve(self, network_mode, env):
        ...         return NetworkVerdict.skip("test")
        >>> i = CreateContainerInterceptor(ProxyConfig(), inspector=None, resolver=Never())
        >>> i.transform("web1", b'{"Image": "busybox"}')
        b'{"Image": "busybox"}'
    """

    def __init__(
        self,
        config: ProxyConfig,
        inspector: Inspector,
        resolver: NetworkResolver,
        session: Optional[requests.Session] = None,
    ) -> None:
        super().__init__(config)
        self.inspector = inspector
        self.resolver = resolver
        self.session = session
        self.bridge_ip = config.docker_bridge_ip or ""

    @classmethod
    def from_config(cls, config: ProxyConfig) -> "CreateContainerInterceptor":
        """Brief: Build a ready-to-use interceptor talking to the real daemon.

        Inputs:
          - config: ProxyConfig.

        Outputs:
          - CreateContainerInterceptor with a DockerInspector, the default
            WEAVE_CIDR resolver, and setup() already run. Root logging is
            configured from ``config.logging`` first.
        """

        init_logging(config.logging)
        interceptor = cls(
            config,
            inspector=DockerInspector.from_config(config),
            resolver=WeaveCIDRResolver(no_default_ipam=config.no_default_ipam),
        )
        interceptor.setup()
        return interceptor

    def setup(self) -> None:
        """Brief: Discover the docker bridge address when it was not configured.

        Raises:
          - ValueError: DNS is enabled and no bridge address is known.
        """
        if self.bridge_ip or self.config.without_dns:
            return
        discover = getattr(self.inspector, "bridge_gateway", None)
        if discover is not None:
            self.bridge_ip = discover() or ""
        if not self.bridge_ip:
            raise ValueError(
                "Could not determine the docker bridge address; set "
                "docker_bridge_ip or without_dns in the configuration"
            )
        logger.info("Using docker bridge address %s for container DNS", self.bridge_ip)

    def intercept_request(self, request: InterceptedRequest) -> None:
        request.body = self.transform(request.query_param("name"), request.body)

    def intercept_response(self, response: InterceptedResponse) -> None:
        return None

    def transform(self, name: str, body: bytes) -> bytes:
        """Brief: Rewrite one create-container request body.

        Inputs:
          - name: Value of the request's ``name`` query parameter ("" if none).
          - body: Raw JSON request body.

        Outputs:
          - bytes: ``body`` itself when the container is left alone, else the
            serialized, rewritten document.

        Raises:
          - WrongTypeError, MissingFieldError, NoSuchImageError,
            NoCommandSpecifiedError, MalformedBodyError.
        """

        container = parse_body(body)

        config = lookup_object(container, "Config")
        host_config = lookup_object(container, "HostConfig")
        network_mode = lookup_string(host_config, "NetworkMode")
        env = lookup_string_array(config, "Env")

        verdict = self.resolver.resolve(network_mode, env)
        if not verdict.enabled:
            logger.info("Leaving container alone because %s", verdict.reason)
            return body

        logger.info('Creating container with WEAVE_CIDR "%s"', " ".join(verdict.cidrs))
        self.add_wait_volume(host_config)
        self.set_wait_entrypoint(container)
        hostname = self.container_hostname(name, container)
        self.set_weave_dns(container, hostname)

        return serialize_body(container)

    def add_wait_volume(self, host_config: JSONObject) -> None:
        """Replace any bind targeting ``/w`` with the read-only helper volume."""
        binds: List[str] = []
        for bind in lookup_string_array(host_config, "Binds"):
            parts = bind.split(":")
            if len(parts) >= 2 and parts[1] == WAIT_MOUNT_POINT:
                continue
            binds.append(bind)
        binds.append(self.config.wait_bind)
        host_config["Binds"] = binds

    def set_wait_entrypoint(self, container: JSONObject) -> None:
        """Brief: Prefix the container's entrypoint with the wait command.

        Inputs:
          - container: Request document (mutated in place).

        Outputs:
          - None. When the request names no entrypoint the image defaults are
            looked up; Cmd is filled from the image only when the request has
            none. An entrypoint that already starts with the wait command is
            left untouched.

        Raises:
          - MissingFieldError: Image is needed but absent.
          - NoSuchImageError: the image does not exist.
          - NoCommandSpecifiedError: nothing to run.
        """

        entrypoint = CommandValue.from_document(container, "Entrypoint")
        cmd = lookup_string_array(container, "Cmd")
        wrapper = self.config.wait_entrypoint

        if entrypoint.starts_with(wrapper):
            return

        args = list(entrypoint.args)
        if not args:
            image_name = require_string(container, "Image")
            image = self.inspector.inspect_image(image_name)

            if not cmd and image.cmd:
                cmd = list(image.cmd)
                container["Cmd"] = cmd

            args = list(image.entrypoint)

        if not args and not cmd:
            raise NoCommandSpecifiedError()

        if tuple(args[: len(wrapper)]) != wrapper:
            args = list(wrapper) + args
        container["Entrypoint"] = args

    def container_hostname(self, name: str, container: JSONObject) -> str:
        """Derive the hostname from ``name`` or the configured label, then rewrite it."""
        hostname = name
        label_key = self.config.hostname_from_label
        if label_key:
            labels = lookup_object(container, "Labels")
            label = labels.get(label_key)
            if label is not None:
                if not isinstance(label, str):
                    raise WrongTypeError(label_key, "string", label)
                hostname = label
        return self.config.rewrite_hostname(hostname)

    def set_weave_dns(self, container: JSONObject, name: str) -> None:
        """Brief: Point the container at weaveDNS and give it a weave FQDN.

        Inputs:
          - container: Request document (mutated in place).
          - name: Hostname derived by container_hostname() ("" if none).

        Outputs:
          - None. Skipped entirely when DNS is disabled, or when the agent is
            not running and DNS is not forced on.
        """

        if self.config.without_dns:
            return

        fact = probe_dns_domain(self.inspector, self.config, self.session)
        if not (fact.running or self.config.with_dns):
            return

        host_config = lookup_object(container, "HostConfig")
        dns = lookup_string_array(host_config, "Dns")
        host_config["Dns"] = dns + [self.bridge_ip]

        hostname = lookup_string(container, "Hostname")
        if not hostname and name:
            # A trailing dot looks odd in a hostname.
            domain = fact.domain[:-1] if fact.domain.endswith(".") else fact.domain
            if len(name) + 1 + len(domain) > self.config.max_hostname_length:
                logger.warning("Container name [%s] too long to be used as hostname", name)
            else:
                hostname = name
                container["Hostname"] = name
                container["Domainname"] = domain

        if not lookup_string_array(host_config, "DnsSearch"):
            host_config["DnsSearch"] = ["."] if hostname else [fact.domain]
