from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List
from urllib.parse import parse_qs, urlsplit

from ..config.proxy_config import ProxyConfig

logger = logging.getLogger(__name__)


@dataclass
class InterceptedRequest:
    """
    Brief: A daemon API request as seen by interceptors.

    Inputs:
      - method: HTTP method (e.g. "POST").
      - path: Request path without the query string.
      - query: Parsed query parameters (name -> list of values).
      - body: Raw request body; interceptors may replace it.

    Example use:
        >>> req = InterceptedRequest.from_url("POST", "/v1.41/containers/create?name=web1", b"{}")
        >>> req.path, req.query_param("name")
        ('/v1.41/containers/create', 'web1')
    """

    method: str
    path: str
    query: Dict[str, List[str]] = field(default_factory=dict)
    body: bytes = b""

    @classmethod
    def from_url(cls, method: str, url: str, body: bytes = b"") -> "InterceptedRequest":
        parts = urlsplit(url)
        return cls(
            method=method.upper(),
            path=parts.path,
            query=parse_qs(parts.query, keep_blank_values=True),
            body=body,
        )

    def query_param(self, name: str) -> str:
        """Return the first value of query parameter ``name``, or ""."""
        values = self.query.get(name) or []
        return values[0] if values else ""


@dataclass
class InterceptedResponse:
    """A daemon API response on its way back to the client."""

    status: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""


class BaseInterceptor:
    """Brief: Base class for request/response interceptors.

    Interceptors receive the proxy's immutable configuration at construction
    and hold no other per-request state, so one instance can serve concurrent
    requests.

    Inputs:
      - config: ProxyConfig shared read-only by all handlers.

    Example use:
        >>> class Tagger(BaseInterceptor):
        ...     def intercept_request(self, request):
        ...         request.body = b"{}"
        >>> t = Tagger(ProxyConfig())
        >>> req = InterceptedRequest("POST", "/containers/create", body=b"null")
        >>> t.intercept_request(req)
        >>> req.body
        b'{}'
    """

    def __init__(self, config: ProxyConfig) -> None:
        self.config = config
        logger.debug("loading %s", self)

    def setup(self) -> None:
        """Brief: One-time initialization before the proxy starts serving.

        Base implementation is a no-op.
        """
        return None

    def intercept_request(self, request: InterceptedRequest) -> None:
        """Brief: Inspect or rewrite a request before it is forwarded.

        Inputs:
          - request: The request; ``request.body`` may be replaced.

        Outputs:
          - None. Raising an InterceptError aborts the request.
        """
        return None

    def intercept_response(self, response: InterceptedResponse) -> None:
        """Inspect or rewrite a response before it reaches the client."""
        return None
