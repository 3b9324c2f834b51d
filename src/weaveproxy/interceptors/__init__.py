"""Request/response interceptors applied by the proxy."""

from .base import BaseInterceptor, InterceptedRequest, InterceptedResponse
from .create_container import CreateContainerInterceptor

__all__ = [
    "BaseInterceptor",
    "CreateContainerInterceptor",
    "InterceptedRequest",
    "InterceptedResponse",
]
