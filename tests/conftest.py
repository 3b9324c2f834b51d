"""
Brief: Shared pytest fixtures and a per-test 10s timeout.

Inputs:
  - None

Outputs:
  - Fixtures: fake_inspector, fake_session, proxy_config
"""

import os
import signal
import sys
import types

import pytest

# Ensure 'src' is on sys.path so 'weaveproxy' is importable without installing
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
SRC_DIR = os.path.join(ROOT, "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from weaveproxy.config.proxy_config import ProxyConfig  # noqa: E402
from weaveproxy.docker_client import ImageDefaults  # noqa: E402
from weaveproxy.errors import NoSuchImageError  # noqa: E402


def _alarm_handler(signum, frame):
    raise TimeoutError("Test exceeded 10 seconds")


if hasattr(signal, "SIGALRM"):
    signal.signal(signal.SIGALRM, _alarm_handler)


@pytest.fixture(autouse=True)
def enforce_test_timeout():
    """
    Brief: Enforce a hard 10-second timeout for each test.

    Inputs:
      - None

    Outputs:
      - None: Cancels alarm after test
    """
    if hasattr(signal, "SIGALRM"):
        signal.alarm(10)
        try:
            yield
        finally:
            signal.alarm(0)
    else:
        yield


class FakeInspector:
    """Brief: In-memory stand-in for DockerInspector.

    Inputs:
      - images: mapping image name -> ImageDefaults.
      - containers: mapping container name -> inspect dict.
      - gateway: value returned by bridge_gateway().
    """

    def __init__(self, images=None, containers=None, gateway=None):
        self.images = dict(images or {})
        self.containers = dict(containers or {})
        self.gateway = gateway
        self.image_calls = []
        self.container_calls = []

    def inspect_image(self, name):
        self.image_calls.append(name)
        if name not in self.images:
            raise NoSuchImageError(name)
        return self.images[name]

    def inspect_container(self, name):
        self.container_calls.append(name)
        return self.containers.get(name)

    def bridge_gateway(self, network="bridge"):
        return self.gateway


class FakeSession:
    """Brief: Minimal requests.Session replacement recording GET calls."""

    def __init__(self, status_code=200, text="weave.local.", exc=None):
        self.status_code = status_code
        self.text = text
        self.exc = exc
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        if self.exc is not None:
            raise self.exc
        return types.SimpleNamespace(status_code=self.status_code, text=self.text)


@pytest.fixture
def proxy_config():
    return ProxyConfig(docker_bridge_ip="172.17.0.1")


@pytest.fixture
def fake_inspector():
    return FakeInspector(
        images={
            "foo": ImageDefaults(cmd=["run"], entrypoint=[]),
            "busybox": ImageDefaults(cmd=["sh"], entrypoint=[]),
            "nginx": ImageDefaults(cmd=["nginx", "-g", "daemon off;"], entrypoint=["/docker-entrypoint.sh"]),
            "scratch": ImageDefaults(cmd=[], entrypoint=[]),
        },
        containers={"weave": {"NetworkSettings": {"IPAddress": "172.17.0.2"}}},
    )


@pytest.fixture
def fake_session():
    return FakeSession()
