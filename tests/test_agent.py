"""
Brief: Tests for weaveproxy.agent DNS domain probing.

Inputs:
  - None

Outputs:
  - None
"""

import requests

from conftest import FakeInspector, FakeSession
from weaveproxy.agent import DNSDomainFact, agent_address, probe_dns_domain
from weaveproxy.config.proxy_config import ProxyConfig

AGENT = {"NetworkSettings": {"IPAddress": "172.17.0.2"}}


def test_probe_returns_agent_domain():
    """
    Brief: A healthy agent reports its domain and is marked running.

    Inputs:
      - inspector with a weave container, session answering 200

    Outputs:
      - None: Asserts fact and the probe URL/timeout
    """
    session = FakeSession(text="cluster.weave.\n")
    config = ProxyConfig(agent_timeout_seconds=0.5)
    fact = probe_dns_domain(FakeInspector(containers={"weave": AGENT}), config, session)
    assert fact == DNSDomainFact("cluster.weave.", True)
    assert session.calls == [("http://172.17.0.2:6784/domain", 0.5)]


def test_probe_uses_configured_agent_container_and_port():
    session = FakeSession()
    config = ProxyConfig(agent_container="weave-router", agent_http_port=7000)
    inspector = FakeInspector(containers={"weave-router": AGENT})
    probe_dns_domain(inspector, config, session)
    assert inspector.container_calls == ["weave-router"]
    assert session.calls[0][0] == "http://172.17.0.2:7000/domain"


def test_probe_falls_back_when_agent_missing():
    session = FakeSession()
    fact = probe_dns_domain(FakeInspector(), ProxyConfig(), session)
    assert fact == DNSDomainFact("weave.local.", False)
    assert session.calls == []


def test_probe_falls_back_without_network_settings():
    inspector = FakeInspector(containers={"weave": {"NetworkSettings": None}})
    fact = probe_dns_domain(inspector, ProxyConfig(default_dns_domain="example."), FakeSession())
    assert fact == DNSDomainFact("example.", False)


def test_probe_falls_back_on_http_error_status():
    inspector = FakeInspector(containers={"weave": AGENT})
    fact = probe_dns_domain(inspector, ProxyConfig(), FakeSession(status_code=503))
    assert not fact.running
    assert fact.domain == "weave.local."


def test_probe_falls_back_on_transport_error():
    inspector = FakeInspector(containers={"weave": AGENT})
    session = FakeSession(exc=requests.ConnectTimeout("timed out"))
    fact = probe_dns_domain(inspector, ProxyConfig(), session)
    assert fact == DNSDomainFact("weave.local.", False)


def test_agent_address_variants():
    assert agent_address(None) == ""
    assert agent_address({}) == ""
    assert agent_address({"NetworkSettings": {"IPAddress": ""}}) == ""
    assert agent_address(AGENT) == "172.17.0.2"
