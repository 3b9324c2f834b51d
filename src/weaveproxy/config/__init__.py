"""Configuration loading, validation and logging setup."""

from .config_parser import load_proxy_config, parse_config_file
from .logging_config import init_logging
from .proxy_config import MAX_DOCKER_HOSTNAME, WAIT_MOUNT_POINT, ProxyConfig

__all__ = [
    "MAX_DOCKER_HOSTNAME",
    "WAIT_MOUNT_POINT",
    "ProxyConfig",
    "init_logging",
    "load_proxy_config",
    "parse_config_file",
]
