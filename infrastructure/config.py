"""
Service configuration.

Built once at startup from the environment and passed explicitly to the
components that need it.
"""

import logging
import os
from typing import Any, Dict, Optional, Tuple

# Get logger for this module
logger = logging.getLogger(__name__)


def _get_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes")


def _get_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value.rstrip("s"))
    except ValueError:
        logger.warning("Invalid %s value %r, using %s", name, value, default)
        return default


def parse_bind_addr(bind_addr: str) -> Tuple[str, int]:
    """Split ``host:port`` (host optional) into its parts."""
    host, _, port = bind_addr.rpartition(":")
    if not port.isdigit():
        raise ValueError(f"invalid bind address: {bind_addr!r}")
    return host or "0.0.0.0", int(port)


class Config:
    """Configuration for the dataset catalog API."""

    def __init__(
        self,
        bind_addr: str = ":10400",
        dataset_api_url: str = "http://localhost:10400",
        website_url: str = "http://localhost:20000",
        code_list_api_url: str = "http://localhost:22400",
        data_dir: str = "data",
        graceful_shutdown_timeout: float = 5.0,
        enable_private_endpoints: bool = False,
    ):
        self.bind_addr = bind_addr
        self.dataset_api_url = dataset_api_url
        self.website_url = website_url
        self.code_list_api_url = code_list_api_url
        self.data_dir = data_dir
        self.graceful_shutdown_timeout = graceful_shutdown_timeout
        self.enable_private_endpoints = enable_private_endpoints

    @property
    def host(self) -> str:
        return parse_bind_addr(self.bind_addr)[0]

    @property
    def port(self) -> int:
        return parse_bind_addr(self.bind_addr)[1]

    @classmethod
    def from_env(cls, data_dir: Optional[str] = None) -> "Config":
        """
        Build the configuration from environment variables.

        Args:
            data_dir: Overrides CATALOG_DATA_DIR when given

        Returns:
            A new Config instance
        """
        defaults = cls()
        return cls(
            bind_addr=os.getenv("BIND_ADDR", defaults.bind_addr),
            dataset_api_url=os.getenv("DATASET_API_URL", defaults.dataset_api_url),
            website_url=os.getenv("WEBSITE_URL", defaults.website_url),
            code_list_api_url=os.getenv("CODE_LIST_API_URL", defaults.code_list_api_url),
            data_dir=data_dir or os.getenv("CATALOG_DATA_DIR", defaults.data_dir),
            graceful_shutdown_timeout=_get_float(
                "GRACEFUL_SHUTDOWN_TIMEOUT", defaults.graceful_shutdown_timeout
            ),
            enable_private_endpoints=_get_bool(
                "ENABLE_PRIVATE_ENDPOINTS", defaults.enable_private_endpoints
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bind_addr": self.bind_addr,
            "dataset_api_url": self.dataset_api_url,
            "website_url": self.website_url,
            "code_list_api_url": self.code_list_api_url,
            "data_dir": self.data_dir,
            "graceful_shutdown_timeout": self.graceful_shutdown_timeout,
            "enable_private_endpoints": self.enable_private_endpoints,
        }

    def __repr__(self) -> str:
        return f"Config({self.to_dict()})"
