"""
Gateway configuration for the CargoLink client.

The base URL is a pure function of the deployment mode and, outside
production, the host name. It is resolved once when the configuration
value is built and never re-read from the environment afterwards.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional
from urllib.parse import urljoin

from ..core.config_manager import AppConfig
from ..core.error_handler import ConfigurationError


PRODUCTION_MODE = 'production'
PRODUCTION_BASE_URL = '/api'
DEVELOPMENT_PORT = 5001

DEFAULT_HEADERS = MappingProxyType({
    'Content-Type': 'application/json',
    'Accept': 'application/json',
})


def resolve_base_url(mode: str, host: str, port: int = DEVELOPMENT_PORT) -> str:
    """
    Resolve the API base URL for a deployment mode.

    Production targets the relative ``/api`` prefix served by the same-origin
    reverse proxy; any other mode targets ``http://<host>:<port>/api``.
    """
    if mode == PRODUCTION_MODE:
        return PRODUCTION_BASE_URL
    return f"http://{host}:{port}/api"


@dataclass(frozen=True)
class GatewayConfig:
    """Immutable gateway settings, fixed for the lifetime of the process"""
    base_url: str
    default_headers: Mapping[str, str] = field(default_factory=lambda: DEFAULT_HEADERS)
    origin: Optional[str] = None
    timeout: int = 30
    verify_ssl: bool = True

    def __post_init__(self):
        object.__setattr__(self, 'default_headers', MappingProxyType(dict(self.default_headers)))

    @classmethod
    def from_app_config(cls, config: AppConfig) -> 'GatewayConfig':
        """Build the gateway configuration from the loaded application config"""
        headers = dict(DEFAULT_HEADERS)
        headers['User-Agent'] = config.api.user_agent
        return cls(
            base_url=resolve_base_url(config.environment, config.api.host, config.api.port),
            default_headers=headers,
            origin=config.api.origin,
            timeout=config.api.timeout,
            verify_ssl=config.api.verify_ssl,
        )

    @property
    def is_relative(self) -> bool:
        return self.base_url.startswith('/')

    def absolute_base_url(self) -> str:
        """
        Base URL usable by an HTTP library.

        A relative base URL is joined onto ``origin``; without an origin
        there is nothing to resolve it against.
        """
        if not self.is_relative:
            return self.base_url.rstrip('/')
        if not self.origin:
            raise ConfigurationError(
                f"Base URL '{self.base_url}' is relative; set api.origin to the "
                "address of the reverse proxy serving it"
            )
        return urljoin(self.origin.rstrip('/') + '/', self.base_url.lstrip('/')).rstrip('/')

    def url_for(self, path: str) -> str:
        """Absolute URL of an API path such as ``/shipments/42``"""
        return f"{self.absolute_base_url()}/{path.lstrip('/')}"
