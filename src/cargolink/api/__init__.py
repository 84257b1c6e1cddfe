"""
CargoLink API Client Package

Session-aware HTTP client for the logistics management API.
Provides credential injection, session teardown on expiry, multipart
uploads and typed resource endpoints.
"""

from .client import HTTPClient
from .gateway import LogisticsGateway
from .gateway_config import GatewayConfig, resolve_base_url
from .request_builder import RequestBuilder, RequestDescriptor, file_part
from .response_handler import (
    ResponseHandler,
    APIError,
    TransportError,
    ValidationError,
    AuthenticationError,
    SessionExpiredError,
    AuthorizationError,
    NotFoundError,
    ConflictError,
    RateLimitError,
    ServerError,
    ServiceUnavailableError,
    ResponseProcessingError
)
from .session_store import (
    SessionCredential,
    SessionStore,
    SessionScope,
    MemorySessionScope,
    FileSessionScope,
    KeyringSessionScope
)

__all__ = [
    'HTTPClient',
    'LogisticsGateway',
    'GatewayConfig',
    'resolve_base_url',
    'RequestBuilder',
    'RequestDescriptor',
    'file_part',
    'ResponseHandler',
    'APIError',
    'TransportError',
    'ValidationError',
    'AuthenticationError',
    'SessionExpiredError',
    'AuthorizationError',
    'NotFoundError',
    'ConflictError',
    'RateLimitError',
    'ServerError',
    'ServiceUnavailableError',
    'ResponseProcessingError',
    'SessionCredential',
    'SessionStore',
    'SessionScope',
    'MemorySessionScope',
    'FileSessionScope',
    'KeyringSessionScope'
]

__version__ = '1.0.0'
