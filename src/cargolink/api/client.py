"""
Core HTTP Client for the CargoLink Logistics API

Session-aware HTTP client: attaches the stored bearer credential to every
outbound request and tears the session down when a protected endpoint
answers 401.
"""

import logging
import threading
import time
from typing import Any, Callable, Dict, Mapping, Optional

import requests
from requests.exceptions import RequestException

from .gateway_config import GatewayConfig
from .request_builder import RequestBuilder, RequestDescriptor
from .response_handler import (
    RESPONSE_JSON,
    ResponseHandler,
    SessionExpiredError,
    StatusCodeHandler,
    TransportError,
)
from .session_store import SessionStore


LOGIN_PATH = '/auth/login'

SessionInvalidatedCallback = Callable[[RequestDescriptor], None]


class PerformanceMetrics:
    """Request counters for diagnostics"""

    def __init__(self):
        self.request_count = 0
        self.success_count = 0
        self.error_count = 0
        self.session_invalidations = 0
        self.total_response_time = 0.0
        self._lock = threading.Lock()

    def record_request(self, response_time: float, success: bool):
        with self._lock:
            self.request_count += 1
            self.total_response_time += response_time
            if success:
                self.success_count += 1
            else:
                self.error_count += 1

    def record_session_invalidation(self):
        with self._lock:
            self.session_invalidations += 1

    def get_metrics(self) -> Dict[str, Any]:
        with self._lock:
            average = self.total_response_time / self.request_count if self.request_count else 0.0
            return {
                'request_count': self.request_count,
                'success_count': self.success_count,
                'error_count': self.error_count,
                'session_invalidations': self.session_invalidations,
                'average_response_time': average
            }


class HTTPClient:
    """
    HTTP client for the logistics API.

    Features:
    - Bearer credential attached from the session store on every request
    - Session teardown and invalidation callback on 401 outside login
    - JSON or multipart request bodies, JSON/binary/text responses
    - Errors surfaced as APIError subclasses; nothing is retried
    """

    def __init__(
        self,
        config: GatewayConfig,
        session_store: SessionStore,
        on_session_invalidated: Optional[SessionInvalidatedCallback] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize HTTP client

        Args:
            config: Gateway configuration, fixed for the process lifetime
            session_store: Source of the bearer credential
            on_session_invalidated: Called once per request whose 401 tore
                the session down; the host application navigates back to
                its root (forced re-login) from here
            session: Optional preconfigured requests session
        """
        self.config = config
        self.session_store = session_store
        self.on_session_invalidated = on_session_invalidated
        self.session = session or requests.Session()
        self.request_builder = RequestBuilder()
        self.response_handler = ResponseHandler()
        self.metrics = PerformanceMetrics()
        self.logger = logging.getLogger(__name__)

        self._configure_session()

    def _configure_session(self):
        """Configure the requests session with default headers"""
        self.session.headers.update(self.config.default_headers)
        self.session.verify = self.config.verify_ssl

    # Interception hooks

    def _attach_credential(self, prepared: requests.PreparedRequest):
        """Outbound hook: add the bearer header when a credential is stored"""
        token = self.session_store.read_token()
        if token:
            prepared.headers['Authorization'] = f'Bearer {token}'
        else:
            prepared.headers.pop('Authorization', None)

    def _intercept_response(self, descriptor: RequestDescriptor, response: requests.Response):
        """
        Inbound hook: a 401 outside the login endpoint means the session
        expired, so both scopes are wiped and the host is notified before
        the error propagates. A 401 from login is a rejected password and
        passes through untouched.
        """
        if response.status_code != 401 or descriptor.references(LOGIN_PATH):
            return

        self.logger.warning(
            f"{descriptor.method} {descriptor.path} returned 401; clearing session"
        )
        self.session_store.clear()
        self.metrics.record_session_invalidation()
        if self.on_session_invalidated is not None:
            try:
                self.on_session_invalidated(descriptor)
            except Exception:
                # the caller is still owed the SessionExpiredError below
                self.logger.exception("Session invalidation callback failed")

        raise StatusCodeHandler.build_error(response, SessionExpiredError)

    # Dispatch

    def dispatch(self, descriptor: RequestDescriptor) -> Any:
        """
        Send one request and return its decoded body

        Args:
            descriptor: What to send

        Returns:
            Decoded JSON, bytes for binary operations, or text

        Raises:
            TransportError: No response was received
            SessionExpiredError: 401 on a protected endpoint
            APIError subclasses: Any other non-2xx status
        """
        start_time = time.time()
        success = False
        url = self.config.url_for(descriptor.path)

        try:
            request_kwargs = self.request_builder.build_request(descriptor, url)
            prepared = self.session.prepare_request(requests.Request(**request_kwargs))
            self._attach_credential(prepared)

            self.logger.info(f"{descriptor.method} {descriptor.path}")
            response = self._send(prepared)

            self._intercept_response(descriptor, response)
            result = self.response_handler.handle_response(
                response,
                descriptor.response_type,
                request_info={'method': descriptor.method, 'path': descriptor.path}
            )
            success = True
            return result

        finally:
            self.metrics.record_request(time.time() - start_time, success)

    def _send(self, prepared: requests.PreparedRequest) -> requests.Response:
        settings = self.session.merge_environment_settings(
            prepared.url, {}, None, self.config.verify_ssl, None
        )
        try:
            return self.session.send(prepared, timeout=self.config.timeout, **settings)
        except RequestException as e:
            self.logger.error(f"{prepared.method} {prepared.path_url} failed: {e}")
            raise TransportError(f"Request to {prepared.path_url} failed: {e}") from e

    def request(
        self,
        method: str,
        path: str,
        data: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        files: Optional[Mapping[str, Any]] = None,
        multipart: bool = False,
        response_type: str = RESPONSE_JSON,
        headers: Optional[Mapping[str, str]] = None
    ) -> Any:
        """Build a descriptor from arguments and dispatch it"""
        descriptor = RequestDescriptor(
            method=method,
            path=path,
            params=params,
            data=data,
            files=files,
            multipart=multipart,
            response_type=response_type,
            headers=headers or {}
        )
        return self.dispatch(descriptor)

    def get(self, path: str, params: Optional[Mapping[str, Any]] = None, **kwargs) -> Any:
        """Make GET request"""
        return self.request('GET', path, params=params, **kwargs)

    def post(self, path: str, data: Any = None, **kwargs) -> Any:
        """Make POST request"""
        return self.request('POST', path, data=data, **kwargs)

    def put(self, path: str, data: Any = None, **kwargs) -> Any:
        """Make PUT request"""
        return self.request('PUT', path, data=data, **kwargs)

    def patch(self, path: str, data: Any = None, **kwargs) -> Any:
        """Make PATCH request"""
        return self.request('PATCH', path, data=data, **kwargs)

    def delete(self, path: str, **kwargs) -> Any:
        """Make DELETE request"""
        return self.request('DELETE', path, **kwargs)

    def upload(self, path: str, files: Mapping[str, Any], data: Optional[Mapping[str, Any]] = None,
               method: str = 'POST') -> Any:
        """Send a multipart request"""
        return self.request(method, path, data=data, files=files, multipart=True)

    def download(self, path: str, params: Optional[Mapping[str, Any]] = None) -> bytes:
        """GET a binary representation"""
        return self.request('GET', path, params=params, response_type='binary')

    def health_check(self) -> Dict[str, Any]:
        """Probe the server's /health route, which lives outside the /api prefix"""
        base = self.config.absolute_base_url()
        health_url = base[:-len('/api')] + '/health' if base.endswith('/api') else base + '/health'
        try:
            response = self.session.get(health_url, timeout=5)
            return {
                'status': 'healthy' if response.ok else 'unhealthy',
                'status_code': response.status_code
            }
        except RequestException as e:
            return {
                'status': 'unhealthy',
                'error': str(e)
            }

    def get_metrics(self) -> Dict[str, Any]:
        return self.metrics.get_metrics()

    def close(self):
        """Close the HTTP client and cleanup resources"""
        self.session.close()
        self.logger.info("HTTP client session closed")
