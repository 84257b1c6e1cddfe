"""
Base Endpoint Class for the CargoLink Logistics API

Abstract base class providing the request patterns shared by every
resource group: path building, CRUD, bulk delete, bulk import and
binary retrieval.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import quote

from ..client import HTTPClient
from ..response_handler import APIError, RESPONSE_BINARY


ResourceId = Union[str, int]


class EndpointError(ValueError):
    """Raised when an endpoint is called with unusable arguments"""
    pass


class BaseEndpoint(ABC):
    """
    Abstract base class for logistics API resource groups.

    Subclasses only name their base path and declare one method per
    HTTP verb + URL; the helpers here do the dispatching.
    """

    def __init__(self, client: HTTPClient):
        """
        Initialize endpoint with HTTP client

        Args:
            client: Configured HTTPClient instance
        """
        self.client = client
        self.logger = logging.getLogger(self.__class__.__name__)
        self.base_path = self._get_base_path()

    @abstractmethod
    def _get_base_path(self) -> str:
        """Return the base API path for this endpoint (e.g., '/shipments')"""
        pass

    def _build_endpoint(self, *segments: ResourceId) -> str:
        """
        Build the path below the base path

        Args:
            *segments: Path segments; identifiers are URL-quoted

        Returns:
            Complete endpoint path
        """
        endpoint = self.base_path.rstrip('/')
        for segment in segments:
            if segment is None or segment == '':
                raise EndpointError(f"Empty path segment for {self.base_path}")
            endpoint += '/' + quote(str(segment), safe='')
        return endpoint

    @staticmethod
    def _query(**params) -> Optional[Dict[str, Any]]:
        """Query parameters with unset values dropped"""
        cleaned = {k: v for k, v in params.items() if v is not None}
        return cleaned or None

    def _call(self, operation: str, method: str, path: str, **kwargs) -> Any:
        """Dispatch through the client, logging failures before re-raising"""
        try:
            return self.client.request(method, path, **kwargs)
        except APIError as e:
            self.logger.error(
                f"{operation} failed: {e} (status: {e.status_code})",
                extra={'operation': operation, 'path': path}
            )
            raise

    # Common CRUD operations

    def _list_resources(self, *segments: ResourceId, params: Optional[Mapping[str, Any]] = None) -> Any:
        return self._call('list', 'GET', self._build_endpoint(*segments), params=params)

    def _get_resource(self, resource_id: ResourceId, *segments: ResourceId,
                      params: Optional[Mapping[str, Any]] = None) -> Any:
        return self._call('get', 'GET', self._build_endpoint(resource_id, *segments), params=params)

    def _create_resource(self, data: Any, *segments: ResourceId) -> Any:
        return self._call('create', 'POST', self._build_endpoint(*segments), data=data)

    def _update_resource(self, resource_id: ResourceId, data: Any, *segments: ResourceId,
                         method: str = 'PUT') -> Any:
        return self._call('update', method, self._build_endpoint(resource_id, *segments), data=data)

    def _delete_resource(self, resource_id: ResourceId, *segments: ResourceId) -> Any:
        return self._call('delete', 'DELETE', self._build_endpoint(resource_id, *segments))

    def _delete_all(self) -> Any:
        return self._call('delete_all', 'DELETE', self._build_endpoint('delete-all'))

    def _post_action(self, *segments: ResourceId, data: Any = None) -> Any:
        return self._call('action', 'POST', self._build_endpoint(*segments), data=data)

    # Multipart and binary operations

    def _upload(self, path: str, files: Optional[Mapping[str, Any]] = None,
                data: Optional[Mapping[str, Any]] = None, method: str = 'POST') -> Any:
        """Send a multipart request; the body is never JSON-encoded"""
        return self._call('upload', method, path, data=data, files=files, multipart=True)

    def _import(self, file: Any, field_name: str = 'file') -> Any:
        """Bulk import a spreadsheet/CSV file"""
        if file is None:
            raise EndpointError("An import file is required")
        return self._upload(self._build_endpoint('import'), files={field_name: file})

    def _download(self, *segments: ResourceId, params: Optional[Mapping[str, Any]] = None) -> bytes:
        """Retrieve a binary representation"""
        return self._call('download', 'GET', self._build_endpoint(*segments),
                          params=params, response_type=RESPONSE_BINARY)
