"""
Request Builder for CargoLink Logistics API Client

Describes outbound requests and turns them into keyword arguments for
``requests.Request``, choosing between JSON and multipart encoding.
"""

import json
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .response_handler import RESPONSE_JSON, RESPONSE_BINARY, RESPONSE_TYPES


class RequestValidationError(ValueError):
    """Raised when a request descriptor is malformed"""
    pass


ALLOWED_METHODS = ('GET', 'POST', 'PUT', 'PATCH', 'DELETE')


def _freeze(mapping: Optional[Mapping[str, Any]]) -> Optional[Mapping[str, Any]]:
    if mapping is None:
        return None
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class RequestDescriptor:
    """
    Immutable description of one API call.

    ``files`` switches the request to multipart encoding; ``data`` is then
    sent as form fields alongside the files. Without files, ``data`` is
    sent as a JSON body.
    """
    method: str
    path: str
    params: Optional[Mapping[str, Any]] = None
    data: Any = None
    files: Optional[Mapping[str, Any]] = None
    multipart: bool = False
    response_type: str = RESPONSE_JSON
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        method = self.method.upper()
        if method not in ALLOWED_METHODS:
            raise RequestValidationError(f"Unsupported HTTP method: {self.method}")
        if not self.path.startswith('/'):
            raise RequestValidationError(f"Path must start with '/': {self.path}")
        if self.response_type not in RESPONSE_TYPES:
            raise RequestValidationError(f"Unknown response type: {self.response_type}")

        object.__setattr__(self, 'method', method)
        object.__setattr__(self, 'params', _freeze(self.params))
        object.__setattr__(self, 'files', _freeze(self.files))
        object.__setattr__(self, 'headers', _freeze(self.headers))
        if self.files:
            object.__setattr__(self, 'multipart', True)

    @property
    def is_binary(self) -> bool:
        return self.response_type == RESPONSE_BINARY

    def references(self, fragment: str) -> bool:
        """True when the request path contains the given fragment"""
        return fragment in self.path


class RequestBuilder:
    """Builds ``requests.Request`` keyword arguments from descriptors"""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def build_request(self, descriptor: RequestDescriptor, url: str) -> Dict[str, Any]:
        """
        Build keyword arguments for ``requests.Request``

        Args:
            descriptor: What to send
            url: Absolute URL the descriptor path resolves to

        Returns:
            Keyword arguments (method, url, headers, params, json/data/files)
        """
        headers: Dict[str, Optional[str]] = dict(descriptor.headers)
        request_kwargs: Dict[str, Any] = {
            'method': descriptor.method,
            'url': url,
            'params': self._clean_params(descriptor.params),
        }

        if descriptor.multipart:
            # None removes the session's JSON content type so requests
            # generates multipart/form-data with its boundary
            headers['Content-Type'] = None
            request_kwargs['files'] = self._build_files(descriptor)
            if descriptor.data:
                request_kwargs['data'] = self._form_fields(descriptor.data)
        elif descriptor.data is not None:
            request_kwargs['json'] = descriptor.data

        if descriptor.is_binary:
            headers.setdefault('Accept', '*/*')

        request_kwargs['headers'] = headers
        return request_kwargs

    @staticmethod
    def _clean_params(params: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
        if not params:
            return None
        cleaned = {k: v for k, v in params.items() if v is not None and v != ''}
        return cleaned or None

    @staticmethod
    def _form_fields(data: Any) -> Dict[str, Any]:
        if not isinstance(data, Mapping):
            raise RequestValidationError("Multipart form fields must be a mapping")
        fields = {}
        for key, value in data.items():
            if value is None:
                continue
            if isinstance(value, bool):
                value = 'true' if value else 'false'
            elif isinstance(value, (dict, list)):
                # nested records travel as JSON strings inside the form
                value = json.dumps(value)
            fields[key] = value
        return fields

    @staticmethod
    def _build_files(descriptor: RequestDescriptor) -> List[Tuple[str, Any]]:
        """
        Return the ``files`` argument for requests as (field, spec) pairs.

        A list value sends several files under one field name. An operation
        with no file attached still goes out as multipart.
        """
        files = _MultipartFields()
        for name, value in (descriptor.files or {}).items():
            if isinstance(value, list):
                files.extend((name, item) for item in value)
            else:
                files.append((name, value))
        return files


class _MultipartFields(list):
    """File list that forces requests into multipart mode even when empty"""

    def __bool__(self) -> bool:
        return True


def file_part(filename: str, content: Any, content_type: Optional[str] = None) -> Tuple:
    """Build a requests file tuple: (filename, content[, content_type])"""
    if content_type:
        return (filename, content, content_type)
    return (filename, content)
