"""
Response Handler for CargoLink Logistics API Client

Maps HTTP status codes onto the API error hierarchy and decodes response
bodies according to the representation the caller asked for.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

import requests
from requests.exceptions import JSONDecodeError

from ..core.error_handler import CargoLinkError, ErrorSeverity


RESPONSE_JSON = 'json'
RESPONSE_BINARY = 'binary'
RESPONSE_TEXT = 'text'
RESPONSE_TYPES = (RESPONSE_JSON, RESPONSE_BINARY, RESPONSE_TEXT)


class ResponseProcessingError(CargoLinkError):
    """Raised when a successful response body cannot be decoded"""
    pass


class APIError(CargoLinkError):
    """A request reached the logistics API and was answered with a non-2xx status"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        response: Optional[requests.Response] = None,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM
    ):
        super().__init__(message, severity)
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        self.response = response

    @property
    def body(self) -> Any:
        """Decoded error body as returned by the server, if any"""
        return self.details.get('body')


class TransportError(APIError):
    """Raised when no response was received (connection refused, timeout, TLS)"""

    def __init__(self, message: str):
        super().__init__(message, severity=ErrorSeverity.HIGH)


class ValidationError(APIError):
    """400: the server rejected the payload or query"""
    pass


class AuthenticationError(APIError):
    """401: credentials missing, invalid or rejected"""
    pass


class SessionExpiredError(AuthenticationError):
    """Raised for a 401 on a protected endpoint, after the session was torn down"""
    pass


class AuthorizationError(APIError):
    """403: the logged-in role may not perform the operation"""
    pass


class NotFoundError(APIError):
    """404: unknown record or route"""
    pass


class ConflictError(APIError):
    """409: duplicate or conflicting record"""
    pass


class RateLimitError(APIError):
    """429: too many requests"""
    pass


class ServerError(APIError):
    """5xx: the server failed to process the request"""

    def __init__(self, *args, **kwargs):
        kwargs.setdefault('severity', ErrorSeverity.HIGH)
        super().__init__(*args, **kwargs)


class ServiceUnavailableError(ServerError):
    """503: the API is down for maintenance or overloaded"""
    pass


@dataclass
class ResponseMetadata:
    """Response facts recorded in the audit log"""
    status_code: int
    response_time_ms: float
    content_length: int
    content_type: str
    timestamp: datetime
    request_id: Optional[str] = None


class StatusCodeHandler:
    """Maps HTTP status codes onto the APIError hierarchy"""

    ERROR_MAPPINGS = {
        400: ValidationError,
        401: AuthenticationError,
        403: AuthorizationError,
        404: NotFoundError,
        409: ConflictError,
        429: RateLimitError,
        500: ServerError,
        502: ServerError,
        503: ServiceUnavailableError,
        504: ServerError
    }

    @classmethod
    def error_class_for(cls, status_code: int) -> type:
        if status_code in cls.ERROR_MAPPINGS:
            return cls.ERROR_MAPPINGS[status_code]
        if status_code >= 500:
            return ServerError
        return APIError

    @classmethod
    def build_error(
        cls,
        response: requests.Response,
        error_class: Optional[type] = None
    ) -> APIError:
        """Build the exception describing a non-2xx response"""
        status_code = response.status_code
        error_details = cls._extract_error_details(response)
        exception_class = error_class or cls.error_class_for(status_code)

        return exception_class(
            message=error_details.get('message') or f'HTTP {status_code} error',
            status_code=status_code,
            error_code=error_details.get('error_code'),
            details=error_details,
            response=response
        )

    @classmethod
    def handle_status_code(cls, response: requests.Response) -> bool:
        """
        Check response status code and raise the matching exception

        Returns:
            True if status indicates success, raises exception otherwise
        """
        if 200 <= response.status_code < 300:
            return True

        raise cls.build_error(response)

    @staticmethod
    def _extract_error_details(response: requests.Response) -> Dict[str, Any]:
        """Message, code and raw body of an error response"""
        try:
            error_data = response.json()
        except (JSONDecodeError, ValueError):
            return {
                'message': response.reason or response.text[:200],
                'body': response.text[:500]
            }

        if isinstance(error_data, dict):
            error_info = error_data.get('error')
            if isinstance(error_info, dict):
                return {
                    'message': error_info.get('message'),
                    'error_code': error_info.get('code'),
                    'body': error_data
                }

            # The logistics API answers {"error": "..."} or {"message": "..."}
            return {
                'message': error_info or error_data.get('message') or error_data.get('detail'),
                'error_code': error_data.get('code', error_data.get('error_code')),
                'body': error_data
            }

        return {'message': str(error_data), 'body': error_data}


class ResponseParser:
    """Decodes response bodies into the requested representation"""

    @staticmethod
    def parse_json_response(response: requests.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except (JSONDecodeError, ValueError) as e:
            raise ResponseProcessingError(f"Invalid JSON response: {e}") from e

    @staticmethod
    def parse_text_response(response: requests.Response) -> str:
        return response.text

    @staticmethod
    def parse_binary_response(response: requests.Response) -> bytes:
        return response.content

    @classmethod
    def parse_response(cls, response: requests.Response, response_type: str = RESPONSE_JSON) -> Any:
        """Parse response according to the requested representation"""
        if response_type == RESPONSE_BINARY:
            return cls.parse_binary_response(response)
        if response_type == RESPONSE_TEXT:
            return cls.parse_text_response(response)
        return cls.parse_json_response(response)


class AuditLogger:
    """Logs API responses for audit purposes"""

    def __init__(self, logger_name: Optional[str] = None):
        self.logger = logging.getLogger(logger_name or __name__)

    def log_response(self, metadata: ResponseMetadata, request_info: Optional[Dict[str, Any]] = None):
        log_data = {
            'timestamp': metadata.timestamp.isoformat(),
            'status_code': metadata.status_code,
            'response_time_ms': metadata.response_time_ms,
            'request_id': metadata.request_id,
            'content_length': metadata.content_length
        }

        if request_info:
            log_data.update({
                'method': request_info.get('method'),
                'path': request_info.get('path')
            })

        if 200 <= metadata.status_code < 300:
            self.logger.debug(f"API Response: {json.dumps(log_data)}")
        else:
            self.logger.warning(f"API Error Response: {json.dumps(log_data)}")


class ResponseHandler:
    """
    Response handler for logistics API responses.

    Raises the matching APIError subclass for non-2xx statuses and
    otherwise returns the decoded body. Binary responses are returned as
    raw bytes without any JSON decoding attempt.
    """

    def __init__(self):
        self.status_handler = StatusCodeHandler()
        self.parser = ResponseParser()
        self.audit_logger = AuditLogger()
        self.logger = logging.getLogger(__name__)

    def handle_response(
        self,
        response: requests.Response,
        response_type: str = RESPONSE_JSON,
        request_info: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        Process HTTP response

        Args:
            response: requests.Response object
            response_type: One of 'json', 'binary', 'text'
            request_info: Information about the original request for logging

        Returns:
            Decoded response body

        Raises:
            APIError subclasses based on response status,
            ResponseProcessingError for undecodable JSON bodies
        """
        self.audit_logger.log_response(self.extract_metadata(response), request_info)
        self.status_handler.handle_status_code(response)
        return self.parser.parse_response(response, response_type)

    @staticmethod
    def extract_metadata(response: requests.Response) -> ResponseMetadata:
        """Audit metadata of a response"""
        response_time_ms = 0.0
        if getattr(response, 'elapsed', None) is not None:
            response_time_ms = response.elapsed.total_seconds() * 1000

        return ResponseMetadata(
            status_code=response.status_code,
            response_time_ms=response_time_ms,
            content_length=len(response.content or b''),
            content_type=response.headers.get('content-type', ''),
            timestamp=datetime.now(),
            request_id=response.headers.get('x-request-id')
        )

    def get_error_summary(self, error: APIError) -> Dict[str, Any]:
        """Summary of an error with a hint for the person at the keyboard"""
        summary = {
            'error_type': type(error).__name__,
            'message': str(error),
            'status_code': error.status_code,
            'error_code': error.error_code,
            'timestamp': datetime.now().isoformat()
        }

        if isinstance(error, SessionExpiredError):
            summary['user_action'] = 'Your session has expired. Please log in again'
        elif isinstance(error, AuthenticationError):
            summary['user_action'] = 'Invalid username or password'
        elif isinstance(error, AuthorizationError):
            summary['user_action'] = 'You do not have permission to perform this action'
        elif isinstance(error, ValidationError):
            summary['user_action'] = 'Please check your input and try again'
        elif isinstance(error, NotFoundError):
            summary['user_action'] = 'The requested resource was not found'
        elif isinstance(error, TransportError):
            summary['user_action'] = 'The server could not be reached. Check your connection'
        elif isinstance(error, ServerError):
            summary['user_action'] = 'The server failed to process the request. Please try again later'
        else:
            summary['user_action'] = 'An error occurred. Please try again or contact support'

        return summary
