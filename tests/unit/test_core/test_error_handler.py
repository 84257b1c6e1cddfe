"""Unit tests for ErrorHandler severity mapping and callback dispatch."""

import logging
from unittest.mock import Mock

import pytest

from cargolink.api.response_handler import APIError, ServerError, SessionExpiredError, TransportError
from cargolink.core.error_handler import (
    CargoLinkError,
    ConfigurationError,
    ErrorHandler,
    ErrorSeverity,
    SessionStorageError,
)


class TestErrorHandler:

    @pytest.fixture
    def handler(self):
        return ErrorHandler()

    @pytest.mark.unit
    @pytest.mark.parametrize("error,severity", [
        (CargoLinkError("generic"), ErrorSeverity.MEDIUM),
        (ConfigurationError("bad config"), ErrorSeverity.HIGH),
        (SessionStorageError("disk full"), ErrorSeverity.MEDIUM),
        (TransportError("refused"), ErrorSeverity.HIGH),
        (ServerError("boom", status_code=500), ErrorSeverity.HIGH),
        (APIError("teapot", status_code=418), ErrorSeverity.MEDIUM),
        (PermissionError("denied"), ErrorSeverity.HIGH),
        (RuntimeError("other"), ErrorSeverity.MEDIUM),
    ])
    def test_severity(self, handler, error, severity):
        assert handler.get_error_severity(error) == severity

    @pytest.mark.unit
    def test_logged_at_matching_level(self, handler, caplog):
        with caplog.at_level(logging.INFO, logger="cargolink.core.error_handler"):
            handler.handle_error(ConfigurationError("missing origin"), "Loading configuration")

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.getMessage() == "Loading configuration: missing origin"

    @pytest.mark.unit
    def test_most_specific_callback_runs(self, handler):
        api_callback = Mock()
        expired_callback = Mock()
        handler.register_error_callback(APIError, api_callback)
        handler.register_error_callback(SessionExpiredError, expired_callback)
        error = SessionExpiredError("expired", status_code=401)

        handler.handle_error(error)

        expired_callback.assert_called_once_with(error)
        api_callback.assert_not_called()

    @pytest.mark.unit
    def test_base_class_callback_used_for_subclass(self, handler):
        api_callback = Mock()
        handler.register_error_callback(APIError, api_callback)

        handler.handle_error(TransportError("refused"))

        api_callback.assert_called_once()

    @pytest.mark.unit
    def test_unregistered_error_only_logged(self, handler):
        assert handler.handle_error(ValueError("bad")) == ErrorSeverity.MEDIUM
