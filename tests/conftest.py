"""
Pytest configuration and shared fixtures for CargoLink testing.

HTTP traffic is faked at the transport seam: ``Session.send`` is replaced
by a FakeTransport answering with real ``requests.Response`` objects.
"""

import logging
from unittest.mock import Mock

import pytest
import requests

from cargolink.api.client import HTTPClient
from cargolink.api.gateway import LogisticsGateway
from cargolink.api.gateway_config import GatewayConfig, resolve_base_url
from cargolink.api.session_store import MemorySessionScope, SessionStore
from cargolink.core.logging_manager import LoggingManager

from tests.fixtures.http_fakes import FakeTransport


@pytest.fixture(autouse=True)
def reset_logging_singleton():
    """Keep the logging singleton and its handlers from leaking between tests"""
    saved_level = logging.getLogger().level
    LoggingManager.reset()
    yield
    LoggingManager.reset()
    logging.getLogger().setLevel(saved_level)


@pytest.fixture
def gateway_config():
    return GatewayConfig(base_url=resolve_base_url("development", "localhost"))


@pytest.fixture
def durable_scope():
    return MemorySessionScope()


@pytest.fixture
def ephemeral_scope():
    return MemorySessionScope()


@pytest.fixture
def session_store(durable_scope, ephemeral_scope):
    return SessionStore(durable=durable_scope, ephemeral=ephemeral_scope)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def http_session(transport):
    session = requests.Session()
    session.trust_env = False
    session.send = transport
    return session


@pytest.fixture
def on_invalidated():
    """Navigation hook stand-in"""
    return Mock()


@pytest.fixture
def http_client(gateway_config, session_store, on_invalidated, http_session):
    return HTTPClient(gateway_config, session_store, on_invalidated, session=http_session)


@pytest.fixture
def gateway(gateway_config, session_store, on_invalidated, http_session):
    return LogisticsGateway(gateway_config, session_store, on_invalidated, session=http_session)
