"""
Gateway facade for the CargoLink Logistics API

One object per process holding the HTTP client, the session store and
every resource group.
"""

import logging
from typing import Optional

import requests

from ..core.config_manager import AppConfig
from .client import HTTPClient, SessionInvalidatedCallback
from .gateway_config import GatewayConfig
from .session_store import SessionStore
from .endpoints import (
    AuthEndpoints,
    ShipmentEndpoints,
    FleetEndpoints,
    VesselEndpoints,
    AnalyticsEndpoints,
    ReportEndpoints,
    UserEndpoints,
    AuditLogEndpoints,
    NotificationEndpoints,
    DeliveryNoteEndpoints,
    ClearanceEndpoints,
    ContainerEndpoints,
    InvoiceEndpoints,
    PaymentEndpoints,
    PaymentItemEndpoints,
    ConsigneeEndpoints,
    CustomerEndpoints,
    ExporterEndpoints,
    VendorEndpoints,
    DeliveryAgentEndpoints
)


class LogisticsGateway:
    """
    Entry point to the logistics API.

    Example:
        gateway = LogisticsGateway.from_config(config, on_session_invalidated=show_login)
        gateway.auth.login('dispatcher', 'secret', remember=True)
        shipments = gateway.shipments.list_shipments(status='In Transit')
    """

    def __init__(
        self,
        config: GatewayConfig,
        session_store: Optional[SessionStore] = None,
        on_session_invalidated: Optional[SessionInvalidatedCallback] = None,
        session: Optional[requests.Session] = None
    ):
        self.config = config
        self.session_store = session_store or SessionStore()
        self.client = HTTPClient(config, self.session_store, on_session_invalidated, session)
        self.logger = logging.getLogger(__name__)

        self.auth = AuthEndpoints(self.client, self.session_store)
        self.shipments = ShipmentEndpoints(self.client)
        self.fleet = FleetEndpoints(self.client)
        self.vessels = VesselEndpoints(self.client)
        self.analytics = AnalyticsEndpoints(self.client)
        self.reports = ReportEndpoints(self.client)
        self.users = UserEndpoints(self.client)
        self.logs = AuditLogEndpoints(self.client)
        self.notifications = NotificationEndpoints(self.client)
        self.delivery_notes = DeliveryNoteEndpoints(self.client)
        self.clearance = ClearanceEndpoints(self.client)
        self.containers = ContainerEndpoints(self.client)
        self.invoices = InvoiceEndpoints(self.client)
        self.payments = PaymentEndpoints(self.client)
        self.payment_items = PaymentItemEndpoints(self.client)
        self.consignees = ConsigneeEndpoints(self.client)
        self.customers = CustomerEndpoints(self.client)
        self.exporters = ExporterEndpoints(self.client)
        self.vendors = VendorEndpoints(self.client)
        self.delivery_agents = DeliveryAgentEndpoints(self.client)

    @classmethod
    def from_config(
        cls,
        app_config: AppConfig,
        on_session_invalidated: Optional[SessionInvalidatedCallback] = None,
        session_store: Optional[SessionStore] = None
    ) -> 'LogisticsGateway':
        """Resolve the gateway configuration once and wire every component"""
        gateway_config = GatewayConfig.from_app_config(app_config)
        store = session_store or SessionStore.from_config(app_config.session)
        gateway = cls(gateway_config, store, on_session_invalidated)
        gateway.logger.info(f"Gateway ready ({app_config.environment}): {gateway_config.base_url}")
        return gateway

    @property
    def is_authenticated(self) -> bool:
        return self.session_store.has_session()

    def close(self):
        self.client.close()

    def __enter__(self) -> 'LogisticsGateway':
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
