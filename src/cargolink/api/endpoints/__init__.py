"""
API Endpoints Package for the CargoLink Logistics Client

Contains one endpoint class per API resource group.
"""

from .base_endpoint import BaseEndpoint, EndpointError
from .auth_endpoints import AuthEndpoints, LoginResult
from .shipment_endpoints import ShipmentEndpoints
from .fleet_endpoints import FleetEndpoints, VesselEndpoints
from .analytics_endpoints import AnalyticsEndpoints, ReportEndpoints
from .user_endpoints import UserEndpoints, AuditLogEndpoints, NotificationEndpoints
from .operations_endpoints import DeliveryNoteEndpoints, ClearanceEndpoints, ContainerEndpoints
from .billing_endpoints import InvoiceEndpoints, PaymentEndpoints, PaymentItemEndpoints
from .directory_endpoints import (
    DirectoryEndpoints,
    ConsigneeEndpoints,
    CustomerEndpoints,
    ExporterEndpoints,
    VendorEndpoints,
    DeliveryAgentEndpoints
)

__all__ = [
    'BaseEndpoint',
    'EndpointError',
    'AuthEndpoints',
    'LoginResult',
    'ShipmentEndpoints',
    'FleetEndpoints',
    'VesselEndpoints',
    'AnalyticsEndpoints',
    'ReportEndpoints',
    'UserEndpoints',
    'AuditLogEndpoints',
    'NotificationEndpoints',
    'DeliveryNoteEndpoints',
    'ClearanceEndpoints',
    'ContainerEndpoints',
    'InvoiceEndpoints',
    'PaymentEndpoints',
    'PaymentItemEndpoints',
    'DirectoryEndpoints',
    'ConsigneeEndpoints',
    'CustomerEndpoints',
    'ExporterEndpoints',
    'VendorEndpoints',
    'DeliveryAgentEndpoints'
]
