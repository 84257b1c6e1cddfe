"""CargoLink - Logistics API Gateway Client

Session-aware Python client for the shipment, fleet, billing and
clearance API of the logistics management system.
"""

__version__ = "1.0.0"
__author__ = "CargoLink Team"
__description__ = "Logistics API Gateway Client"

from .api import LogisticsGateway, GatewayConfig, SessionStore
from .core import AppConfig, ConfigManager

__all__ = ["LogisticsGateway", "GatewayConfig", "SessionStore", "AppConfig", "ConfigManager"]
