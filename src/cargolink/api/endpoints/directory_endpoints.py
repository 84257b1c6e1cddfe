"""
Counterparty Directory Endpoints for the CargoLink Logistics API

Consignees, customers, exporters, vendors and delivery agents share one
shape: CRUD, bulk delete and spreadsheet import.
"""

from typing import Any, Dict, List, Mapping

from .base_endpoint import BaseEndpoint, ResourceId


class DirectoryEndpoints(BaseEndpoint):
    """Base for the counterparty directories; subclasses only set the path"""

    resource_path = ''

    def _get_base_path(self) -> str:
        return self.resource_path

    def list_entries(self) -> List[Dict[str, Any]]:
        return self._list_resources()

    def create_entry(self, entry: Mapping[str, Any]) -> Dict[str, Any]:
        return self._create_resource(dict(entry))

    def update_entry(self, entry_id: ResourceId, updates: Mapping[str, Any]) -> Dict[str, Any]:
        return self._update_resource(entry_id, dict(updates))

    def delete_entry(self, entry_id: ResourceId) -> Any:
        return self._delete_resource(entry_id)

    def delete_all_entries(self) -> Any:
        return self._delete_all()

    def import_entries(self, file: Any) -> Dict[str, Any]:
        return self._import(file)


class ConsigneeEndpoints(DirectoryEndpoints):
    resource_path = '/consignees'


class CustomerEndpoints(DirectoryEndpoints):
    resource_path = '/customers'


class ExporterEndpoints(DirectoryEndpoints):
    resource_path = '/exporters'


class VendorEndpoints(DirectoryEndpoints):
    resource_path = '/vendors'


class DeliveryAgentEndpoints(DirectoryEndpoints):
    resource_path = '/delivery-agents'
