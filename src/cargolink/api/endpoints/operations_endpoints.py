"""
Operations Endpoints for the CargoLink Logistics API

Delivery notes, customs clearance schedules and the container listing.
"""

from typing import Any, Dict, List, Mapping, Optional

from .base_endpoint import BaseEndpoint, EndpointError, ResourceId


class DeliveryNoteEndpoints(BaseEndpoint):
    """
    Delivery note endpoints.

    Updating a note may attach signed paperwork; with files the update is
    sent as multipart, without them as JSON.
    """

    def _get_base_path(self) -> str:
        return '/delivery-notes'

    def list_delivery_notes(self, search: Optional[str] = None, status: Optional[str] = None) -> List[Dict[str, Any]]:
        return self._list_resources(params=self._query(search=search, status=status))

    def get_delivery_note(self, note_id: ResourceId) -> Dict[str, Any]:
        return self._get_resource(note_id)

    def create_delivery_note(self, note: Mapping[str, Any]) -> Dict[str, Any]:
        return self._create_resource(dict(note))

    def update_delivery_note(
        self,
        note_id: ResourceId,
        updates: Mapping[str, Any],
        files: Optional[List[Any]] = None
    ) -> Dict[str, Any]:
        if files:
            return self._upload(self._build_endpoint(note_id), files={'files': list(files)},
                                data=updates, method='PUT')
        return self._update_resource(note_id, dict(updates))

    def update_status(self, note_id: ResourceId, status: str) -> Dict[str, Any]:
        if not status:
            raise EndpointError("A delivery note status is required")
        return self._update_resource(note_id, {'status': status}, 'status')

    def delete_delivery_note(self, note_id: ResourceId) -> Any:
        return self._delete_resource(note_id)


class ClearanceEndpoints(BaseEndpoint):
    """Customs clearance schedule endpoints"""

    def _get_base_path(self) -> str:
        return '/clearance'

    def list_clearances(
        self,
        search: Optional[str] = None,
        clearance_type: Optional[str] = None,
        transport_mode: Optional[str] = None,
        date: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        params = self._query(search=search, type=clearance_type, transport_mode=transport_mode, date=date)
        return self._list_resources(params=params)

    def create_clearance(self, clearance: Mapping[str, Any]) -> Dict[str, Any]:
        return self._create_resource(dict(clearance))

    def update_clearance(self, clearance_id: ResourceId, updates: Mapping[str, Any]) -> Dict[str, Any]:
        return self._update_resource(clearance_id, dict(updates))

    def delete_clearance(self, clearance_id: ResourceId) -> Any:
        return self._delete_resource(clearance_id)


class ContainerEndpoints(BaseEndpoint):
    """Containers across all shipments, paginated"""

    DEFAULT_PAGE_SIZE = 50

    def _get_base_path(self) -> str:
        return '/containers'

    def list_containers(
        self,
        search: Optional[str] = None,
        sort: Optional[str] = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE
    ) -> Dict[str, Any]:
        if page < 1 or limit < 1:
            raise EndpointError("page and limit must be positive")
        return self._list_resources(params=self._query(search=search, sort=sort, page=page, limit=limit))
