"""
Shipment Endpoints for the CargoLink Logistics API

Shipment records with their documents, containers and bills of lading.
"""

from typing import Any, Dict, List, Mapping, Optional

from .base_endpoint import BaseEndpoint, ResourceId


class ShipmentEndpoints(BaseEndpoint):
    """
    Shipment management API endpoints.

    Creation goes out as multipart because a shipment may be created
    together with its attachments; updates are plain JSON.
    """

    def _get_base_path(self) -> str:
        return '/shipments'

    def list_shipments(self, search: Optional[str] = None, status: Optional[str] = None) -> List[Dict[str, Any]]:
        return self._list_resources(params=self._query(search=search, status=status))

    def get_shipment(self, shipment_id: ResourceId) -> Dict[str, Any]:
        return self._get_resource(shipment_id)

    def create_shipment(
        self,
        fields: Mapping[str, Any],
        files: Optional[Mapping[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Create a shipment, optionally with attachments

        Args:
            fields: Shipment form fields; nested values are sent as JSON strings
            files: Mapping of form field name to a file (or list of files)

        Returns:
            Created shipment record
        """
        return self._upload(self._build_endpoint(), files=files, data=fields)

    def update_shipment(self, shipment_id: ResourceId, updates: Mapping[str, Any]) -> Dict[str, Any]:
        return self._update_resource(shipment_id, dict(updates))

    def delete_shipment(self, shipment_id: ResourceId) -> Any:
        return self._delete_resource(shipment_id)

    def import_shipments(self, file: Any) -> Dict[str, Any]:
        return self._import(file)

    def export_shipments(self, search: Optional[str] = None, status: Optional[str] = None) -> bytes:
        """Spreadsheet export of the shipment list"""
        return self._download('export', params=self._query(search=search, status=status))

    # Documents

    def upload_document(
        self,
        shipment_id: ResourceId,
        file: Any,
        document_type: Optional[str] = None
    ) -> Dict[str, Any]:
        data = {'document_type': document_type} if document_type else None
        return self._upload(self._build_endpoint(shipment_id, 'documents'), files={'file': file}, data=data)

    def delete_document(self, shipment_id: ResourceId, document_id: ResourceId) -> Any:
        return self._delete_resource(shipment_id, 'documents', document_id)

    def view_document(self, shipment_id: ResourceId, document_id: ResourceId) -> bytes:
        """Inline rendition of a document, as raw bytes"""
        return self._download(shipment_id, 'documents', document_id, 'view')

    def download_document(self, shipment_id: ResourceId, document_id: ResourceId) -> bytes:
        """Attachment rendition of a document, as raw bytes"""
        return self._download(shipment_id, 'documents', document_id, 'download')

    # Containers

    def add_container(self, shipment_id: ResourceId, container: Mapping[str, Any]) -> Dict[str, Any]:
        return self._create_resource(dict(container), shipment_id, 'containers')

    def update_container(self, shipment_id: ResourceId, container_id: ResourceId,
                         updates: Mapping[str, Any]) -> Dict[str, Any]:
        return self._update_resource(shipment_id, dict(updates), 'containers', container_id)

    def delete_container(self, shipment_id: ResourceId, container_id: ResourceId) -> Any:
        return self._delete_resource(shipment_id, 'containers', container_id)

    # Bills of lading

    def add_bill_of_lading(self, shipment_id: ResourceId, bill: Mapping[str, Any]) -> Dict[str, Any]:
        return self._create_resource(dict(bill), shipment_id, 'bls')

    def update_bill_of_lading(self, shipment_id: ResourceId, bl_id: ResourceId,
                              updates: Mapping[str, Any]) -> Dict[str, Any]:
        return self._update_resource(shipment_id, dict(updates), 'bls', bl_id)

    def delete_bill_of_lading(self, shipment_id: ResourceId, bl_id: ResourceId) -> Any:
        return self._delete_resource(shipment_id, 'bls', bl_id)
