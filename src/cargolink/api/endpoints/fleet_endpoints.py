"""
Fleet Endpoints for the CargoLink Logistics API

Fleet assets (trucks, trailers, equipment) and the vessel register.
"""

from typing import Any, Dict, List, Mapping

from .base_endpoint import BaseEndpoint, ResourceId


class FleetEndpoints(BaseEndpoint):
    """
    Fleet asset API endpoints.

    Provides methods for:
    - Asset CRUD operations
    - Bulk import and bulk delete
    - Fleet summary statistics
    """

    def _get_base_path(self) -> str:
        return '/fleet'

    def list_assets(self) -> List[Dict[str, Any]]:
        return self._list_resources()

    def get_asset(self, asset_id: ResourceId) -> Dict[str, Any]:
        return self._get_resource(asset_id)

    def create_asset(self, asset: Mapping[str, Any]) -> Dict[str, Any]:
        return self._create_resource(dict(asset))

    def update_asset(self, asset_id: ResourceId, updates: Mapping[str, Any]) -> Dict[str, Any]:
        return self._update_resource(asset_id, dict(updates))

    def delete_asset(self, asset_id: ResourceId) -> Any:
        return self._delete_resource(asset_id)

    def delete_all_assets(self) -> Any:
        return self._delete_all()

    def import_assets(self, file: Any) -> Dict[str, Any]:
        return self._import(file)

    def get_summary_stats(self) -> Dict[str, Any]:
        """Counts by status/type as computed by the server"""
        return self._list_resources('stats', 'summary')


class VesselEndpoints(BaseEndpoint):
    """Vessel register endpoints"""

    def _get_base_path(self) -> str:
        return '/vessels'

    def list_vessels(self) -> List[Dict[str, Any]]:
        return self._list_resources()

    def create_vessel(self, vessel: Mapping[str, Any]) -> Dict[str, Any]:
        return self._create_resource(dict(vessel))

    def update_vessel(self, vessel_id: ResourceId, updates: Mapping[str, Any]) -> Dict[str, Any]:
        return self._update_resource(vessel_id, dict(updates))

    def delete_vessel(self, vessel_id: ResourceId) -> Any:
        return self._delete_resource(vessel_id)
