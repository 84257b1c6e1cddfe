"""
User, Audit Log and Notification Endpoints for the CargoLink Logistics API
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional

from .base_endpoint import BaseEndpoint, ResourceId


class UserEndpoints(BaseEndpoint):
    """
    User account endpoints.

    Profile photos are uploaded as multipart under the ``photo`` field.
    """

    def _get_base_path(self) -> str:
        return '/users'

    def list_users(self) -> List[Dict[str, Any]]:
        return self._list_resources()

    def create_user(self, user: Mapping[str, Any]) -> Dict[str, Any]:
        return self._create_resource(dict(user))

    def update_user(self, user_id: ResourceId, updates: Mapping[str, Any]) -> Dict[str, Any]:
        return self._update_resource(user_id, dict(updates))

    def delete_user(self, user_id: ResourceId) -> Any:
        return self._delete_resource(user_id)

    def upload_photo(self, user_id: ResourceId, photo: Any) -> Dict[str, Any]:
        return self._upload(self._build_endpoint(user_id, 'photo'), files={'photo': photo})

    def remove_photo(self, user_id: ResourceId) -> Any:
        return self._delete_resource(user_id, 'photo')


class AuditLogEndpoints(BaseEndpoint):
    """Audit trail, newest first"""

    def _get_base_path(self) -> str:
        return '/logs'

    def list_logs(self, search: Optional[str] = None, date: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Args:
            search: Matches user name, action or details
            date: Calendar day, ``YYYY-MM-DD``
        """
        return self._list_resources(params=self._query(search=search, date=date))


class NotificationEndpoints(BaseEndpoint):
    """In-app notifications of the current user"""

    def _get_base_path(self) -> str:
        return '/notifications'

    def list_notifications(self) -> List[Dict[str, Any]]:
        return self._list_resources()

    def mark_read(self, notification_id: ResourceId) -> Any:
        return self._update_resource(notification_id, None, 'read')

    def mark_all_read(self) -> Any:
        return self._call('mark_all_read', 'PUT', self._build_endpoint('read-all'))

    def delete_notification(self, notification_id: ResourceId) -> Any:
        return self._delete_resource(notification_id)

    def delete_batch(self, notification_ids: Iterable[ResourceId]) -> Any:
        return self._post_action('delete-batch', data={'ids': list(notification_ids)})

    def delete_all(self) -> Any:
        return self._delete_all()
