"""
Billing Endpoints for the CargoLink Logistics API

Invoices, payments against jobs and the payment item catalogue.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional

from .base_endpoint import BaseEndpoint, EndpointError, ResourceId


class InvoiceEndpoints(BaseEndpoint):
    """Invoices are read-only through the API"""

    def _get_base_path(self) -> str:
        return '/invoices'

    def list_invoices(self) -> List[Dict[str, Any]]:
        return self._list_resources()

    def get_invoice(self, invoice_id: ResourceId) -> Dict[str, Any]:
        return self._get_resource(invoice_id)


class PaymentEndpoints(BaseEndpoint):
    """
    Payment request endpoints.

    Provides methods for:
    - Recording and deleting payments against a job
    - Listing payments, overall or per job
    - Status changes and batch processing
    """

    def _get_base_path(self) -> str:
        return '/payments'

    def create_payment(self, payment: Mapping[str, Any]) -> Dict[str, Any]:
        return self._create_resource(dict(payment))

    def list_payments_for_job(self, job_id: ResourceId) -> List[Dict[str, Any]]:
        return self._list_resources('job', job_id)

    def delete_payment(self, payment_id: ResourceId) -> Any:
        return self._delete_resource(payment_id)

    def list_payments(
        self,
        search: Optional[str] = None,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 50
    ) -> Dict[str, Any]:
        return self._list_resources(params=self._query(search=search, status=status, page=page, limit=limit))

    def update_payment(self, payment_id: ResourceId, amount: Any) -> Dict[str, Any]:
        return self._update_resource(payment_id, {'amount': amount})

    def update_status(self, payment_id: ResourceId, status: str) -> Dict[str, Any]:
        return self._update_resource(payment_id, {'status': status}, 'status')

    def send_batch(self, payment_ids: Iterable[ResourceId]) -> Any:
        ids = self._require_ids(payment_ids)
        return self._post_action('send-batch', data={'paymentIds': ids})

    def process_batch(
        self,
        payment_ids: Iterable[ResourceId],
        reference: Optional[str] = None,
        payment_date: Optional[str] = None,
        payment_mode: Optional[str] = None,
        comments: Optional[str] = None
    ) -> Any:
        payload = {
            'paymentIds': self._require_ids(payment_ids),
            'reference': reference,
            'paymentDate': payment_date,
            'paymentMode': payment_mode,
            'comments': comments,
        }
        return self._post_action('process-batch', data={k: v for k, v in payload.items() if v is not None})

    @staticmethod
    def _require_ids(payment_ids: Iterable[ResourceId]) -> List[ResourceId]:
        ids = list(payment_ids)
        if not ids:
            raise EndpointError("At least one payment id is required")
        return ids


class PaymentItemEndpoints(BaseEndpoint):
    """Payment item settings (the catalogue of chargeable items)"""

    def _get_base_path(self) -> str:
        return '/payment-items'

    def list_items(self) -> List[Dict[str, Any]]:
        return self._list_resources()

    def create_item(self, item: Mapping[str, Any]) -> Dict[str, Any]:
        return self._create_resource(dict(item))

    def update_item(self, item_id: ResourceId, updates: Mapping[str, Any]) -> Dict[str, Any]:
        return self._update_resource(item_id, dict(updates))

    def delete_item(self, item_id: ResourceId) -> Any:
        return self._delete_resource(item_id)

    def delete_all_items(self) -> Any:
        return self._delete_all()

    def import_items(self, file: Any) -> Dict[str, Any]:
        return self._import(file)
