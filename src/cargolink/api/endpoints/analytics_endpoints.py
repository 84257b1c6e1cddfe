"""
Analytics and Reporting Endpoints for the CargoLink Logistics API

Read-only aggregates for the dashboard and the periodic reports.
"""

from typing import Any, Dict, Optional

from .base_endpoint import BaseEndpoint


class AnalyticsEndpoints(BaseEndpoint):
    """Dashboard aggregates; every call is a GET"""

    def _get_base_path(self) -> str:
        return '/analytics'

    def get_dashboard(self) -> Dict[str, Any]:
        return self._list_resources('dashboard')

    def get_revenue(self) -> Any:
        return self._list_resources('revenue')

    def get_performance(self) -> Any:
        return self._list_resources('performance')

    def get_volume(self) -> Any:
        return self._list_resources('volume')


class ReportEndpoints(BaseEndpoint):
    """Monthly / yearly shipment reports"""

    REPORT_TYPES = ('Monthly', 'Yearly')

    def _get_base_path(self) -> str:
        return '/reports'

    def get_summary(self, year: Optional[int] = None, report_type: Optional[str] = None) -> Dict[str, Any]:
        return self._list_resources('summary', params=self._query(year=year, type=report_type))

    def download_report(self, year: Optional[int] = None, report_type: Optional[str] = None) -> bytes:
        """Report file as raw bytes"""
        return self._download('download', params=self._query(year=year, type=report_type))
