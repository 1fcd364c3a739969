import httpx
import logging
from typing import Any, Dict, Optional, Union
from src.api.currency.schemas.currency_rate import CurrencyRatesData
from src.api.invoices.schemas.invoice import (
    BiWeeklyTimesheetRef,
    InvoiceRead,
    InvoiceTemplateResponse,
    WeeklyTimesheetRef,
)
from src.client.config import ClientConfig
from src.client.query_cache import QueryCache

INVOICES_PATH = "/api/admin/invoices"
TIMESHEETS_PATH = "/api/admin/timesheets"
BIWEEKLY_TIMESHEETS_PATH = "/api/admin/biweekly-timesheets"
CURRENCY_RATES_PATH = "/api/admin/currency-rates"
GENERATE_INVOICE_PATH = "/api/admin/generate-invoice"


class ApiError(Exception):
    """Error answered by the admin API, carrying its `{message}` or a generic one"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AdminApiClient:
    """Client for the invoicing admin API; GET responses go through the query cache"""

    def __init__(self, config: Optional[ClientConfig] = None, cache: Optional[QueryCache] = None,
                 http_client: Optional[httpx.Client] = None):
        self.config = config or ClientConfig()
        self.cache = cache or QueryCache()
        self._client = http_client or httpx.Client(base_url=self.config.api_base_url,
                                                   timeout=self.config.timeout)

    @staticmethod
    def _error_message(response: httpx.Response, fallback: str) -> str:
        try:
            body = response.json()
        except ValueError:
            return fallback
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return fallback

    def _request(self, method: str, path: str, fallback: str, json: Optional[Dict[str, Any]] = None) -> Any:
        try:
            response = self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logging.error(f"Error occurred in AdminApiClient {method} {path}: {e}")
            raise ApiError(fallback) from e
        if response.is_error:
            message = self._error_message(response, fallback)
            logging.error(f"HTTP error {response.status_code} in AdminApiClient {method} {path}: {message}")
            raise ApiError(message, response.status_code)
        return response.json()

    def get_template_data(self, invoice_id: int) -> InvoiceTemplateResponse:
        path = f"{INVOICES_PATH}/{invoice_id}/template-data"
        body = self.cache.fetch(path, lambda: self._request("GET", path, "Failed to load invoice data"))
        return InvoiceTemplateResponse.model_validate(body)

    def get_currency_rates(self) -> CurrencyRatesData:
        body = self.cache.fetch(
            CURRENCY_RATES_PATH,
            lambda: self._request("GET", CURRENCY_RATES_PATH, "Failed to load currency rates"),
            ttl=self.config.currency_rates_ttl,
        )
        return CurrencyRatesData.model_validate(body["data"])

    def generate_invoice(self, ref: Union[WeeklyTimesheetRef, BiWeeklyTimesheetRef]) -> InvoiceRead:
        if isinstance(ref, WeeklyTimesheetRef):
            payload = {"timesheetId": ref.id}
        else:
            payload = {"biWeeklyTimesheetId": ref.id}
        body = self._request("POST", GENERATE_INVOICE_PATH, "Failed to generate invoice", json=payload)
        return InvoiceRead.model_validate(body)

    def close(self):
        self._client.close()
