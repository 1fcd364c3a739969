import httpx
import logging
from datetime import date
from typing import Dict, Optional
from src.api.currency.config import CurrencyConfig


class CurrencyApiError(Exception):
    """Raised when the exchange-rate API cannot be reached or answers unexpectedly"""


class FrankfurterClient:
    """Client for the Frankfurter exchange-rate API"""

    def __init__(self, config: Optional[CurrencyConfig] = None, http_client: Optional[httpx.Client] = None):
        self.config = config or CurrencyConfig()
        self._client = http_client or httpx.Client(timeout=self.config.timeout)

    def _params(self) -> Dict[str, str]:
        return {"base": self.config.base, "symbols": self.config.quote}

    def _get(self, path: str) -> Dict:
        try:
            response = self._client.get(f"{self.config.api_base_url}{path}", params=self._params())
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logging.error(f"HTTP error occurred in FrankfurterClient GET {path}: {e}")
            raise CurrencyApiError(f"HTTP error occurred in FrankfurterClient GET {path}: {e}") from e
        except (httpx.HTTPError, ValueError) as e:
            logging.error(f"Error occurred in FrankfurterClient GET {path}: {e}")
            raise CurrencyApiError(f"Error occurred in FrankfurterClient GET {path}: {e}") from e

    def get_latest_rate(self) -> float:
        """Get today's rate of the configured pair"""
        data = self._get("/latest")
        try:
            return float(data["rates"][self.config.quote])
        except (KeyError, TypeError) as e:
            raise CurrencyApiError(f"Latest rate missing from response: {data}") from e

    def get_rates_between(self, start: date, end: date) -> Dict[str, float]:
        """
        Get the daily rates of the configured pair in a date range

        Returns:
            Mapping of ISO date to rate, only for days that carry a quote
        """
        data = self._get(f"/{start.isoformat()}..{end.isoformat()}")
        rates = {}
        for day, quotes in (data.get("rates") or {}).items():
            rate = (quotes or {}).get(self.config.quote)
            if rate:
                rates[day] = float(rate)
        return rates

    def close(self):
        self._client.close()
