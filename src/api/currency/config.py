import os
from pydantic import BaseModel


class CurrencyConfig(BaseModel):
    api_base_url: str = os.getenv("CURRENCY_API_BASE_URL", "https://api.frankfurter.dev/v1")
    timeout: float = float(os.getenv("CURRENCY_API_TIMEOUT", "10"))
    fallback_rate: float = float(os.getenv("CURRENCY_FALLBACK_RATE", "85.0"))
    fallback_average: float = float(os.getenv("CURRENCY_FALLBACK_AVERAGE", "84.5"))
    base: str = "USD"
    quote: str = "INR"
