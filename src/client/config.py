import os
from pydantic import BaseModel


class ClientConfig(BaseModel):
    api_base_url: str = os.getenv("ADMIN_API_BASE_URL", "http://localhost:3001")
    download_dir: str = os.getenv("INVOICE_DOWNLOAD_DIR", ".")
    timeout: float = 30.0
    # Currency rates are refetched after ten minutes
    currency_rates_ttl: float = 600.0
