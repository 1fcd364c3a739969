import os
from pydantic import BaseModel


class InvoiceConfig(BaseModel):
    gst_rate: float = float(os.getenv("INVOICE_GST_RATE", "18.0"))
    payment_terms_days: int = int(os.getenv("INVOICE_PAYMENT_TERMS_DAYS", "30"))
    number_prefix: str = os.getenv("INVOICE_NUMBER_PREFIX", "INV")
