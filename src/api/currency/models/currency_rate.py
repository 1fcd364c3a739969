from typing import Optional
from sqlalchemy import UniqueConstraint
from sqlmodel import Field
from src.api.common.models.base import BaseModel, TimestampMixin


class CurrencyRate(BaseModel, TimestampMixin, table=True):
    """
    Monthly average exchange rate. Rows are appended once per month and never updated.
    """
    __table_args__ = (
        UniqueConstraint("month", "base", "quote", name="uq_currency_rate_month_pair"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    # YYYY-MM
    month: str = Field(index=True)
    base: str = "USD"
    quote: str = "INR"
    average: float
