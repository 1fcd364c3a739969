from typing import List
from src.api.common.schemas.base import CamelModel


class MonthlyRate(CamelModel):
    month: str
    average: float


class CurrencyRatesData(CamelModel):
    current_rate: float
    six_month_average: float
    monthly_rates: List[MonthlyRate] = []


class CurrencyRatesResponse(CamelModel):
    data: CurrencyRatesData


class RefreshRatesResponse(CamelModel):
    added: List[MonthlyRate] = []
