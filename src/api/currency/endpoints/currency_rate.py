from fastapi import APIRouter, Depends
from fastapi.logger import logger
from sqlmodel import Session
from src.api.common.exceptions import InvoicingError
from src.api.common.utils.database import get_db
from src.api.currency.client.frankfurter import CurrencyApiError, FrankfurterClient
from src.api.currency.schemas.currency_rate import (
    CurrencyRatesData,
    CurrencyRatesResponse,
    MonthlyRate,
    RefreshRatesResponse,
)
from src.api.currency.services.currency_service import CurrencyRateService

router = APIRouter(prefix="/admin/currency-rates", tags=["currency"])


def get_frankfurter_client():
    client = FrankfurterClient()
    try:
        yield client
    finally:
        client.close()


def get_currency_service(db: Session = Depends(get_db),
                         client: FrankfurterClient = Depends(get_frankfurter_client)):
    return CurrencyRateService(db, client)


@router.get("", response_model=CurrencyRatesResponse)
def get_currency_rates(currency_service: CurrencyRateService = Depends(get_currency_service)):
    """Get the current rate, the six-month average and the stored monthly series"""
    rates = currency_service.get_six_month_average_usd_to_inr()
    monthly = currency_service.get_monthly_rates()
    return CurrencyRatesResponse(data=CurrencyRatesData(
        current_rate=rates.current_rate,
        six_month_average=rates.six_month_average,
        monthly_rates=[MonthlyRate(month=rate.month, average=rate.average) for rate in monthly],
    ))


@router.post("/refresh", response_model=RefreshRatesResponse)
def refresh_currency_rates(currency_service: CurrencyRateService = Depends(get_currency_service)):
    """Append the monthly averages missing from the stored series"""
    try:
        added = currency_service.refresh_monthly_rates()
    except CurrencyApiError as e:
        logger.error(f"Error refreshing currency rates: {e}")
        raise InvoicingError("Failed to refresh currency rates") from e
    return RefreshRatesResponse(added=[MonthlyRate(month=rate.month, average=rate.average) for rate in added])
