from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional
from fastapi.logger import logger
from sqlmodel import Session, select
from src.api.common.utils.datetime import (
    get_current_date,
    get_month_key,
    get_months_back,
    get_trailing_month_keys,
)
from src.api.currency.client.frankfurter import CurrencyApiError, FrankfurterClient
from src.api.currency.config import CurrencyConfig
from src.api.currency.models.currency_rate import CurrencyRate
from src.api.invoices.services.calculations import round_half_up


@dataclass
class CurrencyRates:
    """Current rate and trailing six-month average of the configured pair"""
    current_rate: float
    six_month_average: float
    rates_history: List[Dict[str, float]] = field(default_factory=list)
    is_fallback: bool = False


class CurrencyRateService:
    def __init__(self, db: Session, client: Optional[FrankfurterClient] = None,
                 config: Optional[CurrencyConfig] = None):
        self.db = db
        self.config = config or CurrencyConfig()
        self.client = client or FrankfurterClient(self.config)

    def get_fallback_rates(self) -> CurrencyRates:
        return CurrencyRates(
            current_rate=round_half_up(self.config.fallback_rate, 4),
            six_month_average=round_half_up(self.config.fallback_average, 4),
            is_fallback=True,
        )

    def get_six_month_average_usd_to_inr(self, today: Optional[date] = None) -> CurrencyRates:
        """
        Fetch the current rate and the average of the last six months of daily rates.

        API failures are logged and answered with the configured fallback rates,
        so that invoice generation never depends on the exchange-rate API being up.
        """
        end = today or get_current_date()
        start = get_months_back(end, 6)
        try:
            daily_rates = self.client.get_rates_between(start, end)
            current_rate = self.client.get_latest_rate()
        except CurrencyApiError as e:
            logger.error(f"Currency service error, using fallback rates: {e}")
            return self.get_fallback_rates()

        if daily_rates:
            six_month_average = sum(daily_rates.values()) / len(daily_rates)
        else:
            six_month_average = self.config.fallback_rate

        history = [
            {"date": day, "rate": rate}
            for day, rate in sorted(daily_rates.items(), reverse=True)[:30]
        ]
        return CurrencyRates(
            current_rate=round_half_up(current_rate, 4),
            six_month_average=round_half_up(six_month_average, 4),
            rates_history=history,
        )

    def get_monthly_rates(self, months: int = 6, today: Optional[date] = None) -> List[CurrencyRate]:
        """Stored monthly averages for the trailing `months` months, oldest first"""
        keys = get_trailing_month_keys(today or get_current_date(), months)
        statement = (
            select(CurrencyRate)
            .where(CurrencyRate.base == self.config.base)
            .where(CurrencyRate.quote == self.config.quote)
            .where(CurrencyRate.month.in_(keys))
            .order_by(CurrencyRate.month)
        )
        return self.db.exec(statement).all()

    def refresh_monthly_rates(self, today: Optional[date] = None) -> List[CurrencyRate]:
        """
        Append the monthly averages of the last six completed months that are not stored yet.
        Existing months are left untouched.

        Raises:
            CurrencyApiError: If the exchange-rate API cannot be reached
        """
        end = today or get_current_date()
        current_month = get_month_key(end)
        daily_rates = self.client.get_rates_between(get_months_back(end, 6).replace(day=1), end)

        by_month: Dict[str, List[float]] = defaultdict(list)
        for day, rate in daily_rates.items():
            by_month[day[:7]].append(rate)

        stored = {
            rate.month for rate in self.db.exec(
                select(CurrencyRate)
                .where(CurrencyRate.base == self.config.base)
                .where(CurrencyRate.quote == self.config.quote)
            ).all()
        }

        added = []
        for month in sorted(by_month):
            # The running month is incomplete
            if month == current_month or month in stored:
                continue
            values = by_month[month]
            rate = CurrencyRate(
                month=month,
                base=self.config.base,
                quote=self.config.quote,
                average=round_half_up(sum(values) / len(values), 4),
            )
            self.db.add(rate)
            added.append(rate)

        if added:
            self.db.commit()
            for rate in added:
                self.db.refresh(rate)
        logger.info(f"Stored {len(added)} new monthly currency rates")
        return added
