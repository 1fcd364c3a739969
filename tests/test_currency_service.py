import httpx
import pytest
from datetime import date

from src.api.currency.client.frankfurter import CurrencyApiError, FrankfurterClient
from src.api.currency.config import CurrencyConfig
from src.api.currency.services.currency_service import CurrencyRateService

TODAY = date(2025, 7, 15)

DAILY_RATES = {
    "2025-05-02": {"INR": 83.0},
    "2025-05-30": {"INR": 84.0},
    "2025-06-02": {"INR": 83.5},
    "2025-07-01": {"INR": 83.5},
    "2025-07-14": {"INR": None},
}


def frankfurter_handler(request: httpx.Request) -> httpx.Response:
    """Answer Frankfurter requests with a small fixed data set"""
    assert request.url.params["base"] == "USD"
    assert request.url.params["symbols"] == "INR"
    if request.url.path.endswith("/latest"):
        return httpx.Response(200, json={"base": "USD", "date": "2025-07-15", "rates": {"INR": 83.12345}})
    return httpx.Response(200, json={"base": "USD", "rates": DAILY_RATES})


def build_client(handler) -> FrankfurterClient:
    return FrankfurterClient(CurrencyConfig(), httpx.Client(transport=httpx.MockTransport(handler)))


@pytest.fixture
def frankfurter_client():
    return build_client(frankfurter_handler)


@pytest.fixture
def rate_service(test_session, frankfurter_client):
    return CurrencyRateService(test_session, client=frankfurter_client)


class TestFrankfurterClient:
    """Test the exchange-rate API client"""

    def test_get_latest_rate(self, frankfurter_client):
        """Test reading today's INR quote"""
        assert frankfurter_client.get_latest_rate() == 83.12345

    def test_get_rates_between_skips_days_without_quote(self, frankfurter_client):
        """Test that days without a quote are dropped"""
        rates = frankfurter_client.get_rates_between(date(2025, 1, 15), TODAY)

        assert "2025-07-14" not in rates
        assert rates["2025-05-02"] == 83.0
        assert len(rates) == 4

    def test_range_path(self):
        """Test the date range URL"""
        seen = []

        def handler(request):
            seen.append(request.url.path)
            return httpx.Response(200, json={"rates": {}})

        build_client(handler).get_rates_between(date(2025, 1, 15), TODAY)

        assert seen == ["/v1/2025-01-15..2025-07-15"]

    def test_http_error(self):
        """Test that server errors raise CurrencyApiError"""
        client = build_client(lambda request: httpx.Response(500, json={"message": "boom"}))

        with pytest.raises(CurrencyApiError):
            client.get_latest_rate()

    def test_missing_quote(self):
        """Test a latest response without the quote currency"""
        client = build_client(lambda request: httpx.Response(200, json={"rates": {}}))

        with pytest.raises(CurrencyApiError, match="Latest rate missing"):
            client.get_latest_rate()


class TestSixMonthAverage:
    """Test CurrencyRateService.get_six_month_average_usd_to_inr"""

    def test_average_and_current_rate(self, rate_service):
        """Test the average of daily rates and the 4-decimal current rate"""
        rates = rate_service.get_six_month_average_usd_to_inr(TODAY)

        assert rates.six_month_average == 83.5
        assert rates.current_rate == 83.1235
        assert rates.is_fallback is False
        assert rates.rates_history[0] == {"date": "2025-07-01", "rate": 83.5}

    def test_fallback_on_api_error(self, test_session):
        """Test that API failures are answered with the configured fallback rates"""
        client = build_client(lambda request: httpx.Response(500))
        service = CurrencyRateService(test_session, client=client)

        rates = service.get_six_month_average_usd_to_inr(TODAY)

        assert rates.current_rate == 85.0
        assert rates.six_month_average == 84.5
        assert rates.is_fallback is True

    def test_fallback_uses_config(self, test_session):
        """Test custom fallback rates"""
        client = build_client(lambda request: httpx.Response(503))
        service = CurrencyRateService(test_session, client=client,
                                      config=CurrencyConfig(fallback_rate=82.0, fallback_average=81.25))

        rates = service.get_six_month_average_usd_to_inr(TODAY)

        assert (rates.current_rate, rates.six_month_average) == (82.0, 81.25)

    def test_no_daily_rates(self, test_session):
        """Test an empty history averaging to the fallback rate"""
        def handler(request):
            if request.url.path.endswith("/latest"):
                return httpx.Response(200, json={"rates": {"INR": 86.0}})
            return httpx.Response(200, json={"rates": {}})

        service = CurrencyRateService(test_session, client=build_client(handler))

        rates = service.get_six_month_average_usd_to_inr(TODAY)

        assert rates.current_rate == 86.0
        assert rates.six_month_average == 85.0


class TestMonthlyRates:
    """Test storing and reading monthly averages"""

    def test_refresh_adds_completed_months(self, rate_service):
        """Test that only completed months are stored"""
        added = rate_service.refresh_monthly_rates(TODAY)

        assert [(rate.month, rate.average) for rate in added] == [("2025-05", 83.5), ("2025-06", 83.5)]
        assert all(rate.id is not None for rate in added)

    def test_refresh_is_idempotent(self, rate_service):
        """Test that a second refresh adds nothing"""
        rate_service.refresh_monthly_rates(TODAY)

        assert rate_service.refresh_monthly_rates(TODAY) == []
        assert len(rate_service.get_monthly_rates(today=TODAY)) == 2

    def test_refresh_keeps_existing_months(self, rate_service, test_session, test_data_factory):
        """Test that stored months are not overwritten"""
        test_data_factory.create_currency_rate(test_session, "2025-05", 80.0)

        added = rate_service.refresh_monthly_rates(TODAY)

        assert [rate.month for rate in added] == ["2025-06"]
        stored = {rate.month: rate.average for rate in rate_service.get_monthly_rates(today=TODAY)}
        assert stored == {"2025-05": 80.0, "2025-06": 83.5}

    def test_refresh_api_error(self, test_session):
        """Test that refresh failures propagate"""
        service = CurrencyRateService(test_session, client=build_client(lambda request: httpx.Response(502)))

        with pytest.raises(CurrencyApiError):
            service.refresh_monthly_rates(TODAY)

    def test_get_monthly_rates_window_and_order(self, rate_service, test_session, test_data_factory):
        """Test the trailing window, oldest first"""
        for month, average in [("2025-03", 84.0), ("2024-12", 85.5), ("2025-01", 85.0), ("2024-01", 82.0)]:
            test_data_factory.create_currency_rate(test_session, month, average)

        rates = rate_service.get_monthly_rates(today=date(2025, 3, 20))

        assert [rate.month for rate in rates] == ["2024-12", "2025-01", "2025-03"]
