import pytest
import os
from datetime import date
from io import BytesIO
from typing import Optional
from unittest.mock import Mock
from cryptography.fernet import Fernet
from fastapi.testclient import TestClient
from PIL import Image
from sqlmodel import Session, SQLModel, create_engine
from sqlalchemy.pool import StaticPool

# Import all models to ensure they're registered with SQLModel
from src.api.candidates.models.candidate import Candidate, CandidateBilling
from src.api.companies.models.company import ClientCompany, CompanySettings
from src.api.currency.client.frankfurter import FrankfurterClient
from src.api.currency.models.currency_rate import CurrencyRate
from src.api.currency.services.currency_service import CurrencyRateService
from src.api.documents.services.rasterizer import Raster
from src.api.invoices.models.invoice import Invoice
from src.api.invoices.schemas.invoice import (
    BillingData,
    ClientData,
    CompanyData,
    InvoiceSummary,
    InvoiceTemplateData,
    TimesheetDetails,
    WeekHours,
)
from src.api.timesheets.models.timesheet import BiWeeklyTimesheet, WeeklyTimesheet


@pytest.fixture(scope="session")
def test_encryption_key():
    """Provide a test encryption key for testing encrypted fields"""
    return Fernet.generate_key().decode()


@pytest.fixture(scope="session", autouse=True)
def setup_test_env(test_encryption_key):
    """Setup test environment variables"""
    from src.api.common.utils.encryption import get_cipher

    os.environ["ENCRYPTION_KEY"] = test_encryption_key
    os.environ["ENV"] = "test"
    get_cipher.cache_clear()
    yield
    # Cleanup
    if "ENCRYPTION_KEY" in os.environ:
        del os.environ["ENCRYPTION_KEY"]
    if "ENV" in os.environ:
        del os.environ["ENV"]
    get_cipher.cache_clear()


@pytest.fixture
def test_engine():
    """Create an in-memory SQLite database for testing"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture
def test_session(test_engine):
    """Create a test database session"""
    with Session(test_engine) as session:
        yield session


@pytest.fixture
def mock_frankfurter_client():
    """Frankfurter client answering a fixed current rate and six-month history"""
    client = Mock(spec=FrankfurterClient)
    client.get_latest_rate.return_value = 85.0
    client.get_rates_between.return_value = {"2025-01-02": 84.0, "2025-03-03": 85.0}
    return client


@pytest.fixture
def currency_service(test_session, mock_frankfurter_client):
    """Currency service backed by the test database and the mocked API client"""
    return CurrencyRateService(test_session, client=mock_frankfurter_client)


class FakeRasterizer:
    """Rasterizer producing a blank PNG of a fixed size"""

    def __init__(self, width: int = 420, height: int = 590, error: Optional[Exception] = None,
                 on_rasterize=None):
        self.width = width
        self.height = height
        self.error = error
        self.on_rasterize = on_rasterize
        self.calls = []

    def rasterize(self, html: str) -> Raster:
        self.calls.append(html)
        if self.on_rasterize:
            self.on_rasterize()
        if self.error:
            raise self.error
        buffer = BytesIO()
        Image.new("RGB", (self.width, self.height), "white").save(buffer, format="PNG")
        return Raster(png=buffer.getvalue(), width=self.width, height=self.height)


@pytest.fixture
def fake_rasterizer():
    return FakeRasterizer()


@pytest.fixture
def rasterizer_factory():
    """Build fake rasterizers with a custom size, error or hook"""
    return FakeRasterizer


@pytest.fixture
def api_client(test_session, currency_service, fake_rasterizer):
    """FastAPI test client wired to the test database, mocked rates and the fake rasterizer"""
    from src.main import app
    from src.api.common.utils.database import get_db
    from src.api.currency.endpoints.currency_rate import get_currency_service
    from src.api.invoices.endpoints.invoice import get_rasterizer

    app.dependency_overrides[get_db] = lambda: test_session
    app.dependency_overrides[get_currency_service] = lambda: currency_service
    app.dependency_overrides[get_rasterizer] = lambda: fake_rasterizer
    yield TestClient(app)
    app.dependency_overrides.clear()


def build_template_data(overtime_hours: float = 0.0, regular_hours: float = 80.0,
                        bi_weekly: bool = True, **invoice_overrides) -> InvoiceTemplateData:
    """Template data of an 80-hour bi-weekly invoice at $50/h"""
    invoice = {
        "invoice_number": "INV-202501-0042",
        "candidate_name": "Asha Verma",
        "candidate_email": "asha@example.com",
        "week_start_date": date(2025, 1, 6),
        "week_end_date": date(2025, 1, 19),
        "total_hours": 80.0,
        "hourly_rate": 50.0,
        "total_amount": 4000.0,
        "currency": "USD",
        "currency_conversion_rate": 85.0,
        "six_month_average_rate": 84.5,
        "amount_inr": 340000.0,
        "gst_rate": 18.0,
        "gst_amount": 720.0,
        "total_with_gst": 4720.0,
        "status": "generated",
        "issued_date": date(2025, 1, 20),
        "due_date": date(2025, 2, 19),
        "notes": "Invoice generated for bi-weekly period 2025-01-06 to 2025-01-19.",
    }
    invoice.update(invoice_overrides)
    week = WeekHours(monday_hours=8, tuesday_hours=8, wednesday_hours=8, thursday_hours=8,
                     friday_hours=8, total_week_hours=40)
    return InvoiceTemplateData(
        invoice=InvoiceSummary(**invoice),
        company_data=CompanyData(name="NIDDIK", city="New Delhi", country="India"),
        client_data=ClientData(name="Acme Corp", bill_to_city="Austin", bill_to_country="USA",
                               contact_person="Jane Roe"),
        timesheet_details=TimesheetDetails(
            week1=week,
            week2=week if bi_weekly else None,
            regular_hours=regular_hours,
            overtime_hours=overtime_hours,
            total_regular_amount=4000.0,
            total_overtime_amount=0.0,
        ),
        billing_data=BillingData(hourly_rate=4250.0, currency="INR", client_company_name="Acme Corp"),
    )


@pytest.fixture
def template_data():
    return build_template_data()


@pytest.fixture
def template_data_factory():
    """Build template data with overtime or invoice field overrides"""
    return build_template_data


# Test data factories
class TestDataFactory:
    @staticmethod
    def create_candidate(session: Session, **kwargs) -> Candidate:
        """Create a test candidate"""
        data = {
            "full_name": "Asha Verma",
            "email": "asha@example.com"
        }
        data.update(kwargs)

        candidate = Candidate(full_name=data["full_name"])
        candidate.email = data["email"]
        session.add(candidate)
        session.commit()
        session.refresh(candidate)
        return candidate

    @staticmethod
    def create_company_settings(session: Session, **kwargs) -> CompanySettings:
        """Create test company settings"""
        data = {
            "name": "Talent Partners",
            "address": "12 MG Road",
            "city": "Bengaluru",
            "state": "Karnataka",
            "country": "India",
            "zip_code": "560001",
            "phone_numbers": ["+91 80 1234 5678"],
            "email_addresses": ["billing@talentpartners.in"],
        }
        data.update(kwargs)

        settings = CompanySettings(**data)
        session.add(settings)
        session.commit()
        session.refresh(settings)
        return settings

    @staticmethod
    def create_client_company(session: Session, **kwargs) -> ClientCompany:
        """Create a test client company"""
        data = {
            "name": "Acme Corp",
            "bill_to_address": "500 Congress Ave",
            "bill_to_city": "Austin",
            "bill_to_state": "TX",
            "bill_to_country": "USA",
            "bill_to_zip_code": "78701",
            "contact_person": "Jane Roe",
            "email_addresses": ["ap@acme.example"],
        }
        data.update(kwargs)

        client = ClientCompany(**data)
        session.add(client)
        session.commit()
        session.refresh(client)
        return client

    @staticmethod
    def create_billing(session: Session, candidate_id: int, client_company_id: int = None,
                       **kwargs) -> CandidateBilling:
        """Create a test billing configuration"""
        if client_company_id is None:
            client_company_id = TestDataFactory.create_client_company(session).id

        data = {
            "candidate_id": candidate_id,
            "client_company_id": client_company_id,
            "hourly_rate": 4250.0,
            "currency": "INR",
            "supervisor_name": "Ravi Kumar",
        }
        data.update(kwargs)

        billing = CandidateBilling(**data)
        session.add(billing)
        session.commit()
        session.refresh(billing)
        return billing

    @staticmethod
    def create_weekly_timesheet(session: Session, candidate_id: int, **kwargs) -> WeeklyTimesheet:
        """Create a test weekly timesheet: 40 regular hours at INR 4250"""
        data = {
            "candidate_id": candidate_id,
            "week_start_date": date(2025, 1, 6),
            "week_end_date": date(2025, 1, 12),
            "daily_hours": {"monday": 8, "tuesday": 8, "wednesday": 8, "thursday": 8, "friday": 8},
            "daily_overtime": {},
            "total_regular_hours": 40.0,
            "total_overtime_hours": 0.0,
            "total_regular_amount": 170000.0,
            "total_overtime_amount": 0.0,
            "total_weekly_hours": 40.0,
            "total_weekly_amount": 170000.0,
            "status": "approved",
        }
        data.update(kwargs)

        timesheet = WeeklyTimesheet(**data)
        session.add(timesheet)
        session.commit()
        session.refresh(timesheet)
        return timesheet

    @staticmethod
    def create_bi_weekly_timesheet(session: Session, candidate_id: int, **kwargs) -> BiWeeklyTimesheet:
        """Create a test bi-weekly timesheet: 80 regular hours at INR 4250"""
        week = {"monday": 8, "tuesday": 8, "wednesday": 8, "thursday": 8, "friday": 8}
        data = {
            "candidate_id": candidate_id,
            "period_start_date": date(2025, 1, 6),
            "period_end_date": date(2025, 1, 19),
            "week1_hours": week,
            "week2_hours": dict(week),
            "total_regular_hours": 80.0,
            "total_overtime_hours": 0.0,
            "total_regular_amount": 340000.0,
            "total_overtime_amount": 0.0,
            "total_bi_weekly_hours": 80.0,
            "total_bi_weekly_amount": 340000.0,
            "status": "approved",
        }
        data.update(kwargs)

        timesheet = BiWeeklyTimesheet(**data)
        session.add(timesheet)
        session.commit()
        session.refresh(timesheet)
        return timesheet

    @staticmethod
    def create_invoice(session: Session, candidate_id: int, timesheet_id: int = None,
                       bi_weekly_timesheet_id: int = None, **kwargs) -> Invoice:
        """Create a test invoice"""
        data = {
            "invoice_number": "INV-202501-0001",
            "timesheet_id": timesheet_id,
            "bi_weekly_timesheet_id": bi_weekly_timesheet_id,
            "candidate_id": candidate_id,
            "candidate_name": "Asha Verma",
            "week_start_date": date(2025, 1, 6),
            "week_end_date": date(2025, 1, 12),
            "total_hours": 40.0,
            "hourly_rate": 50.0,
            "total_amount": 2000.0,
            "currency_conversion_rate": 85.0,
            "six_month_average_rate": 84.5,
            "amount_inr": 170000.0,
            "gst_rate": 18.0,
            "gst_amount": 360.0,
            "total_with_gst": 2360.0,
            "issued_date": date(2025, 1, 20),
            "due_date": date(2025, 2, 19),
        }
        data.update(kwargs)

        invoice = Invoice(**data)
        session.add(invoice)
        session.commit()
        session.refresh(invoice)
        return invoice

    @staticmethod
    def create_currency_rate(session: Session, month: str, average: float) -> CurrencyRate:
        """Create a stored monthly rate"""
        rate = CurrencyRate(month=month, average=average)
        session.add(rate)
        session.commit()
        session.refresh(rate)
        return rate


@pytest.fixture
def test_data_factory():
    """Provide test data factory"""
    return TestDataFactory
