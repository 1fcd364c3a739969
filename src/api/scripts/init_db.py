import argparse
from sqlmodel import Session

# Import all models to register them with SQLModel
from src.api.candidates.models.candidate import Candidate, CandidateBilling
from src.api.companies.models.company import ClientCompany, CompanySettings
from src.api.currency.client.frankfurter import CurrencyApiError
from src.api.currency.models.currency_rate import CurrencyRate
from src.api.currency.services.currency_service import CurrencyRateService
from src.api.invoices.models.invoice import Invoice
from src.api.timesheets.models.timesheet import BiWeeklyTimesheet, WeeklyTimesheet
from src.api.common.utils.database import create_db_and_tables, engine


def init_db(refresh_rates: bool = False, db_engine=None):
    """Create all tables and optionally store the monthly USD/INR averages"""
    db_engine = db_engine or engine
    print("Creating database tables...")
    create_db_and_tables(db_engine)
    print("Database tables created successfully.")

    if not refresh_rates:
        return []
    with Session(db_engine) as session:
        service = CurrencyRateService(session)
        try:
            added = service.refresh_monthly_rates()
        except CurrencyApiError as e:
            print(f"Could not refresh currency rates: {e}")
            return []
        finally:
            service.client.close()
    print(f"Stored {len(added)} monthly currency rates.")
    return added


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Initialize the invoicing database")
    parser.add_argument("--refresh-rates", action="store_true",
                        help="Also store the monthly USD/INR averages of the last six months")
    args = parser.parse_args()
    init_db(refresh_rates=args.refresh_rates)
