from fastapi import APIRouter
from src.api.invoices.endpoints.invoice import router as invoice_router
from src.api.currency.endpoints.currency_rate import router as currency_router
from src.api.timesheets.endpoints.timesheet import router as timesheet_router

api_router = APIRouter()

# Include all domain routers
api_router.include_router(invoice_router)
api_router.include_router(currency_router)
api_router.include_router(timesheet_router)
