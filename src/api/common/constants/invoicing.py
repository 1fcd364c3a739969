"""
Invoicing constants: timesheet/invoice statuses and the agency's default profile
"""

from enum import Enum


class TimesheetStatus(str, Enum):
    """Timesheet approval workflow status"""
    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


class InvoiceStatus(str, Enum):
    """Invoice lifecycle status"""
    GENERATED = "generated"
    SENT = "sent"
    PAID = "paid"


class TimesheetKind(str, Enum):
    """Discriminator for the timesheet an invoice is generated from"""
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"


INVOICE_CURRENCY = "USD"
BILLING_CURRENCY = "INR"

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

# Profile used when a candidate's billing is not linked to company settings
DEFAULT_COMPANY_PROFILE = {
    "name": "NIDDIK",
    "logo_url": "",
    "address": "3rd Floor, Flat No. C-11 Multistorey Apt.",
    "city": "New Delhi",
    "state": "Delhi",
    "country": "India",
    "zip_code": "110025",
    "phone_numbers": [],
    "email_addresses": [],
    "website": "",
    "tax_id": "+917317361085 | +913556516289",
    "gst_number": "",
}

DEFAULT_EMPLOYMENT_TYPE = "Subcontract"
DEFAULT_WORKING_DAYS_PER_WEEK = 5
