from typing import List, Optional
from sqlmodel import Field, Column, JSON
from src.api.common.models.base import BaseModel, TimestampMixin


class CompanySettings(BaseModel, TimestampMixin, table=True):
    """
    The agency's own profile printed in the invoice header
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    logo_url: Optional[str] = None
    address: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    zip_code: str = ""
    phone_numbers: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    email_addresses: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    website: Optional[str] = None
    tax_id: Optional[str] = None
    gst_number: Optional[str] = None


class ClientCompany(BaseModel, TimestampMixin, table=True):
    """
    Client billed for a candidate's work (bill-to / ship-to block)
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    logo_url: Optional[str] = None
    bill_to_address: str = ""
    bill_to_city: str = ""
    bill_to_state: str = ""
    bill_to_country: str = ""
    bill_to_zip_code: str = ""
    contact_person: Optional[str] = None
    phone_numbers: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    email_addresses: List[str] = Field(default_factory=list, sa_column=Column(JSON))
