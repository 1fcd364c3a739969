from typing import Optional
from sqlmodel import Field, Relationship
from src.api.common.constants.invoicing import (
    BILLING_CURRENCY,
    DEFAULT_EMPLOYMENT_TYPE,
    DEFAULT_WORKING_DAYS_PER_WEEK,
)
from src.api.common.models.base import BaseModel, TimestampMixin
from src.api.common.utils.encryption import encrypt_data, decrypt_data
from src.api.companies.models.company import ClientCompany, CompanySettings


class Candidate(BaseModel, TimestampMixin, table=True):
    """
    Placed candidate whose timesheets are invoiced
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    full_name: str

    # Encrypted contact e-mail
    encrypted_email: str = Field(default="")

    billing: Optional["CandidateBilling"] = Relationship(
        back_populates="candidate", sa_relationship_kwargs={"uselist": False})

    @property
    def email(self) -> str:
        """Get decrypted e-mail"""
        return decrypt_data(self.encrypted_email)

    @email.setter
    def email(self, value: str):
        """Set encrypted e-mail"""
        self.encrypted_email = encrypt_data(value)


class CandidateBilling(BaseModel, TimestampMixin, table=True):
    """
    Billing configuration of a candidate: rate, schedule and the companies on the invoice
    """
    id: Optional[int] = Field(default=None, primary_key=True)

    candidate_id: int = Field(foreign_key="candidate.id", unique=True, index=True)
    candidate: Optional[Candidate] = Relationship(back_populates="billing")

    # Hourly rate expressed in `currency`
    hourly_rate: float
    currency: str = BILLING_CURRENCY
    working_days_per_week: int = DEFAULT_WORKING_DAYS_PER_WEEK
    employment_type: str = DEFAULT_EMPLOYMENT_TYPE
    supervisor_name: Optional[str] = None

    company_settings_id: Optional[int] = Field(default=None, foreign_key="company_settings.id")
    company_settings: Optional[CompanySettings] = Relationship()

    client_company_id: Optional[int] = Field(default=None, foreign_key="client_company.id")
    client_company: Optional[ClientCompany] = Relationship()
