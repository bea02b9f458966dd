"""
Pydantic models for the calculator form and its results.

FormState is the caller-held description of what the form should contain;
the page object applies it. FieldError and Offer are read back from the page
at query time and never cached.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from .parsing import extract_numeric_amount, parse_apr


class InputField(str, Enum):
    """Numeric form inputs that carry their own validation message."""
    AGE = "age"
    PROPERTY_VALUE = "property_value"
    MONTHLY_INCOME = "monthly_income"
    EXISTING_REPAYMENT = "existing_repayment"

    @property
    def label(self) -> str:
        return _FIELD_LABELS[self]


_FIELD_LABELS = {
    InputField.AGE: "Age",
    InputField.PROPERTY_VALUE: "Property value",
    InputField.MONTHLY_INCOME: "Monthly income",
    InputField.EXISTING_REPAYMENT: "Existing loan repayment",
}


class DiscountOption(str, Enum):
    """Discount checkboxes on the form."""
    BANK_ACCOUNT_CREDIT = "bank_account_credit"
    BABY_LOAN = "baby_loan"
    INSURANCE = "insurance"


class HouseholdType(str, Enum):
    """Number of earners in the household."""
    ALONE = "alone"
    MULTIPLE = "multiple"


class ErrorStatus(str, Enum):
    """Result of looking up a field's validation message."""
    SHOWN = "shown"            # present, visible and non-empty
    NOT_SHOWN = "not_shown"    # present but hidden or empty
    ABSENT = "absent"          # no such element in the DOM
    UNKNOWN = "unknown"        # lookup failed, see FieldError.reason


class CalculationOutcome(str, Enum):
    """What the page showed after the calculate button was clicked."""
    RESULTS = "results"
    CANNOT_CALCULATE = "cannot_calculate"
    TIMEOUT = "timeout"


class FormState(BaseModel):
    """
    Desired contents of the calculator form.

    ``None`` means "leave the control as the page has it". Monetary values
    are whole forints.
    """
    model_config = ConfigDict(frozen=True)

    age: Optional[int] = Field(None, ge=0, le=150, description="Customer age in years")
    property_value: Optional[int] = Field(None, ge=0, description="Property value in HUF")
    household: Optional[HouseholdType] = Field(None, description="Single or multiple earners")
    monthly_income: Optional[int] = Field(None, ge=0, description="Net monthly income in HUF")
    existing_repayment: Optional[int] = Field(None, ge=0, description="Existing monthly repayments in HUF")
    bank_account_credit: Optional[bool] = Field(None, description="Salary credited to the bank account")
    baby_loan: Optional[bool] = Field(None, description="Expecting a baby (baby loan discount)")
    insurance: Optional[bool] = Field(None, description="Repayment protection insurance")

    def with_(self, **changes) -> "FormState":
        """Return a copy with the given fields replaced (validated)."""
        return FormState(**{**self.model_dump(), **changes})

    def input_values(self) -> dict:
        """Numeric inputs that are set, keyed by InputField."""
        values = {
            InputField.PROPERTY_VALUE: self.property_value,
            InputField.AGE: self.age,
            InputField.MONTHLY_INCOME: self.monthly_income,
            InputField.EXISTING_REPAYMENT: self.existing_repayment,
        }
        return {k: v for k, v in values.items() if v is not None}

    def discount_values(self) -> dict:
        """Discount checkboxes that are set, keyed by DiscountOption."""
        values = {
            DiscountOption.BANK_ACCOUNT_CREDIT: self.bank_account_credit,
            DiscountOption.BABY_LOAN: self.baby_loan,
            DiscountOption.INSURANCE: self.insurance,
        }
        return {k: v for k, v in values.items() if v is not None}


class FieldError(BaseModel):
    """Validation message state of a single input field."""
    field: InputField
    status: ErrorStatus
    message: str = ""
    reason: Optional[str] = None

    @property
    def is_shown(self) -> bool:
        return self.status == ErrorStatus.SHOWN


class Offer(BaseModel):
    """First offer box as displayed (strings are empty when missing)."""
    loan_amount: str = ""
    monthly_repayment: str = ""
    apr: str = ""

    @property
    def loan_amount_value(self) -> int:
        return extract_numeric_amount(self.loan_amount)

    @property
    def monthly_repayment_value(self) -> int:
        return extract_numeric_amount(self.monthly_repayment)

    @property
    def apr_value(self) -> float:
        return parse_apr(self.apr)

    @property
    def is_empty(self) -> bool:
        return not (self.loan_amount or self.monthly_repayment or self.apr)
