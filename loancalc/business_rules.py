"""
Expected business rules of the external calculator.

These constants are the remote site's published policy, recorded here as
test expectations. They are not computed by this project and have to be
re-verified against the live page whenever the site changes its rules.
"""

from .models import HouseholdType

MIN_AGE = 18
MAX_AGE = 65

MIN_PROPERTY_VALUE = 5_000_000

MIN_INCOME = {
    HouseholdType.ALONE: 193_000,
    HouseholdType.MULTIPLE: 290_000,
}

# Repayment-to-income cap switches at this monthly income
INCOME_BREAKPOINT = 800_000
REPAYMENT_CAP_BELOW_BREAKPOINT = 0.50
REPAYMENT_CAP_AT_OR_ABOVE_BREAKPOINT = 0.60

# property value -> maximum loan shown in the first offer
PROPERTY_TO_LOAN = {
    5_500_000: 4_400_000,
    10_000_000: 8_000_000,
    300_000_000: 48_300_000,
}


def expects_age_error(age: int) -> bool:
    return age < MIN_AGE or age > MAX_AGE


def expects_property_value_error(property_value: int) -> bool:
    return property_value < MIN_PROPERTY_VALUE


def expects_income_error(income: int, household: HouseholdType) -> bool:
    return income < MIN_INCOME[household]


def repayment_cap(income: int) -> float:
    """Maximum existing repayment / income ratio accepted for this income."""
    if income < INCOME_BREAKPOINT:
        return REPAYMENT_CAP_BELOW_BREAKPOINT
    return REPAYMENT_CAP_AT_OR_ABOVE_BREAKPOINT


def expects_repayment_error(repayment: int, income: int) -> bool:
    if income <= 0:
        return repayment > 0
    return repayment / income > repayment_cap(income)
