"""
Browser acceptance tests for an external mortgage calculator page.

The package holds the page objects, configuration and scenario helpers;
the business-rule scenarios themselves live in ``tests/``.
"""

__version__ = "1.0.0"

from .config import get_config, LoanCalcConfig
from .models import FormState, HouseholdType, InputField, DiscountOption, Offer
from .calculator_page import LoanCalculatorPage
from .logging_config import get_logger

__all__ = [
    "get_config",
    "LoanCalcConfig",
    "FormState",
    "HouseholdType",
    "InputField",
    "DiscountOption",
    "Offer",
    "LoanCalculatorPage",
    "get_logger"
]
