"""
Scenario runner helpers shared by the business-rule tests.

Each probe reloads the calculator and re-establishes the complete form
state it depends on; the remote page resets its form on reload and nothing
is carried over between probes.
"""

from typing import Optional

from playwright.sync_api import Error as PlaywrightError

from .calculator_page import LoanCalculatorPage
from .config import LoanCalcConfig, get_config
from .cookie_popup import CookiePopup
from .logging_config import get_logger
from .models import FormState, HouseholdType, InputField
from .playwright_client import BrowserSession
from .reporter import Reporter

logger = get_logger(__name__)


# Baselines the scenarios derive their probes from

VALIDATION_BASELINE = FormState(
    age=30,
    property_value=50_000_000,
    household=HouseholdType.ALONE,
    monthly_income=500_000,
    existing_repayment=0,
)

PROPERTY_LOAN_BASELINE = FormState(
    age=30,
    household=HouseholdType.MULTIPLE,
    monthly_income=600_000,
    existing_repayment=0,
    bank_account_credit=True,
    baby_loan=False,
    insurance=True,
)

PROPERTY_MONOTONIC_BASELINE = PROPERTY_LOAN_BASELINE.with_(monthly_income=1_000_000)

INCOME_BASELINE = FormState(
    age=30,
    property_value=100_000_000,
    household=HouseholdType.MULTIPLE,
    existing_repayment=50_000,
    bank_account_credit=True,
    baby_loan=False,
    insurance=True,
)

REPAYMENT_BASELINE = INCOME_BASELINE.with_(monthly_income=800_000, existing_repayment=None)

VALID_APPLICATION = FormState(
    age=35,
    property_value=30_000_000,
    household=HouseholdType.MULTIPLE,
    monthly_income=600_000,
    existing_repayment=100_000,
    bank_account_credit=True,
    baby_loan=False,
    insurance=True,
)

EDGE_VALUES = FormState(
    age=18,
    property_value=5_000_000,
    household=HouseholdType.ALONE,
    monthly_income=193_000,
    existing_repayment=0,
    bank_account_credit=False,
    baby_loan=False,
    insurance=False,
)


class CalculatorScenarioRunner:
    """Drives one BrowserSession through calculator scenarios for one test."""

    def __init__(
        self,
        session: BrowserSession,
        reporter: Reporter,
        config: Optional[LoanCalcConfig] = None
    ):
        self.session = session
        self.reporter = reporter
        self.config = config or get_config()
        page = session.launch()
        self.calculator = LoanCalculatorPage(page, reporter, self.config)
        self.cookie_popup = CookiePopup(page, reporter, self.config)

    def open(self) -> None:
        """Navigate to the calculator without touching the cookie popup."""
        self.session.navigate(self.config.calculator_url)

    def load_page_and_handle_cookies(self) -> None:
        self.open()
        try:
            self.cookie_popup.accept_if_displayed()
        except PlaywrightError as e:
            # The popup may vanish on its own or be already accepted
            self.reporter.warning(f"Cookie popup handling skipped: {e}")
        self.calculator.wait_for_calculator_form()

    def quick_refresh(self) -> None:
        self.session.refresh()
        self.calculator.wait_for_calculator_form()

    def apply(self, state: FormState, refresh: bool = True) -> None:
        if refresh:
            self.quick_refresh()
        self.calculator.apply_state(state)

    def probe_field_error(self, state: FormState, field: InputField, refresh: bool = True) -> bool:
        """Apply ``state`` and report whether ``field`` shows a validation error."""
        self.apply(state, refresh=refresh)
        shown = self.calculator.is_field_error_visible(field)
        self.reporter.info(f"{field.label} error for {state.input_values().get(field)}: {shown}")
        return shown

    def calculate(self, state: FormState, refresh: bool = True) -> None:
        self.apply(state, refresh=refresh)
        self.calculator.click_calculate()
        self.calculator.wait_for_results()

    def loan_amount_for(self, state: FormState, description: str = "") -> int:
        """Calculate ``state`` and return the first offer's loan amount (0 if missing)."""
        self.calculate(state)
        offer = self.calculator.read_first_offer()
        self.reporter.info(f"{description or state} -> Loan: {offer.loan_amount!r}")
        return offer.loan_amount_value

    def apr_for(self, state: FormState, description: str = "") -> float:
        """Calculate ``state`` and return the first offer's APR (0.0 if missing)."""
        self.calculate(state)
        offer = self.calculator.read_first_offer()
        self.reporter.info(f"{description or state} -> APR: {offer.apr_value}%")
        return offer.apr_value
