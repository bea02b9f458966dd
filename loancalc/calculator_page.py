"""
Page object for the external loan calculator.

Translates domain intents (set the customer's age, is the income error
shown, what is the first offer's loan amount) into Playwright interactions
against the DOM contract in ``selectors``.

Two failure policies apply:
- Action methods (``set_*``, ``select_*``, ``click_*``, ``apply_state``)
  let ``playwright.sync_api.TimeoutError`` propagate. A control that never
  becomes interactable means the page contract or the environment is
  broken, and the scenario must fail.
- Query methods (``is_*``, ``get_*``, ``read_*``, ``wait_for_results``)
  never raise. A missing element means "no error" / "no offer" and maps to
  False, an empty string or a FieldError with a non-SHOWN status.
"""

import time
from typing import List, Optional, Union

from playwright.sync_api import (
    Error as PlaywrightError,
    Locator,
    Page,
    TimeoutError as PlaywrightTimeoutError,
)

from . import selectors
from .config import LoanCalcConfig, get_config
from .logging_config import get_logger, log_browser_action
from .models import (
    CalculationOutcome,
    DiscountOption,
    ErrorStatus,
    FieldError,
    FormState,
    HouseholdType,
    InputField,
    Offer,
)
from .reporter import Reporter

logger = get_logger(__name__)


class LoanCalculatorPage:
    """Page object for the "how much mortgage can I get" calculator."""

    def __init__(self, page: Page, reporter: Reporter, config: Optional[LoanCalcConfig] = None):
        self.page = page
        self.reporter = reporter
        self.config = config or get_config()

    # *** Element helpers ***

    def _locator(self, selector: str) -> Locator:
        return self.page.locator(selector)

    def _wait_until_visible(self, locator: Locator, timeout: Optional[int] = None) -> None:
        locator.wait_for(state="visible", timeout=timeout or self.config.element_timeout)

    def _is_displayed(self, selector: str) -> bool:
        try:
            return self._locator(selector).is_visible()
        except PlaywrightError as e:
            logger.debug(f"Visibility check failed for {selector}: {e}")
            return False

    def _force_blur(self, locator: Locator, selector: str) -> None:
        # Only nudges client-side validation; the page works without it
        try:
            locator.evaluate("el => el.blur()")
        except PlaywrightError as e:
            logger.debug(f"Blur failed on {selector}: {e}")

    @staticmethod
    def _input_field(field: Union[InputField, str]) -> InputField:
        try:
            return InputField(field)
        except ValueError:
            raise ValueError(f"Unknown input field: {field!r}") from None

    @staticmethod
    def _discount_option(option: Union[DiscountOption, str]) -> DiscountOption:
        try:
            return DiscountOption(option)
        except ValueError:
            raise ValueError(f"Unknown discount option: {option!r}") from None

    # *** Form container ***

    def wait_for_calculator_form(self) -> None:
        self.reporter.info("Waiting for calculator form to be displayed")
        self._wait_until_visible(self._locator(selectors.CALCULATOR_FORM))

    def is_calculator_form_displayed_after_waiting(self) -> bool:
        try:
            self.wait_for_calculator_form()
            return True
        except PlaywrightError:
            return False

    # *** Form input actions ***

    def set_field(self, field: Union[InputField, str], value: int) -> None:
        """
        Type a value into a numeric input and let its validation run.

        Waits for the control, clears it, types the value, blurs it so the
        page validates, then waits for the field's error message to settle.
        """
        field = self._input_field(field)
        selector = selectors.INPUTS[field]
        self.reporter.info(f"Setting {field.label.lower()} to: {value}")

        control = self._locator(selector)
        self._wait_until_visible(control)
        control.clear()
        control.press_sequentially(str(value))
        self._force_blur(control, selector)
        log_browser_action("fill", f"{selector} = {value}", logger=logger)

        self._wait_for_validation_to_settle(field)
        self.reporter.success(f"{field.label} set to: {value}")

    def set_customer_age(self, age: int) -> None:
        self.set_field(InputField.AGE, age)

    def set_property_value(self, value: int) -> None:
        self.set_field(InputField.PROPERTY_VALUE, value)

    def set_monthly_income(self, income: int) -> None:
        self.set_field(InputField.MONTHLY_INCOME, income)

    def set_existing_loan_repayment(self, amount: int) -> None:
        self.set_field(InputField.EXISTING_REPAYMENT, amount)

    def select_household_type(self, alone: bool) -> None:
        """Select "I earn alone" or "at least two of us earn"; clicks only if needed."""
        household = HouseholdType.ALONE if alone else HouseholdType.MULTIPLE
        self.reporter.info(f"Selecting household type: {household.value}")

        radio = self._locator(selectors.HOUSEHOLD_RADIOS[household])
        self._wait_until_visible(radio)
        if not radio.is_checked():
            radio.click()
            log_browser_action("click", selectors.HOUSEHOLD_RADIOS[household], logger=logger)

        self.reporter.success(f"Household type selected: {household.value}")

    def set_checkbox_option(self, option: Union[DiscountOption, str], desired: bool) -> None:
        """Bring a discount checkbox to the desired state; clicks only on mismatch."""
        option = self._discount_option(option)
        selector = selectors.DISCOUNT_CHECKBOXES[option]
        self.reporter.info(f"Setting {option.value} option to: {desired}")

        checkbox = self._locator(selector)
        self._wait_until_visible(checkbox)
        if checkbox.is_checked() != desired:
            checkbox.click()
            log_browser_action("click", selector, logger=logger)

        self.reporter.success(f"{option.value} option set to: {desired}")

    def set_bank_account_credit_option(self, check: bool) -> None:
        self.set_checkbox_option(DiscountOption.BANK_ACCOUNT_CREDIT, check)

    def set_baby_loan_option(self, check: bool) -> None:
        self.set_checkbox_option(DiscountOption.BABY_LOAN, check)

    def set_insurance_option(self, check: bool) -> None:
        self.set_checkbox_option(DiscountOption.INSURANCE, check)

    def apply_state(self, state: FormState) -> None:
        """
        Apply every field of a FormState that is not None.

        Order is fixed: property value, age, household, income, repayment,
        then the discount checkboxes.
        """
        inputs = state.input_values()
        for field in (InputField.PROPERTY_VALUE, InputField.AGE):
            if field in inputs:
                self.set_field(field, inputs[field])

        if state.household is not None:
            self.select_household_type(state.household == HouseholdType.ALONE)

        for field in (InputField.MONTHLY_INCOME, InputField.EXISTING_REPAYMENT):
            if field in inputs:
                self.set_field(field, inputs[field])

        for option, desired in state.discount_values().items():
            self.set_checkbox_option(option, desired)

    def fill_calculator_form_with_minimum_data(self, age: int) -> None:
        self.reporter.info(f"Filling calculator form with minimum data for age: {age}")
        self.apply_state(FormState(
            property_value=50_000_000,
            age=age,
            household=HouseholdType.ALONE,
            monthly_income=500_000,
            existing_repayment=0,
        ))
        self.reporter.success("Calculator form filled with minimum data")

    # *** Waiting ***

    def _error_snapshot(self, field: InputField):
        error = self.get_field_error(field)
        return error.status, error.message

    def _wait_for_validation_to_settle(self, field: InputField) -> None:
        """
        Poll the field's error container until it stops changing.

        The page gives no completion signal for blur validation, so the
        message is considered settled once its (status, text) snapshot has
        been unchanged for ``validation_quiet_ms``.
        """
        quiet = self.config.validation_quiet_ms / 1000
        deadline = time.monotonic() + self.config.element_timeout / 1000

        last = self._error_snapshot(field)
        stable_since = time.monotonic()
        while time.monotonic() - stable_since < quiet:
            if time.monotonic() > deadline:
                raise PlaywrightTimeoutError(
                    f"Validation message for {field.value} did not settle "
                    f"within {self.config.element_timeout}ms"
                )
            self.page.wait_for_timeout(self.config.poll_interval_ms)
            current = self._error_snapshot(field)
            if current != last:
                last = current
                stable_since = time.monotonic()

    def _visible_outcome(self) -> Optional[CalculationOutcome]:
        if self._is_displayed(selectors.CANNOT_CALCULATE_SECTION):
            return CalculationOutcome.CANNOT_CALCULATE
        if self._is_displayed(selectors.RESULTS_SECTION):
            return CalculationOutcome.RESULTS
        return None

    def _wait_for_calculation_outcome(
        self,
        previous: Optional[CalculationOutcome] = None,
        previous_offer: str = ""
    ) -> CalculationOutcome:
        """
        Wait for whichever of results / cannot-calculate shows up first.

        A region left over from the previous calculation only counts once it
        has gone hidden and come back, or once it shows a different first
        offer.
        """
        deadline = time.monotonic() + self.config.calculation_timeout / 1000
        cleared = previous is None
        while True:
            current = self._visible_outcome()
            if current is None:
                cleared = True
            elif cleared or current != previous:
                return current
            elif (current == CalculationOutcome.RESULTS
                  and self.get_loan_amount_from_first_offer() != previous_offer):
                return current
            if time.monotonic() > deadline:
                return CalculationOutcome.TIMEOUT
            self.page.wait_for_timeout(self.config.poll_interval_ms)

    # *** Calculation ***

    def click_calculate(self) -> CalculationOutcome:
        """
        Click "Mennyi lakáshitelt kaphatok?" and wait for the page to answer.

        Returns:
            RESULTS or CANNOT_CALCULATE, whichever region answered this click,
            or TIMEOUT (reported as a warning) if neither did
        """
        self.reporter.info("Clicking on 'Mennyi lakáshitelt kaphatok?' button")

        button = self._locator(selectors.CALCULATE_BUTTON)
        self._wait_until_visible(button)
        previous = self._visible_outcome()
        previous_offer = (
            self.get_loan_amount_from_first_offer()
            if previous == CalculationOutcome.RESULTS else ""
        )
        button.click()
        log_browser_action("click", selectors.CALCULATE_BUTTON, logger=logger)

        outcome = self._wait_for_calculation_outcome(previous, previous_offer)
        if outcome == CalculationOutcome.TIMEOUT:
            self.reporter.warning("Neither results nor 'cannot calculate' displayed within timeout")
        else:
            self.reporter.success(f"Calculation finished: {outcome.value}")
        return outcome

    def wait_for_results(self) -> bool:
        self.reporter.info("Waiting for calculation results")
        try:
            self._wait_until_visible(
                self._locator(selectors.RESULTS_SECTION),
                timeout=self.config.calculation_timeout
            )
        except PlaywrightError:
            self.reporter.warning("Results section not displayed within timeout")
            return False
        self.reporter.success("Calculation results displayed")
        return True

    def click_try_again(self) -> None:
        self.reporter.info("Clicking 'try again' to recalculate")
        button = self._locator(selectors.TRY_AGAIN_BUTTON)
        self._wait_until_visible(button)
        button.click()

    def is_loan_application_available(self) -> bool:
        """
        Decide whether the page offers a loan for the current form.

        Precedence: a visible age error means no; otherwise calculate, and a
        fresh "cannot calculate" answer means no; otherwise yes only if fresh
        results came back with at least one visible offer box.
        """
        self.reporter.info("Checking if loan application is available")

        if self.is_field_error_visible(InputField.AGE):
            self.reporter.info("Loan application NOT available - age restriction error")
            return False

        try:
            outcome = self.click_calculate()
        except PlaywrightError as e:
            self.reporter.warning(f"Could not trigger calculation: {e}")
            return False

        if outcome == CalculationOutcome.CANNOT_CALCULATE:
            self.reporter.info("Loan application NOT available - cannot calculate section displayed")
            return False

        if outcome == CalculationOutcome.RESULTS:
            if any(self._is_displayed(box) for box in selectors.OFFER_BOXES):
                self.reporter.info("Loan application IS available - loan offers displayed")
                return True

        self.reporter.info("Loan application NOT available - no results or offers found")
        return False

    # *** Validation errors ***

    def get_field_error(self, field: Union[InputField, str]) -> FieldError:
        """
        Look up a field's validation message.

        Returns a FieldError whose status tells apart a shown message, a
        hidden or empty one, a missing element, and a failed lookup.
        """
        field = self._input_field(field)
        selector = selectors.ERRORS[field]
        try:
            element = self._locator(selector)
            if element.count() == 0:
                return FieldError(field=field, status=ErrorStatus.ABSENT)
            if not element.is_visible():
                return FieldError(field=field, status=ErrorStatus.NOT_SHOWN)
            text = element.inner_text(timeout=self.config.element_timeout).strip()
        except PlaywrightError as e:
            logger.debug(f"Error lookup failed for {selector}: {e}")
            return FieldError(field=field, status=ErrorStatus.UNKNOWN, reason=str(e))

        if not text:
            return FieldError(field=field, status=ErrorStatus.NOT_SHOWN)
        return FieldError(field=field, status=ErrorStatus.SHOWN, message=text)

    def is_field_error_visible(self, field: Union[InputField, str]) -> bool:
        return self.get_field_error(field).is_shown

    def get_field_error_text(self, field: Union[InputField, str]) -> str:
        error = self.get_field_error(field)
        return error.message if error.is_shown else ""

    def is_age_error_visible(self) -> bool:
        return self.is_field_error_visible(InputField.AGE)

    def is_property_value_error_visible(self) -> bool:
        return self.is_field_error_visible(InputField.PROPERTY_VALUE)

    def is_monthly_income_error_visible(self) -> bool:
        return self.is_field_error_visible(InputField.MONTHLY_INCOME)

    def is_existing_loan_repayment_error_visible(self) -> bool:
        return self.is_field_error_visible(InputField.EXISTING_REPAYMENT)

    def get_age_error_text(self) -> str:
        return self.get_field_error_text(InputField.AGE)

    def get_property_value_error_text(self) -> str:
        return self.get_field_error_text(InputField.PROPERTY_VALUE)

    def get_monthly_income_error_text(self) -> str:
        return self.get_field_error_text(InputField.MONTHLY_INCOME)

    def get_existing_loan_repayment_error_text(self) -> str:
        return self.get_field_error_text(InputField.EXISTING_REPAYMENT)

    def is_any_form_error_visible(self) -> bool:
        return any(self.is_field_error_visible(field) for field in InputField)

    def get_all_visible_error_messages(self) -> List[str]:
        """Visible error messages, each prefixed with its field's label."""
        messages = []
        for field in InputField:
            error = self.get_field_error(field)
            if error.is_shown:
                messages.append(f"{field.label} error: {error.message}")
        return messages

    # *** Offers ***

    def _first_offer_text(self, selector: str) -> str:
        try:
            element = self._locator(selector)
            if self._locator(selectors.FIRST_OFFER).is_visible() and element.count() > 0:
                return element.inner_text(
                    timeout=self.config.element_timeout
                ).strip()
        except PlaywrightError as e:
            logger.debug(f"Offer lookup failed for {selector}: {e}")
        return ""

    def get_loan_amount_from_first_offer(self) -> str:
        return self._first_offer_text(selectors.FIRST_OFFER_LOAN_AMOUNT)

    def get_monthly_repayment_from_first_offer(self) -> str:
        return self._first_offer_text(selectors.FIRST_OFFER_MONTHLY_REPAYMENT)

    def get_apr_from_first_offer(self) -> str:
        return self._first_offer_text(selectors.FIRST_OFFER_APR)

    def read_first_offer(self) -> Offer:
        return Offer(
            loan_amount=self.get_loan_amount_from_first_offer(),
            monthly_repayment=self.get_monthly_repayment_from_first_offer(),
            apr=self.get_apr_from_first_offer(),
        )

    def is_interested_button_clickable(self) -> bool:
        button = self._locator(selectors.INTERESTED_BUTTON)
        try:
            self._wait_until_visible(button)
            return button.is_enabled()
        except PlaywrightError:
            return False

    def click_interested_in_offer(self) -> None:
        self.reporter.info("Clicking 'I'm interested' button in offer")
        if self.is_interested_button_clickable():
            self._locator(selectors.INTERESTED_BUTTON).click()
            self.reporter.success("Clicked 'I'm interested' button")
        else:
            self.reporter.warning("'I'm interested' button not clickable")
