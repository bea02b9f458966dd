"""
Business-rule scenarios against a local replica of the calculator page.

The replica (fixtures/calculator.html) implements the same DOM contract and
the same published rules as the remote site, so these tests exercise the
page object and the scenario runner in a real browser without network
access. They need `playwright install chromium`.
"""

from pathlib import Path

import pytest

from loancalc import business_rules, scenarios, selectors
from loancalc.models import CalculationOutcome, DiscountOption, HouseholdType, InputField
from loancalc.scenarios import CalculatorScenarioRunner

pytestmark = pytest.mark.browser

REPLICA_PAGE = Path(__file__).parent / 'fixtures' / 'calculator.html'


@pytest.fixture
def local_config(test_config):
    return test_config.model_copy(update={
        'calculator_url': REPLICA_PAGE.resolve().as_uri(),
        'element_timeout': 5000,
        'calculation_timeout': 5000,
        'cookie_popup_timeout': 2000,
        'validation_quiet_ms': 50,
        'poll_interval_ms': 20,
    })


@pytest.fixture
def runner(browser_session, reporter, local_config):
    runner = CalculatorScenarioRunner(browser_session, reporter, local_config)
    runner.load_page_and_handle_cookies()
    return runner


class TestValidationBoundaries:

    @pytest.mark.parametrize("age", [17, 18, 19, 65, 66, 70])
    def test_age(self, runner, age):
        """Age error is shown exactly outside 18..65."""
        state = scenarios.VALIDATION_BASELINE.with_(age=age)
        assert runner.probe_field_error(state, InputField.AGE) is business_rules.expects_age_error(age)

    @pytest.mark.parametrize("value", [4_999_999, 5_000_000, 5_000_001, 6_000_000])
    def test_property_value(self, runner, value):
        """Property value below 5 000 000 is rejected."""
        state = scenarios.VALIDATION_BASELINE.with_(property_value=value)
        assert runner.probe_field_error(state, InputField.PROPERTY_VALUE) is \
            business_rules.expects_property_value_error(value)

    @pytest.mark.parametrize("household, income", [
        (HouseholdType.ALONE, 192_999),
        (HouseholdType.ALONE, 193_000),
        (HouseholdType.ALONE, 193_001),
        (HouseholdType.MULTIPLE, 289_999),
        (HouseholdType.MULTIPLE, 290_000),
        (HouseholdType.MULTIPLE, 290_001),
    ])
    def test_minimum_income_per_household(self, runner, household, income):
        """Minimum income depends on the number of earners."""
        state = scenarios.VALIDATION_BASELINE.with_(household=household, monthly_income=income)
        assert runner.probe_field_error(state, InputField.MONTHLY_INCOME) is \
            business_rules.expects_income_error(income, household)

    @pytest.mark.parametrize("income, ratio", [
        (600_000, 0.49),
        (600_000, 0.50),
        (600_000, 0.51),
        (800_000, 0.60),
        (2_000_000, 0.55),
        (2_000_000, 0.61),
    ])
    def test_repayment_ratio(self, runner, income, ratio):
        """Existing repayments are capped at 50% (60% from 800 000 income)."""
        repayment = round(income * ratio)
        state = scenarios.REPAYMENT_BASELINE.with_(monthly_income=income, existing_repayment=repayment)
        assert runner.probe_field_error(state, InputField.EXISTING_REPAYMENT) is \
            business_rules.expects_repayment_error(repayment, income)

    def test_hidden_error_with_stale_text_is_not_shown(self, runner, page):
        """A hidden message that still carries text does not count as shown."""
        runner.apply(scenarios.VALIDATION_BASELINE.with_(property_value=4_000_000))
        assert runner.calculator.is_property_value_error_visible()

        runner.calculator.set_property_value(6_000_000)

        assert page.locator(selectors.ERRORS[InputField.PROPERTY_VALUE]).text_content().strip()
        assert not runner.calculator.is_property_value_error_visible()
        assert runner.calculator.get_property_value_error_text() == ""

    def test_all_visible_error_messages(self, runner):
        runner.apply(scenarios.VALIDATION_BASELINE.with_(age=70, property_value=1_000_000))

        messages = runner.calculator.get_all_visible_error_messages()

        assert len(messages) == 2
        assert messages[0].startswith("Age error: ")
        assert messages[1].startswith("Property value error: ")


class TestLoanAmounts:

    @pytest.mark.parametrize("property_value", sorted(business_rules.PROPERTY_TO_LOAN))
    def test_property_to_loan_mapping(self, runner, property_value):
        """Maximum loan for known property values."""
        state = scenarios.PROPERTY_LOAN_BASELINE.with_(property_value=property_value)
        assert runner.loan_amount_for(state) == business_rules.PROPERTY_TO_LOAN[property_value]

    def test_loan_grows_with_property_value(self, runner):
        amounts = [
            runner.loan_amount_for(scenarios.PROPERTY_MONOTONIC_BASELINE.with_(property_value=value))
            for value in (10_000_000, 30_000_000, 50_000_000)
        ]
        assert amounts[0] < amounts[1] < amounts[2]

    def test_loan_grows_with_income(self, runner):
        amounts = [
            runner.loan_amount_for(scenarios.INCOME_BASELINE.with_(monthly_income=income))
            for income in (400_000, 600_000, 800_000)
        ]
        assert amounts[0] < amounts[1] < amounts[2]

    def test_loan_shrinks_with_existing_repayment(self, runner):
        amounts = [
            runner.loan_amount_for(scenarios.REPAYMENT_BASELINE.with_(existing_repayment=repayment))
            for repayment in (50_000, 200_000, 400_000)
        ]
        assert amounts == sorted(amounts, reverse=True)

        no_repayment = runner.loan_amount_for(scenarios.REPAYMENT_BASELINE.with_(existing_repayment=0))
        with_repayment = runner.loan_amount_for(scenarios.REPAYMENT_BASELINE.with_(existing_repayment=300_000))
        assert no_repayment >= with_repayment

    def test_insurance_lowers_apr(self, runner):
        """Repayment protection insurance gives a lower APR."""
        with_insurance = runner.apr_for(scenarios.VALID_APPLICATION.with_(insurance=True))
        without_insurance = runner.apr_for(scenarios.VALID_APPLICATION.with_(insurance=False))

        assert 0 < with_insurance < without_insurance


class TestApplication:

    def test_valid_application_end_to_end(self, runner, page, reporter):
        """A valid customer gets offers and can express interest."""
        runner.apply(scenarios.VALID_APPLICATION)

        assert runner.calculator.is_loan_application_available()

        offer = runner.calculator.read_first_offer()
        assert offer.loan_amount_value > 0
        assert offer.monthly_repayment_value > 0
        assert offer.apr_value > 0

        runner.calculator.click_interested_in_offer()
        assert page.locator("#erdeklodes").is_visible()
        assert reporter.warnings == []

    def test_edge_values_still_get_an_offer(self, runner):
        runner.apply(scenarios.EDGE_VALUES)

        assert not runner.calculator.is_any_form_error_visible()
        assert runner.calculator.is_loan_application_available()

    def test_age_error_takes_precedence(self, runner, page):
        """With an age error no calculation is attempted."""
        runner.apply(scenarios.VALID_APPLICATION.with_(age=70))

        assert not runner.calculator.is_loan_application_available()
        assert not page.locator(selectors.RESULTS_SECTION).is_visible()

    def test_cannot_calculate_and_try_again(self, runner, page):
        runner.apply(scenarios.VALID_APPLICATION.with_(monthly_income=100_000))

        assert runner.calculator.click_calculate() == CalculationOutcome.CANNOT_CALCULATE
        assert not runner.calculator.wait_for_results()
        assert runner.calculator.read_first_offer().is_empty

        runner.calculator.click_try_again()
        assert not page.locator(selectors.CANNOT_CALCULATE_SECTION).is_visible()

    def test_toggles_are_idempotent(self, runner, page):
        runner.quick_refresh()
        calculator = runner.calculator

        calculator.set_insurance_option(True)
        calculator.set_insurance_option(True)
        calculator.select_household_type(alone=False)
        calculator.select_household_type(alone=False)

        assert page.locator(selectors.DISCOUNT_CHECKBOXES[DiscountOption.INSURANCE]).is_checked()
        assert page.locator(selectors.HOUSEHOLD_RADIOS[HouseholdType.MULTIPLE]).is_checked()

    def test_calculating_twice_gives_same_amount(self, runner):
        """Recalculating without a reload does not change the offer."""
        runner.calculate(scenarios.VALID_APPLICATION)
        first = runner.calculator.read_first_offer().loan_amount_value

        runner.calculator.click_calculate()
        runner.calculator.wait_for_results()
        second = runner.calculator.read_first_offer().loan_amount_value

        assert first == second > 0

    def test_cookie_popup_shown_then_accepted(self, browser_session, reporter, local_config):
        runner = CalculatorScenarioRunner(browser_session, reporter, local_config)
        runner.open()

        assert runner.cookie_popup.is_cookie_popup_displayed_after_waiting()
        runner.cookie_popup.click_on_cookie_accept_button()
        assert runner.cookie_popup.has_cookie_popup_disappeared_after_waiting()
        assert runner.calculator.is_calculator_form_displayed_after_waiting()
