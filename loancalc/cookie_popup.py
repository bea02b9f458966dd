"""Cookie consent popup shown on first visit to the calculator site."""

from typing import Optional

from playwright.sync_api import Error as PlaywrightError, Page

from .config import LoanCalcConfig, get_config
from .logging_config import get_logger, log_browser_action
from .reporter import Reporter

logger = get_logger(__name__)


class CookiePopup:

    def __init__(self, page: Page, reporter: Reporter, config: Optional[LoanCalcConfig] = None):
        self.page = page
        self.reporter = reporter
        self.config = config or get_config()
        self.popup = page.locator(self.config.cookie_popup_selector)
        self.accept_button = page.locator(self.config.cookie_accept_selector)

    def wait_for_cookie_popup_to_be_displayed(self) -> None:
        self.reporter.info("Waiting for cookie popup to be displayed")
        self.popup.wait_for(state="visible", timeout=self.config.cookie_popup_timeout)

    def is_cookie_popup_displayed_after_waiting(self) -> bool:
        try:
            self.wait_for_cookie_popup_to_be_displayed()
            return True
        except PlaywrightError as e:
            logger.debug(f"Cookie popup not displayed: {e}")
            return False

    def click_on_cookie_accept_button(self) -> None:
        self.reporter.info("Clicking on cookie accept button")
        self.accept_button.wait_for(state="visible", timeout=self.config.element_timeout)
        self.accept_button.click()
        log_browser_action("click", self.config.cookie_accept_selector, logger=logger)
        self.reporter.success("Cookie accept button clicked")

    def wait_for_cookie_popup_to_disappear(self) -> None:
        self.reporter.info("Waiting for cookie popup to disappear")
        self.popup.wait_for(state="hidden", timeout=self.config.cookie_popup_timeout)

    def has_cookie_popup_disappeared_after_waiting(self) -> bool:
        try:
            self.wait_for_cookie_popup_to_disappear()
            return True
        except PlaywrightError as e:
            logger.debug(f"Cookie popup still displayed: {e}")
            return False

    def accept_if_displayed(self) -> bool:
        """
        Accept cookies when the popup shows up; a missing popup is fine.

        Returns:
            True if the popup was shown and accepted
        """
        if not self.is_cookie_popup_displayed_after_waiting():
            self.reporter.info("Cookie popup not displayed, continuing")
            return False
        self.click_on_cookie_accept_button()
        self.wait_for_cookie_popup_to_disappear()
        return True
