"""
Playwright browser session for the acceptance suite.

One session owns one browser, one context and one page. Scenarios run
sequentially against it; nothing is shared between sessions.

Uses the synchronous Playwright API: every interaction blocks until it
completes or its bounded wait times out.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional

from playwright.sync_api import (
    sync_playwright,
    Browser,
    BrowserContext,
    Page,
    Playwright,
)

from .config import LoanCalcConfig, get_config
from .logging_config import get_logger, log_browser_action

logger = get_logger(__name__)


class BrowserSession:
    """
    Owns the Playwright browser for a test session.

    Usage:
        with BrowserSession(config) as session:
            session.navigate(config.calculator_url)
            ...
    """

    def __init__(self, config: Optional[LoanCalcConfig] = None):
        """
        Initialize the session (the browser is launched lazily).

        Args:
            config: Suite configuration (uses the global config if None)
        """
        self.config = config or get_config()
        self.playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self.page: Optional[Page] = None

    def __enter__(self) -> "BrowserSession":
        self.launch()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def launch(self) -> Page:
        """
        Launch the configured browser and open a page.

        Returns:
            The session's Page
        """
        if self.page is not None:
            return self.page

        self.playwright = sync_playwright().start()

        if self.config.browser_type == "webkit":
            browser_launcher = self.playwright.webkit
        elif self.config.browser_type == "firefox":
            browser_launcher = self.playwright.firefox
        else:
            browser_launcher = self.playwright.chromium

        try:
            self.browser = browser_launcher.launch(
                headless=self.config.headless,
                slow_mo=self.config.slow_mo,
                args=self.config.browser_args
            )
        except Exception:
            self.playwright.stop()
            self.playwright = None
            raise

        self.context = self.browser.new_context(viewport=self.config.viewport_size)
        self.page = self.context.new_page()
        self.page.set_default_navigation_timeout(self.config.navigation_timeout)
        self.page.set_default_timeout(self.config.element_timeout)

        logger.info(
            f"Browser launched: {self.config.browser_type} "
            f"(headless={self.config.headless}, "
            f"viewport={self.config.viewport_width}x{self.config.viewport_height})"
        )
        return self.page

    def navigate(self, url: str) -> None:
        """
        Navigate to a URL and wait for the DOM to be ready.

        Navigation failures propagate: a page that cannot be loaded fails
        the scenario.
        """
        page = self.launch()
        logger.info(f"Navigating to: {url}")
        page.goto(url, wait_until="domcontentloaded")
        log_browser_action("navigate", url, logger=logger)

    def refresh(self) -> None:
        """Reload the current page. The remote form resets its state."""
        page = self.launch()
        page.reload(wait_until="domcontentloaded")
        log_browser_action("reload", page.url, logger=logger)

    def take_screenshot(self, label: str = "screenshot") -> Optional[Path]:
        """
        Save a viewport screenshot to the configured directory.

        Args:
            label: Label used in the filename

        Returns:
            Path of the saved file, or None when disabled or failed
        """
        if self.page is None or not self.config.save_screenshots:
            return None

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")[:-3]
        safe_label = "".join(c if c.isalnum() or c in "-_" else "_" for c in label)
        path = self.config.get_screenshot_path(f"screenshot_{timestamp}_{safe_label}.png")

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            self.page.screenshot(path=str(path), full_page=False)
            logger.info(f"Screenshot saved: {path.name}")
            return path
        except Exception as e:
            logger.warning(f"Screenshot failed for {label}: {e}")
            return None

    def close(self) -> None:
        """Close browser and clean up resources."""
        try:
            if self.context:
                self.context.close()
            if self.browser:
                self.browser.close()
                logger.info("Browser closed")
            if self.playwright:
                self.playwright.stop()
        except Exception as e:
            logger.warning(f"Error closing browser: {e}")
        finally:
            self.browser = None
            self.context = None
            self.page = None
            self.playwright = None
