"""
Settings for the loan calculator acceptance suite.

Values come from, in order of priority: constructor arguments,
``LOANCALC_*`` environment variables, a ``.env`` file in the working
directory, and the defaults below (headless Chromium against the public
calculator page).
"""

import os
from pathlib import Path
from typing import List, Optional
from pydantic import Field, ConfigDict, field_validator
from pydantic_settings import BaseSettings

from .logging_config import get_logger

logger = get_logger(__name__)

BROWSER_TYPES = ("chromium", "firefox", "webkit")


class LoanCalcConfig(BaseSettings):
    """Where the calculator lives, how to drive it, and how long to wait."""

    calculator_url: str = Field(
        default="https://bankmonitor.hu/mennyi-hitelt-kaphatok/",
        description="Page under test; a file:// URI works for the local replica"
    )

    # Browser
    browser_type: str = Field(default="chromium", description="One of chromium, firefox, webkit")
    headless: bool = Field(default=True, description="Set False to watch a run")
    slow_mo: int = Field(default=0, ge=0, le=5000, description="Delay per browser action (ms)")
    viewport_width: int = Field(default=1280, ge=800, le=3840)
    viewport_height: int = Field(default=1024, ge=600, le=2160)

    # Bounded waits (ms)
    navigation_timeout: int = Field(default=30000, ge=1000, le=180000)
    element_timeout: int = Field(
        default=10000, ge=100, le=60000,
        description="Wait for a control to become visible before acting on it"
    )
    calculation_timeout: int = Field(
        default=10000, ge=100, le=60000,
        description="Wait for results or 'cannot calculate' after clicking calculate"
    )
    validation_quiet_ms: int = Field(
        default=300, ge=0, le=5000,
        description="A field's error message counts as settled after this long unchanged"
    )
    poll_interval_ms: int = Field(default=100, ge=10, le=2000)

    # Cookie consent dialog (vendor markup, separate from the calculator's own DOM)
    cookie_popup_selector: str = Field(default="#CybotCookiebotDialog")
    cookie_accept_selector: str = Field(default="#CybotCookiebotDialogBodyLevelButtonLevelOptinAllowAll")
    cookie_popup_timeout: int = Field(default=5000, ge=100, le=60000)

    # Output
    workspace_root: Optional[Path] = Field(default=None, description="Defaults to the working directory")
    log_dir: Optional[Path] = Field(default=None, description="Defaults to <workspace_root>/logs")
    save_screenshots: bool = Field(default=True, description="Screenshot failed browser tests")
    screenshot_dir: Optional[Path] = Field(default=None, description="Defaults to <workspace_root>/screenshots")

    run_live: bool = Field(default=False, description="Include the scenarios against the real site")

    model_config = ConfigDict(
        env_prefix="LOANCALC_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"  # the .env may also carry LOG_LEVEL and other tools' settings
    )

    @field_validator("browser_type")
    @classmethod
    def _known_browser(cls, value: str) -> str:
        value = value.lower()
        if value not in BROWSER_TYPES:
            raise ValueError(f"browser_type must be one of {', '.join(BROWSER_TYPES)}, got {value!r}")
        return value

    def __init__(self, **kwargs):
        super().__init__(**kwargs)

        root = self.workspace_root or Path.cwd()
        self.workspace_root = root
        self.log_dir = self.log_dir or root / "logs"
        self.screenshot_dir = self.screenshot_dir or root / "screenshots"

    def create_directories(self):
        self.log_dir.mkdir(parents=True, exist_ok=True)
        if self.save_screenshots:
            self.screenshot_dir.mkdir(parents=True, exist_ok=True)

    @property
    def browser_args(self) -> List[str]:
        """Extra launch flags; only headless Chromium in containers needs them."""
        if self.headless and self.browser_type == "chromium":
            return ['--disable-gpu', '--no-sandbox', '--disable-dev-shm-usage']
        return []

    @property
    def viewport_size(self) -> dict:
        return {'width': self.viewport_width, 'height': self.viewport_height}

    def get_log_path(self, log_name: str = "loancalc.log") -> Path:
        return self.log_dir / log_name

    def get_screenshot_path(self, filename: str) -> Path:
        return self.screenshot_dir / filename

    def log_summary(self) -> None:
        """Log the settings that decide what a run talks to."""
        logger.info(f"Calculator URL: {self.calculator_url}")
        logger.info(f"Browser: {self.browser_type} (headless={self.headless}, slow_mo={self.slow_mo}ms)")
        logger.info(
            f"Timeouts: element={self.element_timeout}ms, "
            f"calculation={self.calculation_timeout}ms, "
            f"validation quiet={self.validation_quiet_ms}ms"
        )
        logger.info(f"Logs: {self.log_dir}  Screenshots: {self.screenshot_dir}")


_config: Optional[LoanCalcConfig] = None


def get_config() -> LoanCalcConfig:
    """Process-wide settings, created from the environment on first use."""
    global _config
    if _config is None:
        _config = LoanCalcConfig()
    return _config


def reload_config() -> LoanCalcConfig:
    """Re-read the environment and replace the process-wide settings."""
    global _config
    _config = LoanCalcConfig()
    return _config


def set_config(config: LoanCalcConfig):
    global _config
    _config = config


def get_dev_config() -> LoanCalcConfig:
    """Visible Chromium with slowed-down actions, for watching a scenario."""
    return LoanCalcConfig(browser_type="chromium", headless=False, slow_mo=500)


def get_test_config(output_dir: Optional[Path] = None) -> LoanCalcConfig:
    """
    Settings for a pytest session.

    Reads ``.env`` first (python-dotenv), then honours a few overrides:

        LOANCALC_HEADLESS=false     watch the browser
        LOANCALC_SLOW_MO=250        slow actions down (default 250 when not headless)
        LOANCALC_BROWSER_TYPE=...   chromium | firefox | webkit
        LOANCALC_RUN_LIVE=true      include the live-site scenarios

    Args:
        output_dir: Where logs/ and screenshots/ go (defaults to the working directory)
    """
    from dotenv import load_dotenv
    env_file = Path.cwd() / '.env'
    if env_file.exists():
        load_dotenv(env_file)

    headless = os.getenv('LOANCALC_HEADLESS', 'true').lower() in ('true', '1', 'yes')
    slow_mo = int(os.getenv('LOANCALC_SLOW_MO', '0' if headless else '250'))
    output_dir = output_dir or Path.cwd()

    return LoanCalcConfig(
        headless=headless,
        slow_mo=slow_mo,
        log_dir=output_dir / "logs",
        screenshot_dir=output_dir / "screenshots",
        save_screenshots=True
    )


def get_ci_config() -> LoanCalcConfig:
    """Headless Chromium at full speed for unattended runs."""
    return LoanCalcConfig(browser_type="chromium", headless=True, slow_mo=0, save_screenshots=True)
