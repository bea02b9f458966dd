"""
Pytest configuration and fixtures for the loan calculator suite.

Provides the session configuration, a reporter per test, and a shared
Playwright session for the browser-backed tests. Live-site scenarios are
skipped unless LOANCALC_RUN_LIVE is set.
"""

import logging
from pathlib import Path

import pytest

from loancalc.config import LoanCalcConfig, get_test_config, set_config
from loancalc.logging_config import setup_logging
from loancalc.playwright_client import BrowserSession
from loancalc.reporter import Reporter

TEST_OUTPUT_DIR = Path(__file__).parent / 'test_output'


@pytest.fixture(scope='session', autouse=True)
def test_config():
    """
    Set up test configuration for the entire test session.

    Logs and failure screenshots go to tests/test_output/.
    """
    config = get_test_config(output_dir=TEST_OUTPUT_DIR)
    config.create_directories()
    set_config(config)

    log_file = config.get_log_path('test_session.log')
    setup_logging(level='DEBUG', use_colors=True, log_to_file=True, log_file=str(log_file))

    logger = logging.getLogger('loancalc.test')
    logger.info("=" * 80)
    logger.info("Loan calculator test session started")
    logger.info("=" * 80)
    config.log_summary()
    logger.info(f"Log file: {log_file}")

    yield config

    logger.info("=" * 80)
    logger.info("Loan calculator test session complete")
    logger.info("=" * 80)


@pytest.fixture
def reporter(request):
    """Report handle for the running test; attached to the test report at the end."""
    doc = (request.node.function.__doc__ or "").strip().splitlines()
    handle = Reporter(request.node.name, doc[0] if doc else "")
    request.node.reporter = handle
    return handle


@pytest.fixture(scope='session')
def browser_session(test_config):
    """
    One Playwright browser for all browser-backed tests.

    Skips the dependent tests when no browser can be launched (for example
    when `playwright install` has not been run).
    """
    session = BrowserSession(test_config)
    try:
        session.launch()
    except Exception as e:
        pytest.skip(f"Playwright browser not available: {e}")
    yield session
    session.close()


@pytest.fixture
def page(browser_session):
    """The shared session's Playwright page."""
    return browser_session.page


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "live: runs against the real calculator site (set LOANCALC_RUN_LIVE=true)"
    )
    config.addinivalue_line(
        "markers", "browser: needs a Playwright browser"
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


def pytest_collection_modifyitems(config, items):
    """Mark browser/live tests as slow and skip live ones unless enabled."""
    run_live = LoanCalcConfig().run_live
    skip_live = pytest.mark.skip(reason="live-site scenarios disabled (set LOANCALC_RUN_LIVE=true)")

    for item in items:
        if "live" in item.keywords or "browser" in item.keywords:
            item.add_marker(pytest.mark.slow)
        if "live" in item.keywords and not run_live:
            item.add_marker(skip_live)


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Attach reporter entries to the report; screenshot failed browser tests."""
    outcome = yield
    report = outcome.get_result()
    if report.when != "call":
        return

    handle = getattr(item, "reporter", None)
    if handle is not None and handle.entries:
        report.sections.append(("reporter", handle.render()))

    if report.failed:
        session = item.funcargs.get("browser_session")
        if isinstance(session, BrowserSession):
            session.take_screenshot(item.name)
