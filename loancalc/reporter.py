"""
Per-test reporting sink.

A Reporter is created at the start of each test and discarded at the end.
It is write-only from the point of view of the page objects: messages go to
the log (tagged with the test name) and are kept so the pytest report hook
can attach them to the test's report section.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class Severity(str, Enum):
    """Severities accepted by the reporter."""
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"


_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.SUCCESS: logging.INFO,
    Severity.WARNING: logging.WARNING,
}


@dataclass(frozen=True)
class ReportEntry:
    severity: Severity
    message: str


class TestNameAdapter(logging.LoggerAdapter):
    """Logger adapter that adds the running test's name to each record."""

    def process(self, msg, kwargs):
        extra = kwargs.get('extra', {})
        extra.update(self.extra)
        kwargs['extra'] = extra
        return f"[{self.extra['test_name']}] {msg}", kwargs


class Reporter:
    """Write-only report handle bound to one test case."""

    __test__ = False  # not a pytest test class

    def __init__(self, test_name: str, description: str = "", logger: Optional[logging.Logger] = None):
        self.test_name = test_name
        self.description = description
        self.entries: List[ReportEntry] = []
        self._log = TestNameAdapter(
            logger or logging.getLogger("loancalc.report"),
            {'test_name': test_name}
        )

    def info(self, message: str) -> None:
        self._record(Severity.INFO, message)

    def success(self, message: str) -> None:
        self._record(Severity.SUCCESS, message)

    def warning(self, message: str) -> None:
        self._record(Severity.WARNING, message)

    def _record(self, severity: Severity, message: str) -> None:
        self.entries.append(ReportEntry(severity, message))
        prefix = "✓ " if severity == Severity.SUCCESS else ""
        self._log.log(_LEVELS[severity], f"{prefix}{message}")

    @property
    def warnings(self) -> List[str]:
        return [e.message for e in self.entries if e.severity == Severity.WARNING]

    def render(self) -> str:
        """Render the entries as plain text for a pytest report section."""
        lines = [f"{self.test_name}: {self.description}" if self.description else self.test_name]
        for entry in self.entries:
            lines.append(f"  {entry.severity.value.upper():8s} {entry.message}")
        return "\n".join(lines)
