"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from qa_html_capture.capture.document import DocumentTree, parse_html
from qa_html_capture.models.config import CaptureConfig, EnvironmentConfig
from qa_html_capture.models.snapshot import Baseline, ElementSnapshot
from qa_html_capture.orchestrator import Orchestrator
from qa_html_capture.store.baseline_store import BaselineStore


# ============================================================================
# HTML Fixtures
# ============================================================================


LOGIN_PAGE = """<html>
<body>
<div id="main">
<form class="login-form">
<input name="email" class="field">
<button id="submit" class="btn btn-primary">Go</button>
</form>
</div>
</body>
</html>"""


@pytest.fixture
def login_html() -> str:
    """A small login page with id, class and name attributes."""
    return LOGIN_PAGE


@pytest.fixture
def login_document(login_html: str) -> DocumentTree:
    return parse_html(login_html)


# ============================================================================
# Snapshot Fixtures
# ============================================================================


@pytest.fixture
def button_snapshot() -> ElementSnapshot:
    """Snapshot of a submit button carrying an id."""
    return ElementSnapshot(
        tag_name="button",
        attributes={"id": "submit", "class": "btn btn-primary", "data-testid": "submit-btn"},
        text="Go",
        xpath="//*[@id='submit']",
        css_selector="button#submit",
        locators=["#submit", ".btn", ".btn-primary", '[data-testid="submit-btn"]', "text=Go"],
    )


@pytest.fixture
def baseline(button_snapshot: ElementSnapshot) -> Baseline:
    return Baseline(
        id="1700000000000",
        name="Login v1",
        source_url="https://example.com/login",
        captured_at="2025-01-01T00:00:00Z",
        raw_html='<button id="submit" class="btn btn-primary" data-testid="submit-btn">Go</button>',
        elements={"submit": button_snapshot},
    )


# ============================================================================
# Configuration / Store Fixtures
# ============================================================================


@pytest.fixture
def capture_config(tmp_path: Path) -> CaptureConfig:
    """Config writing everything under the test's temp directory."""
    return CaptureConfig(
        project_name="Example",
        environments=[
            EnvironmentConfig(name="staging", url="https://staging.example.com"),
            EnvironmentConfig(name="prod", url="https://example.com", is_default=True),
        ],
        storage_dir=str(tmp_path / ".qa-capture"),
        report_output_dir=str(tmp_path / "reports"),
    )


@pytest.fixture
def store(tmp_path: Path) -> BaselineStore:
    return BaselineStore(tmp_path / "baselines")


@pytest.fixture
def orchestrator(capture_config: CaptureConfig) -> Orchestrator:
    return Orchestrator(capture_config)
