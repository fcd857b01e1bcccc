import os
import sys
from datetime import UTC, datetime

import pytest


PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC_DIR = os.path.join(PROJECT_ROOT, "src")

if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from stn.config import NotifierConfig, PostCondition  # noqa: E402
from stn.models import AnalysisOutcome, QualityGateStatus  # noqa: E402


class FakeResponse:
    """
    模拟 urllib.request.urlopen 返回的 response 对象。
    - 支持 context manager
    - 支持 .read() / .status / .geturl() / .headers
    """

    def __init__(self, *, status: int, body: bytes, url: str = "https://example.com") -> None:
        self.status = status
        self._body = body
        self._url = url
        self.headers = {"Content-Type": "application/json"}

    def read(self) -> bytes:
        return self._body

    def geturl(self) -> str:
        return self._url

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        return None


@pytest.fixture
def ready_config() -> NotifierConfig:
    """所有前置条件都满足的配置。"""
    return NotifierConfig(
        enabled=True,
        post_condition=PostCondition.ALWAYS,
        webhook_url="https://x",
        show_author=False,
        auth_token="t",
        project_id="p1",
        server_url="https://s",
        tracked_metric_keys=("coverage", "bugs"),
    )


@pytest.fixture
def ok_outcome() -> AnalysisOutcome:
    return AnalysisOutcome(
        quality_gate_status=QualityGateStatus.OK,
        project_name="demo",
        analysis_date=datetime(2026, 2, 10, 0, 0, tzinfo=UTC),
        metrics={"coverage": "81.3"},
    )
