from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Mapping, Protocol

from .config import load_config
from .http_utils import HttpClient
from .measures import MeasuresClient
from .models import AnalysisOutcome
from .notify.teams import TeamsWebhookClient
from .runner import NotificationRunner, RunReport


logger = logging.getLogger(__name__)


class AnalysisEvent(Protocol):
    """宿主在分析结束时交给我们的对象：scanner 属性 + 分析结果。"""

    properties: Mapping[str, Any]
    outcome: AnalysisOutcome | Mapping[str, Any]


def resolve_log_level(value: str | None) -> int:
    v = (value or "").strip().upper()
    if not v:
        return logging.INFO
    level = logging.getLevelNamesMapping().get(v)
    if isinstance(level, int):
        return level
    return logging.INFO


def configure_logging(level: str | None = None) -> int:
    """
    给本包的 logger 设置级别（不动 root logger，handler 由宿主负责）。

    level 为空时读取环境变量 STN_LOG_LEVEL，默认 INFO。
    """
    resolved = resolve_log_level(level or os.environ.get("STN_LOG_LEVEL"))
    logging.getLogger("stn").setLevel(resolved)
    return resolved


@dataclass(slots=True)
class PostAnalysisTask:
    """
    宿主适配层：分析完成后被调用一次。

    settings:
      - 服务端设置（启用开关、post condition、show author、REPORTS_METRICS）
    fetch_measures:
      - 为 True 时，outcome 中缺失的 tracked metrics 会用 token 从服务端补齐
    """

    settings: Mapping[str, Any]
    fetch_measures: bool = False
    webhook_env: str | None = None
    runner: NotificationRunner | None = None

    def finished(self, event: AnalysisEvent) -> RunReport | None:
        try:
            raw = event.outcome
            outcome = raw if isinstance(raw, AnalysisOutcome) else AnalysisOutcome.from_json_dict(raw)
            config = load_config(self.settings, event.properties, webhook_env=self.webhook_env)
        except Exception:  # noqa: BLE001
            logger.exception("analysis event rejected: could not read outcome/config")
            return None

        logger.debug(
            "analysis finished: project=%s quality_gate=%s",
            outcome.project_name,
            outcome.quality_gate_status.value,
        )
        return self._runner().run(config, outcome)

    def _runner(self) -> NotificationRunner:
        if self.runner is not None:
            return self.runner
        measures = MeasuresClient(http=HttpClient()) if self.fetch_measures else None
        return NotificationRunner(client=TeamsWebhookClient(), measures=measures)
