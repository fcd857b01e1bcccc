from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from .config import NotifierConfig
from .errors import ErrorKind
from .gate import evaluate
from .measures import MeasuresClient
from .models import AnalysisOutcome
from .notify.base import DeliveryClient
from .notify.payload import build_payload
from .notify.teams import DeliveryResult


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RunReport:
    notified: bool
    skipped_reason: str | None
    delivery: DeliveryResult | None
    error: ErrorKind | None
    duration_ms: int


@dataclass(slots=True)
class NotificationRunner:
    """
    一次通知周期的编排：Gate -> (Measures) -> Payload -> Delivery -> 日志

    约定：
    - run 永远不向宿主抛异常，所有失败都落到 RunReport + 一行日志
    - 闸门未通过属于正常情况，只记 info
    - measures 为可选：配置后仅用于补齐 outcome 中缺失的 tracked metrics
    """

    client: DeliveryClient
    measures: MeasuresClient | None = None

    def run(self, config: NotifierConfig, outcome: AnalysisOutcome) -> RunReport:
        start_t = time.monotonic()
        channel = _channel_of(self.client)

        try:
            decision = evaluate(config, outcome)
            if not decision.proceed:
                logger.info("notify skipped: reason=%s project=%s", decision.reason, outcome.project_name)
                return RunReport(
                    notified=False,
                    skipped_reason=decision.reason,
                    delivery=None,
                    error=decision.error,
                    duration_ms=_elapsed_ms(start_t),
                )

            # 闸门已保证以下字段存在
            webhook_url = str(config.webhook_url)
            outcome = self._with_missing_metrics(config, outcome)
            payload = build_payload(
                outcome,
                str(config.server_url),
                outcome.gate_passed,
                str(config.auth_token),
                str(config.project_id),
                config.tracked_metric_keys,
                config.author_name if config.show_author else None,
            )
            logger.debug("notify payload built: project_id=%s webhook=%s", config.project_id, webhook_url)
            result = self.client.deliver(webhook_url, payload)
        except Exception:  # noqa: BLE001
            logger.exception(
                "notify failed: channel=%s project_id=%s project=%s",
                channel,
                getattr(config, "project_id", None),
                getattr(outcome, "project_name", None),
            )
            return RunReport(
                notified=False,
                skipped_reason=None,
                delivery=None,
                error=ErrorKind.UNEXPECTED_FAILURE,
                duration_ms=_elapsed_ms(start_t),
            )

        if result.succeeded:
            logger.info(
                "notify posted: channel=%s project_id=%s status=%s",
                channel,
                config.project_id,
                result.http_status,
            )
        else:
            logger.error(
                "notify failed: channel=%s project_id=%s error=%s detail=%s",
                channel,
                config.project_id,
                result.error.value if result.error else None,
                result.detail,
            )
        return RunReport(
            notified=result.succeeded,
            skipped_reason=None,
            delivery=result,
            error=result.error,
            duration_ms=_elapsed_ms(start_t),
        )

    def _with_missing_metrics(self, config: NotifierConfig, outcome: AnalysisOutcome) -> AnalysisOutcome:
        if self.measures is None:
            return outcome
        missing = [k for k in config.tracked_metric_keys if k not in outcome.metrics]
        if not missing:
            return outcome
        fetched = self.measures.fetch(
            str(config.server_url),
            str(config.auth_token),
            str(config.project_id),
            missing,
        )
        return outcome.with_metrics(fetched)


def _channel_of(client: DeliveryClient) -> str:
    try:
        return client.channel()
    except Exception:  # noqa: BLE001
        return "unknown"


def _elapsed_ms(start_t: float) -> int:
    return int((time.monotonic() - start_t) * 1000)
