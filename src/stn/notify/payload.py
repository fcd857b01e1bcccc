from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from ..http_utils import with_query_params
from ..models import AnalysisOutcome

PASS_COLOR = "008000"
FAIL_COLOR = "bc4749"
MISSING_VALUE = "-"


@dataclass(frozen=True, slots=True)
class NotificationPayload:
    """已构建好的 Teams 卡片（每个周期新建一次，只发送一次）。"""

    body: Mapping[str, Any]

    def to_json_bytes(self) -> bytes:
        return json.dumps(self.body, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def dashboard_url(server_url: str, project_id: str) -> str:
    return with_query_params(server_url.rstrip("/") + "/dashboard", {"id": project_id})


def format_summary_text(outcome: AnalysisOutcome, gate_passed: bool) -> str:
    verdict = "passed" if gate_passed else "failed"
    name = outcome.project_name or "-"
    return f"SonarQube analysis of {name}: quality gate {verdict}"


def build_payload(
    outcome: AnalysisOutcome,
    server_url: str,
    gate_passed: bool,
    token: str,  # noqa: ARG001
    project_id: str,
    tracked_metric_keys: Sequence[str],
    author_name: str | None = None,
) -> NotificationPayload:
    """
    生成 Teams incoming webhook 的 MessageCard。

    约定：
    - 纯函数：不读时间、不生成 uuid、不做 I/O，相同输入得到字节级相同的输出
    - tracked_metric_keys 中每个 key 一行，顺序不变；outcome 里没有的 key 用 "-" 占位
    - token 只为与调用方签名保持一致，不会写进卡片
    """
    link = dashboard_url(server_url, project_id)
    occurred = outcome.analysis_date.isoformat() if outcome.analysis_date else "-"

    facts: list[dict[str, str]] = [
        {"name": "Quality gate", "value": outcome.quality_gate_status.value},
    ]
    for key in tracked_metric_keys:
        value = outcome.metrics.get(key)
        facts.append({"name": key, "value": MISSING_VALUE if value is None else str(value)})
    if author_name:
        facts.append({"name": "Author", "value": author_name})

    summary = format_summary_text(outcome, gate_passed)
    body: dict[str, Any] = {
        "@type": "MessageCard",
        "@context": "http://schema.org/extensions",
        "themeColor": PASS_COLOR if gate_passed else FAIL_COLOR,
        "summary": summary,
        "title": f"[{outcome.project_name or project_id}]({link})",
        "sections": [
            {
                "activityTitle": summary,
                "activitySubtitle": f"analysed at {occurred}",
                "facts": facts,
                "markdown": True,
            }
        ],
        "potentialAction": [
            {
                "@type": "OpenUri",
                "name": "Open dashboard",
                "targets": [{"os": "default", "uri": link}],
            }
        ],
    }
    return NotificationPayload(body=body)
