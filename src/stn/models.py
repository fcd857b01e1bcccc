from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Mapping


def parse_rfc3339_datetime(value: str) -> datetime:
    """
    解析常见的 RFC3339/ISO8601 时间串为带 tzinfo 的 datetime。

    兼容：
    - 2026-02-10T12:34:56Z
    - 2026-02-10T12:34:56+00:00
    - 2026-02-10T12:34:56+0000（SonarQube webhook 的 analysedAt 格式）
    """
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    elif len(value) > 5 and value[-5] in "+-" and value[-4:].isdigit():
        value = value[:-2] + ":" + value[-2:]
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


class QualityGateStatus(str, Enum):
    OK = "OK"
    ERROR = "ERROR"
    NONE = "NONE"

    @classmethod
    def parse(cls, value: Any) -> QualityGateStatus:
        """
        平台侧状态串 -> 枚举。

        只有 OK/ERROR 有明确含义；缺失、WARN（旧版本）以及其它值一律视为 NONE，
        即“不是 OK”。
        """
        if isinstance(value, cls):
            return value
        v = str(value or "").strip().upper()
        if v == "OK":
            return cls.OK
        if v == "ERROR":
            return cls.ERROR
        return cls.NONE


@dataclass(frozen=True, slots=True)
class AnalysisOutcome:
    """
    一次分析结束时平台给出的结果（只读，生命周期 = 一个通知周期）。

    metrics:
      - metric key -> 已格式化的值（字符串），例如 {"coverage": "81.3", "bugs": "0"}
    """

    quality_gate_status: QualityGateStatus
    project_name: str
    analysis_date: datetime | None = None
    metrics: Mapping[str, str] = field(default_factory=dict)
    author: str | None = None

    def __post_init__(self) -> None:
        # 宿主可能直接传入 "OK"/"ERROR" 这类字符串
        object.__setattr__(self, "quality_gate_status", QualityGateStatus.parse(self.quality_gate_status))

    @property
    def gate_passed(self) -> bool:
        return QualityGateStatus.parse(self.quality_gate_status) is QualityGateStatus.OK

    def with_metrics(self, extra: Mapping[str, str]) -> AnalysisOutcome:
        """返回合并了 extra 的新对象；已有的 key 不会被覆盖。"""
        merged = dict(extra)
        merged.update(self.metrics)
        return AnalysisOutcome(
            quality_gate_status=self.quality_gate_status,
            project_name=self.project_name,
            analysis_date=self.analysis_date,
            metrics=merged,
            author=self.author,
        )

    @classmethod
    def from_json_dict(cls, data: Mapping[str, Any]) -> AnalysisOutcome:
        """
        从平台 JSON（形如 SonarQube webhook payload）构建。

        兼容字段：
        - qualityGate.status 或 qualityGateStatus
        - project.name 或 projectName
        - analysedAt / analysisDate
        - measures: [{"metric": "...", "value": "..."}] 或 metrics: {"k": "v"}
        """
        qg = data.get("qualityGate")
        status = qg.get("status") if isinstance(qg, dict) else data.get("qualityGateStatus")

        project = data.get("project")
        if isinstance(project, dict):
            project_name = str(project.get("name") or project.get("key") or "")
        else:
            project_name = str(data.get("projectName") or "")

        analysis_date: datetime | None = None
        date_s = data.get("analysedAt") or data.get("analysisDate")
        if isinstance(date_s, str) and date_s:
            analysis_date = parse_rfc3339_datetime(date_s)

        metrics: dict[str, str] = {}
        raw_metrics = data.get("metrics")
        if isinstance(raw_metrics, dict):
            metrics.update({str(k): str(v) for k, v in raw_metrics.items() if v is not None})
        raw_measures = data.get("measures")
        if isinstance(raw_measures, list):
            for m in raw_measures:
                if isinstance(m, dict) and m.get("metric") and m.get("value") is not None:
                    metrics[str(m["metric"])] = str(m["value"])

        author = data.get("author")
        return cls(
            quality_gate_status=QualityGateStatus.parse(status),
            project_name=project_name,
            analysis_date=analysis_date,
            metrics=metrics,
            author=str(author) if author else None,
        )
