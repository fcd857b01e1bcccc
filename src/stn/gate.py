from __future__ import annotations

from dataclasses import dataclass

from .config import NotifierConfig, PostCondition
from .errors import ErrorKind
from .models import AnalysisOutcome, QualityGateStatus


@dataclass(frozen=True, slots=True)
class GateDecision:
    """
    proceed 为 False 时：
    - reason 给日志用
    - error 只在缺少必需配置时为 CONFIGURATION_MISSING；未启用或 post condition 不匹配不算错误
    """

    proceed: bool
    reason: str | None = None
    error: ErrorKind | None = None


_PROCEED = GateDecision(proceed=True)


def _missing(reason: str) -> GateDecision:
    return GateDecision(False, reason, ErrorKind.CONFIGURATION_MISSING)


def post_condition_matches(post_condition: PostCondition, outcome: AnalysisOutcome) -> bool:
    match PostCondition.parse(post_condition):
        case PostCondition.ON_BAD_GATE:
            return not outcome.gate_passed
        case PostCondition.ON_GOOD_GATE:
            return outcome.gate_passed
        case _:
            return True


def evaluate(config: NotifierConfig, outcome: AnalysisOutcome) -> GateDecision:
    """
    判断本次分析是否需要发通知。

    规则按顺序检查，任一失败即返回（fail-closed：宁可不发，也不发缺字段/未鉴权的消息）：
    1. 已启用
    2. post condition 与质量门结果匹配
    3. 有 webhook URL
    4. 要求展示作者时必须有作者（缺失则整体不发，而不是只省略作者行）
    5. token / project id / server url 齐全
    """
    if not config.enabled:
        return GateDecision(False, "plugin disabled")
    if not post_condition_matches(config.post_condition, outcome):
        return GateDecision(
            False,
            f"post condition does not match: post_condition={PostCondition.parse(config.post_condition).name} "
            f"quality_gate={QualityGateStatus.parse(outcome.quality_gate_status).value}",
        )
    if not config.has_webhook_url():
        return _missing("no hook URL found")
    if config.show_author and not config.has_author_name():
        return _missing("no author provided by scanner side")
    if not config.has_auth_token():
        return _missing("no token found")
    if not config.has_project_id():
        return _missing("no project id found")
    if not config.has_server_url():
        return _missing("no server url found")
    return _PROCEED


def should_notify(config: NotifierConfig, outcome: AnalysisOutcome) -> bool:
    return evaluate(config, outcome).proceed
