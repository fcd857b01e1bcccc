"""
Sonar Teams Notifier (stn)

分析结束后按配置判断是否需要通知；需要时把质量门结果与指标组装成
Teams MessageCard，单次 POST 到 incoming webhook，结果只体现在日志里。
"""

from .config import NotifierConfig, PostCondition, load_config
from .gate import should_notify
from .models import AnalysisOutcome, QualityGateStatus
from .runner import NotificationRunner, RunReport
from .task import PostAnalysisTask

__all__ = [
    "AnalysisOutcome",
    "NotificationRunner",
    "NotifierConfig",
    "PostAnalysisTask",
    "PostCondition",
    "QualityGateStatus",
    "RunReport",
    "load_config",
    "should_notify",
]
