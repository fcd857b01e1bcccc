from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

# 服务端设置（管理界面配置）
ENABLED_KEY = "sonar.teams.enabled"
POST_CONDITIONS_KEY = "POST_CONDITIONS"
REPORTS_METRICS_KEY = "REPORTS_METRICS"
# 同一个 key 在两处含义不同：服务端设置里是“是否展示作者”的开关，scanner 属性里是作者名
SHOW_AUTHOR_KEY = "show.author"

# scanner 侧传入的属性
HOOK_KEY = "sonar.teams.hook"
TOKEN_KEY = "sonar.login"
PROJECT_ID_KEY = "sonar.analysis.projectId"
SERVER_URL_KEY = "sonar.host.url"


class PostCondition(str, Enum):
    """
    在什么质量门结果下发送通知。

    管理界面里的取值是展示文案（"Bad Quality Gateway" 等），这里同时兼容枚举名
    与 kebab 写法；未设置或无法识别时退化为 ALWAYS。
    """

    ALWAYS = "Both"
    ON_BAD_GATE = "Bad Quality Gateway"
    ON_GOOD_GATE = "Good Quality Gateway"

    @classmethod
    def parse(cls, value: Any) -> PostCondition:
        if isinstance(value, cls):
            return value
        v = str(value or "").strip()
        if not v:
            return cls.ALWAYS
        norm = v.lower().replace("-", "_").replace(" ", "_")
        for member in cls:
            if v == member.value or norm == member.name.lower():
                return member
        aliases = {
            "always_notify": cls.ALWAYS,
            "bad_quality_gateway": cls.ON_BAD_GATE,
            "good_quality_gateway": cls.ON_GOOD_GATE,
        }
        return aliases.get(norm, cls.ALWAYS)


def _present(value: str | None) -> bool:
    return bool(value and value.strip())


def _get_bool(d: Mapping[str, Any], key: str, default: bool) -> bool:
    v = d.get(key, default)
    if isinstance(v, str):
        return v.strip().lower() in ("true", "1", "yes", "on")
    return bool(v)


def _get_str(d: Mapping[str, Any], key: str, default: str | None = None) -> str | None:
    v = d.get(key, default)
    if v is None:
        return None
    return str(v)


def _get_str_list(d: Mapping[str, Any], key: str, default: list[str]) -> list[str]:
    v = d.get(key, default)
    if v is None:
        return list(default)
    if isinstance(v, str):
        return [s.strip() for s in v.split(",") if s.strip()]
    if isinstance(v, (list, tuple)):
        return [str(x).strip() for x in v if str(x).strip()]
    return list(default)


@dataclass(frozen=True, slots=True)
class NotifierConfig:
    """
    单次通知周期的配置（每次调用重新加载，周期内不可变）。

    enabled / post_condition / show_author / tracked_metric_keys:
      - 来自服务端设置
    webhook_url / auth_token / project_id / server_url / author_name:
      - 来自 scanner 传入的属性
    """

    enabled: bool = False
    post_condition: PostCondition = PostCondition.ALWAYS
    webhook_url: str | None = None
    show_author: bool = False
    author_name: str | None = None
    auth_token: str | None = None
    project_id: str | None = None
    server_url: str | None = None
    tracked_metric_keys: tuple[str, ...] = ()

    def has_webhook_url(self) -> bool:
        return _present(self.webhook_url)

    def has_author_name(self) -> bool:
        return _present(self.author_name)

    def has_auth_token(self) -> bool:
        return _present(self.auth_token)

    def has_project_id(self) -> bool:
        return _present(self.project_id)

    def has_server_url(self) -> bool:
        return _present(self.server_url)


def resolve_env(env_name: str | None) -> str | None:
    if not env_name:
        return None
    return os.environ.get(env_name)


def load_config(
    settings: Mapping[str, Any],
    properties: Mapping[str, Any],
    *,
    webhook_env: str | None = None,
) -> NotifierConfig:
    """
    由宿主的两类配置构建 NotifierConfig。

    settings:   服务端设置，例如 {"sonar.teams.enabled": "true", "POST_CONDITIONS": "Both"}
    properties: scanner 属性，例如 {"sonar.teams.hook": "https://...", "sonar.login": "..."}
    webhook_env:
      - 可选，scanner 未传 hook 时从该环境变量读取（避免把 webhook 写进 CI 配置）
    """
    webhook_url = _get_str(properties, HOOK_KEY) or resolve_env(webhook_env)
    return NotifierConfig(
        enabled=_get_bool(settings, ENABLED_KEY, False),
        post_condition=PostCondition.parse(settings.get(POST_CONDITIONS_KEY)),
        webhook_url=webhook_url,
        show_author=_get_bool(settings, SHOW_AUTHOR_KEY, False),
        # show.author 从两份配置里各读一次：settings 给开关，properties 给作者名
        author_name=_get_str(properties, SHOW_AUTHOR_KEY),
        auth_token=_get_str(properties, TOKEN_KEY),
        project_id=_get_str(properties, PROJECT_ID_KEY),
        server_url=_get_str(properties, SERVER_URL_KEY),
        tracked_metric_keys=tuple(_get_str_list(settings, REPORTS_METRICS_KEY, [])),
    )
