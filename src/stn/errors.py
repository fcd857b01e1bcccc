from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """
    一次通知周期的失败分类。

    - CONFIGURATION_MISSING：闸门因缺少必需配置未通过，info 级别（未启用/post condition 不匹配不算错误）
    - TRANSPORT_FAILURE：无法连到 webhook
    - REJECTED_BY_ENDPOINT：webhook 返回非 2xx
    - UNEXPECTED_FAILURE：构建/发送过程中的其它异常
    """

    CONFIGURATION_MISSING = "configuration_missing"
    TRANSPORT_FAILURE = "transport_failure"
    REJECTED_BY_ENDPOINT = "rejected_by_endpoint"
    UNEXPECTED_FAILURE = "unexpected_failure"


class NotifierError(Exception):
    pass


class TransportError(NotifierError):
    """目标地址不可达（DNS/连接/超时/TLS）。"""

    def __init__(self, url: str, cause: BaseException) -> None:
        super().__init__(f"could not reach {url}: {type(cause).__name__}: {cause}")
        self.url = url
        self.cause = cause


class InvalidHttpResponseError(NotifierError):
    """服务端返回了无法解析或结构不符的响应。"""
