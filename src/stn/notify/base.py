from __future__ import annotations

from typing import Protocol

from .payload import NotificationPayload
from .teams import DeliveryResult


class DeliveryClient(Protocol):
    """
    投递接口：把构建好的卡片发到某个 webhook。

    约定：
    - deliver 不因网络/对端拒绝而抛异常，失败体现在 DeliveryResult 中
    - 其它异常（编程错误等）由 runner 统一捕获并记录
    """

    def channel(self) -> str: ...

    def deliver(self, url: str, payload: NotificationPayload) -> DeliveryResult: ...
