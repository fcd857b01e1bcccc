from __future__ import annotations

import http.client
import logging
import urllib.error
import urllib.request
from dataclasses import dataclass

from ..errors import ErrorKind, TransportError
from ..http_utils import build_ssl_context
from .payload import NotificationPayload


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DeliveryResult:
    succeeded: bool
    http_status: int | None = None
    error: ErrorKind | None = None
    detail: str | None = None


class TeamsWebhookClient:
    """
    Microsoft Teams incoming webhook 投递。

    说明：
    - 单次同步 POST，不重试，不复用连接
    - 只以 HTTP 状态码判断成败：[200, 299] 视为对端已接收；响应体不解析
      （Teams 成功时返回纯文本 "1"，失败时的 body 格式不固定）
    - 状态行/响应头本身不合法（BadStatusLine、IncompleteRead 等）与连不上一样，按 TransportError 处理
    """

    def __init__(self, *, timeout_seconds: float = 20.0, verify_ssl: bool = True) -> None:
        self._timeout_seconds = timeout_seconds
        self._ssl_context = build_ssl_context(verify_ssl)

    def channel(self) -> str:
        return "teams"

    def post(self, url: str, payload: NotificationPayload) -> bool:
        """
        对端接收返回 True，非 2xx 返回 False；无法连接时抛 TransportError。
        """
        status, _ = self._send(url, payload)
        return 200 <= status <= 299

    def deliver(self, url: str, payload: NotificationPayload) -> DeliveryResult:
        try:
            status, body = self._send(url, payload)
        except TransportError as e:
            return DeliveryResult(succeeded=False, error=ErrorKind.TRANSPORT_FAILURE, detail=str(e))

        if 200 <= status <= 299:
            return DeliveryResult(succeeded=True, http_status=status)
        return DeliveryResult(
            succeeded=False,
            http_status=status,
            error=ErrorKind.REJECTED_BY_ENDPOINT,
            detail=f"status={status}, body={body[:200]!r}",
        )

    def _send(self, url: str, payload: NotificationPayload) -> tuple[int, bytes]:
        req = urllib.request.Request(
            url=url,
            data=payload.to_json_bytes(),
            headers={
                "Content-Type": "application/json; charset=utf-8",
                "Accept": "application/json, text/plain",
            },
            method="POST",
        )
        try:
            with urllib.request.urlopen(req, timeout=self._timeout_seconds, context=self._ssl_context) as resp:  # noqa: S310
                status = getattr(resp, "status", 200)
                body = resp.read()
        except urllib.error.HTTPError as e:
            status = e.code
            try:
                body = e.read() or b""
            except OSError:
                body = b""
        except (urllib.error.URLError, http.client.HTTPException, TimeoutError, OSError) as e:
            raise TransportError(url, e) from e

        logger.debug("teams webhook response: status=%d bytes=%d", status, len(body))
        return status, body
