from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from .errors import InvalidHttpResponseError
from .http_utils import HttpClient, basic_auth_header, with_query_params


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MeasuresClient:
    """
    从 SonarQube 服务端读取项目的 measures。

    数据源：GET <server>/api/measures/component?component=<project>&metricKeys=a,b
    token 为 scanner 传入的 sonar.login，以 basic auth 用户名发送。
    """

    http: HttpClient

    def fetch(
        self,
        server_url: str,
        token: str,
        project_id: str,
        metric_keys: Sequence[str],
    ) -> dict[str, str]:
        keys = [k for k in metric_keys if k]
        if not keys:
            return {}

        url = with_query_params(
            server_url.rstrip("/") + "/api/measures/component",
            {"component": project_id, "metricKeys": ",".join(keys)},
        )
        resp = self.http.get(
            url,
            headers={"Accept": "application/json", "Authorization": basic_auth_header(token)},
        )
        if not resp.ok:
            raise InvalidHttpResponseError(f"measures request failed: status={resp.status}, body={resp.body[:200]!r}")

        try:
            data = resp.json()
        except ValueError as e:
            raise InvalidHttpResponseError(f"measures response is not JSON: {resp.body[:200]!r}") from e

        component = data.get("component") if isinstance(data, dict) else None
        measures = component.get("measures") if isinstance(component, dict) else None
        if not isinstance(measures, list):
            raise InvalidHttpResponseError(f"measures response has no component.measures: {resp.url}")

        result: dict[str, str] = {}
        for m in measures:
            if not isinstance(m, dict) or not m.get("metric"):
                continue
            value = m.get("value")
            if value is None and isinstance(m.get("period"), dict):
                value = m["period"].get("value")
            if value is not None:
                result[str(m["metric"])] = str(value)

        logger.debug("measures fetched: project_id=%s requested=%d returned=%d", project_id, len(keys), len(result))
        return result
