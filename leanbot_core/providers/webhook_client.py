"""自动化 webhook 客户端。

本模块负责：

1. 把用户输入与会话 ID 组装为 `{"chatInput", "sessionId"}` 请求体。
2. 以 POST 方式调用 webhook，并处理网络/HTTP 异常。
3. 返回完整的原始回复文本（不做任何解析，解析交给 parsing.normalizer）。

失败统一转换为 domain.exceptions 中的类型：
超时 -> TimeoutFailure，其他网络错误 -> TransportFailure，
404 -> NotFoundFailure，5xx -> ServerFailure，429 -> RateLimitError，
其余非 2xx -> ApiError。
"""

import json
from typing import Any, Optional

import httpx

from leanbot_core.config.settings import settings
from leanbot_core.domain.exceptions import (
    ApiError,
    NotFoundFailure,
    RateLimitError,
    ServerFailure,
    TimeoutFailure,
    TransportFailure,
    ValidationError,
)


class WebhookClient:
    """webhook 客户端实现。

    - name: 传输名称（供日志使用）。
    - post_chat: 对外统一调用入口，返回原始回复文本。
    """

    name = "webhook"

    def __init__(self, cfg=settings):
        # Settings 里包含 webhook_url、超时等配置
        self._settings = cfg

    async def post_chat(self, chat_input: str, session_id: str) -> str:
        url = getattr(self._settings, "webhook_url", None)
        if not url:
            raise ValidationError(code="MISSING_WEBHOOK_URL", message="WEBHOOK_URL not set")
        payload = {"chatInput": chat_input, "sessionId": session_id}
        try:
            async with httpx.AsyncClient(timeout=self._settings.http_timeout, trust_env=False) as client:
                resp = await client.post(
                    url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
        except httpx.TimeoutException as e:
            raise TimeoutFailure(code="TIMEOUT", message=str(e) or "request timed out", url=url)
        except httpx.RequestError as e:
            # 网络错误：DNS 失败、连接被拒绝等
            raise TransportFailure(code="NETWORK_ERROR", message=str(e) or type(e).__name__, url=url)
        if resp.status_code >= 400:
            raise self._status_error(resp)
        return resp.text

    @staticmethod
    def _error_message(resp: Any) -> Optional[str]:
        """尝试从错误响应体中读取结构化的错误信息。"""

        try:
            data = json.loads(resp.text or "")
        except ValueError:
            return None
        if not isinstance(data, dict):
            return None
        for key in ("message", "error"):
            value = data.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
            if isinstance(value, dict):
                nested = value.get("message")
                if isinstance(nested, str) and nested.strip():
                    return nested.strip()
        return None

    def _status_error(self, resp: Any) -> ApiError:
        status = resp.status_code
        message = self._error_message(resp) or f"HTTP error! status: {status}"
        if status == 404:
            return NotFoundFailure(code="NOT_FOUND", message=message, http_status=status)
        if status == 429:
            return RateLimitError(code="RATE_LIMIT", message=message, http_status=status)
        if status >= 500:
            return ServerFailure(code="SERVER_ERROR", message=message, http_status=status)
        return ApiError(code="API_ERROR", message=message, http_status=status)
