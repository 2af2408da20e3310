"""webhook 集成层。

该包下的模块负责：
- 定义传输抽象接口 (base)。
- 提供基于 httpx 的 webhook 实现 (webhook_client)。
"""

from typing import Optional

from leanbot_core.config.settings import settings
from leanbot_core.providers.base import WebhookTransport
from leanbot_core.providers.webhook_client import WebhookClient


def create_transport(cfg: Optional[object] = None) -> WebhookTransport:
    """根据配置创建默认的 webhook 传输实例。"""

    return WebhookClient(cfg or settings)


__all__ = ["WebhookTransport", "WebhookClient", "create_transport"]
