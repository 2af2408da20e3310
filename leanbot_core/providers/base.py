"""webhook 传输层抽象接口。

发送流程不直接依赖 httpx，而是依赖此协议：

- 生产环境使用 WebhookClient（HTTP POST 到自动化 webhook）。
- 测试或宿主应用可以注入任意实现（例如内存中的假 webhook）。

实现者负责把网络/HTTP 失败转换为 domain.exceptions 中的异常类型。
"""

from typing import Protocol


class WebhookTransport(Protocol):
    """webhook 客户端协议。

    - name: 传输名称，用于日志。
    - post_chat(chat_input, session_id): 发送一条用户消息，返回完整的原始回复文本。
    """

    name: str

    async def post_chat(self, chat_input: str, session_id: str) -> str:
        ...
