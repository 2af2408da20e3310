"""发送流程（状态机：Idle -> Sending -> Idle）。

一次 send 的步骤：
1. 空白输入直接忽略（不改变任何状态）。
2. 已有请求在途时忽略本次调用（同一时刻最多一个请求）。
3. 限流检查，被拒绝时发出通知并结束，不发起网络请求。
4. 立即追加用户消息。
5. 设置 loading，调用 webhook。
6. 成功：规范化回复并追加机器人消息。
7. 失败：按异常类型追加用户可读的机器人消息，并发出通知。
8. 无论成功失败都清除 loading。
"""

import logging
import time
from typing import Any, Dict, Optional

from leanbot_core.domain.exceptions import AdmissionDenied, BusinessError
from leanbot_core.domain.models import Message, MessageKind, MessageRole
from leanbot_core.ids import new_message_id
from leanbot_core.infrastructure.logging.logger import logger
from leanbot_core.parsing.normalizer import normalize
from leanbot_core.pipeline.notifications import Notification, Notifier, describe_failure, notify
from leanbot_core.pipeline.session import ChatSession
from leanbot_core.providers.base import WebhookTransport


class SendPipeline:
    def __init__(
        self,
        session: ChatSession,
        transport: WebhookTransport,
        notifier: Optional[Notifier] = None,
    ):
        self._session = session
        self._transport = transport
        self._notifier = notifier

    @property
    def session(self) -> ChatSession:
        return self._session

    @property
    def is_loading(self) -> bool:
        return self._session.store.is_loading

    async def send(self, text: str) -> Optional[Message]:
        """发送一条用户消息。

        Returns:
            本次追加的机器人消息；空输入、限流或已有请求在途时返回 None。
        """

        chat_input = (text or "").strip()
        if not chat_input:
            return None

        store = self._session.store
        log_ctx: Dict[str, Any] = {
            "session_id": self._session.session_id,
            "transport": getattr(self._transport, "name", "unknown"),
        }
        if store.is_loading:
            self._log(logging.INFO, "Send ignored, request already in flight", log_ctx)
            return None

        try:
            self._session.rate_limiter.check()
        except AdmissionDenied as e:
            self._log(logging.WARNING, "Send rejected by rate limiter", log_ctx, retry_after=e.retry_after_seconds)
            notify(self._notifier, Notification(title=e.title, description=e.user_message))
            return None

        user_msg = Message(id=new_message_id(), role=MessageRole.USER, content=chat_input)
        store.append(user_msg)
        log_ctx["user_message_id"] = user_msg.id

        store.set_loading(True)
        try:
            try:
                bot_msg = await self._exchange(chat_input, log_ctx)
            except Exception as e:
                bot_msg = self._failure_message(e, log_ctx)
            store.append(bot_msg)
        finally:
            store.set_loading(False)
        return bot_msg

    async def _exchange(self, chat_input: str, log_ctx: Dict[str, Any]) -> Message:
        """调用 webhook 并把回复规范化为机器人消息；网络/HTTP 失败直接抛出。"""

        start_time = time.time()
        self._log(logging.INFO, "Sending message to webhook", log_ctx)
        raw = await self._transport.post_chat(chat_input, self._session.session_id)
        self._log(logging.DEBUG, "Raw webhook response", log_ctx, preview=(raw or "")[:200])
        reply = normalize(raw)
        self._log(
            logging.INFO,
            "Received bot reply",
            log_ctx,
            kind=reply.kind.value,
            source_type=reply.source_type,
            payload_size=len(reply.payload or ()),
            elapsed_seconds=round(time.time() - start_time, 2),
        )
        return Message(
            id=new_message_id(),
            role=MessageRole.BOT,
            content=reply.display_text,
            kind=reply.kind,
            payload=reply.payload,
        )

    def _failure_message(self, error: Exception, log_ctx: Dict[str, Any]) -> Message:
        notification = describe_failure(error)
        if isinstance(error, BusinessError):
            self._log(
                logging.ERROR,
                "Send failed",
                log_ctx,
                code=error.code,
                http_status=error.http_status,
                error=error.message,
            )
        else:
            self._log(logging.ERROR, "Send failed with unexpected error", log_ctx, error=repr(error))
        notify(self._notifier, notification)
        return Message(
            id=new_message_id(),
            role=MessageRole.BOT,
            content=notification.description,
            kind=MessageKind.TEXT,
        )

    @staticmethod
    def _log(level: int, message: str, log_ctx: Dict[str, Any], **fields: Any) -> None:
        payload = dict(log_ctx)
        payload.update(fields)
        logger.log(level, message, extra={"extra": payload})
