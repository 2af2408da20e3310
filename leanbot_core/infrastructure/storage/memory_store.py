from typing import List, Optional, Tuple

from leanbot_core.domain.conversation import ConversationStore
from leanbot_core.domain.models import Message


class InMemoryConversationStore(ConversationStore):
    """会话级的消息日志，只在组件生命周期内存在，不做持久化。"""

    def __init__(self):
        self._messages: List[Message] = []
        self._loading = False

    @property
    def is_loading(self) -> bool:
        return self._loading

    def set_loading(self, loading: bool) -> None:
        self._loading = bool(loading)

    def append(self, message: Message) -> None:
        self._messages.append(message)

    def messages(self) -> Tuple[Message, ...]:
        return tuple(self._messages)

    def last(self) -> Optional[Message]:
        return self._messages[-1] if self._messages else None

    def __len__(self) -> int:
        return len(self._messages)
