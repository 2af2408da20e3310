from typing import Optional, Protocol, Tuple

from .models import Message


class ConversationStore(Protocol):
    """当前会话的消息日志与加载状态。

    只允许追加；消息一旦写入就不会被修改或删除。
    """

    @property
    def is_loading(self) -> bool:
        ...

    def set_loading(self, loading: bool) -> None:
        ...

    def append(self, message: Message) -> None:
        ...

    def messages(self) -> Tuple[Message, ...]:
        ...

    def last(self) -> Optional[Message]:
        ...

    def __len__(self) -> int:
        ...
