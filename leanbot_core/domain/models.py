"""统一的消息与回复数据模型。

本模块定义了聊天组件内部在各层之间共享的标准数据结构：

- Message: 会话中的一条消息（user/bot），创建后不可修改。
- ProductRecord / OrderRecord / OrderItem: 消息携带的结构化数据。
- NormalizedReply: 回复规范化器的输出（kind + payload + 展示文本）。

webhook 返回的 JSON 字段名不固定，所有适配逻辑都在 parsing 层完成，
这里只保存已经清洗好的数据，展示层只依赖这些模型。
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Tuple, Union


class MessageRole(str, Enum):
    """消息角色。"""

    USER = "user"
    BOT = "bot"


class MessageKind(str, Enum):
    """规范化后的消息类型，是展示层唯一的分发依据。"""

    TEXT = "text"
    PRODUCT_LIST = "product-list"
    ORDER_STATUS = "order-status"


UNKNOWN_PRODUCT_NAME = "Unknown Product"


@dataclass(frozen=True)
class ProductRecord:
    """商品卡片数据。

    - id: 商品 ID；上游缺失或不是整数时使用其在列表中的下标。
    - name: 商品名称，缺失时为 "Unknown Product"。
    - price: 价格，缺失时为 0。
    - image_url: 图片地址，允许为空字符串。
    """

    id: int
    name: str = UNKNOWN_PRODUCT_NAME
    price: float = 0
    image_url: str = ""


@dataclass(frozen=True)
class OrderItem:
    name: str
    quantity: int = 1
    price: float = 0


@dataclass(frozen=True)
class OrderRecord:
    """订单状态数据，所有字段都可以缺失（展示层直接省略对应行）。"""

    order_id: Optional[str] = None
    status: Optional[str] = None
    items: Optional[Tuple[OrderItem, ...]] = None
    coupon_code: Optional[str] = None
    expected_delivery_date: Optional[str] = None


Payload = Union[Tuple[ProductRecord, ...], Tuple[OrderRecord, ...]]


@dataclass(frozen=True)
class NormalizedReply:
    """一次 webhook 回复的规范化结果。

    - kind: 规范化后的消息类型。
    - payload: kind 为 PRODUCT_LIST/ORDER_STATUS 时非空，TEXT 时为 None。
    - display_text: 已清洗的展示文本。
    - source_type: 上游 `type` 字段的原始值（若有），仅用于诊断。
    """

    kind: MessageKind
    display_text: str
    payload: Optional[Payload] = None
    source_type: Optional[str] = None

    def __post_init__(self) -> None:
        # 结构化类型必须带非空 payload，否则降级为纯文本
        if self.kind is not MessageKind.TEXT and not self.payload:
            object.__setattr__(self, "kind", MessageKind.TEXT)
        if self.kind is MessageKind.TEXT:
            object.__setattr__(self, "payload", None)


@dataclass(frozen=True)
class Message:
    """会话中的一条消息，创建后不可修改。"""

    id: str
    role: MessageRole
    content: str
    kind: MessageKind = MessageKind.TEXT
    payload: Optional[Payload] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if self.kind is not MessageKind.TEXT and not self.payload:
            object.__setattr__(self, "kind", MessageKind.TEXT)
        if self.kind is MessageKind.TEXT:
            object.__setattr__(self, "payload", None)

    @property
    def is_bot(self) -> bool:
        return self.role is MessageRole.BOT

    @property
    def products(self) -> Tuple[ProductRecord, ...]:
        if self.kind is MessageKind.PRODUCT_LIST and self.payload:
            return self.payload  # type: ignore[return-value]
        return ()

    @property
    def order(self) -> Optional[OrderRecord]:
        if self.kind is MessageKind.ORDER_STATUS and self.payload:
            return self.payload[0]  # type: ignore[return-value]
        return None
