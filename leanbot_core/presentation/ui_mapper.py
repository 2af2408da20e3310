"""展示层映射：把规范化后的 Message 转换为视图模型。

展示层只按 `message.kind` 分发，绝不重新解析原始网络回复。
真正的渲染（卡片、徽章、样式）由宿主 UI 完成，这里只给出
渲染所需的数据以及一个纯文本渲染函数（供终端演示使用）。
"""

from dataclasses import dataclass
from typing import Callable, Optional, Tuple, Union

from leanbot_core.domain.models import Message, MessageKind, OrderItem, OrderRecord, ProductRecord


AddToCart = Callable[[int], None]
CURRENCY = "SAR"


def format_price(price: float) -> str:
    if isinstance(price, float) and price.is_integer():
        price = int(price)
    return f"{price} {CURRENCY}"


@dataclass(frozen=True)
class TextView:
    text: str


@dataclass(frozen=True)
class ProductCardView:
    product_id: int
    name: str
    price_label: str
    image_url: str
    on_add_to_cart: Optional[AddToCart] = None

    def add_to_cart(self) -> None:
        if self.on_add_to_cart is not None:
            self.on_add_to_cart(self.product_id)


@dataclass(frozen=True)
class ProductListView:
    intro_text: str
    cards: Tuple[ProductCardView, ...]


@dataclass(frozen=True)
class OrderStatusView:
    """订单卡片。lines 只包含存在的字段，缺失字段对应的行直接省略。"""

    intro_text: str
    order: OrderRecord
    lines: Tuple[str, ...]


View = Union[TextView, ProductListView, OrderStatusView]


def _item_line(item: OrderItem) -> str:
    return f"{item.name} x{item.quantity} - {format_price(item.price)}"


def order_lines(order: OrderRecord) -> Tuple[str, ...]:
    lines = []
    if order.order_id:
        lines.append(f"Order ID: {order.order_id}")
    if order.status:
        lines.append(f"Status: {order.status}")
    if order.expected_delivery_date:
        lines.append(f"Expected Delivery: {order.expected_delivery_date}")
    if order.coupon_code:
        lines.append(f"Coupon Code: {order.coupon_code}")
    if order.items:
        lines.append("Items:")
        lines.extend(_item_line(item) for item in order.items)
    return tuple(lines)


def _card(product: ProductRecord, on_add_to_cart: Optional[AddToCart]) -> ProductCardView:
    return ProductCardView(
        product_id=product.id,
        name=product.name,
        price_label=format_price(product.price),
        image_url=product.image_url,
        on_add_to_cart=on_add_to_cart,
    )


def present(message: Message, on_add_to_cart: Optional[AddToCart] = None) -> View:
    """根据消息类型生成视图模型。"""

    if message.kind is MessageKind.PRODUCT_LIST and message.products:
        return ProductListView(
            intro_text=message.content.strip(),
            cards=tuple(_card(p, on_add_to_cart) for p in message.products),
        )
    if message.kind is MessageKind.ORDER_STATUS and message.order is not None:
        return OrderStatusView(
            intro_text=message.content.strip(),
            order=message.order,
            lines=order_lines(message.order),
        )
    return TextView(text=message.content)


def render_plain(view: View) -> str:
    """纯文本渲染（终端演示用）。"""

    if isinstance(view, ProductListView):
        parts = [view.intro_text] if view.intro_text else []
        for card in view.cards:
            parts.append(f"  [{card.product_id}] {card.name} - {card.price_label}")
        return "\n".join(parts)
    if isinstance(view, OrderStatusView):
        parts = [view.intro_text] if view.intro_text else []
        parts.append("Order Status")
        parts.extend(f"  {line}" for line in view.lines)
        return "\n".join(parts)
    return view.text
