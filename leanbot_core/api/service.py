"""对外 API 服务模块。

提供简化的函数接口供宿主应用调用。每个聊天组件实例都应通过
build_pipeline 创建自己的发送流程，模块本身不保存任何全局状态。
"""

from typing import Any, Dict, Optional

from leanbot_core.config.settings import settings
from leanbot_core.domain.models import Message, OrderRecord, ProductRecord
from leanbot_core.pipeline.notifications import Notifier
from leanbot_core.pipeline.send_pipeline import SendPipeline
from leanbot_core.pipeline.session import ChatSession
from leanbot_core.providers import create_transport
from leanbot_core.providers.base import WebhookTransport


def build_pipeline(
    cfg=settings,
    notifier: Optional[Notifier] = None,
    transport: Optional[WebhookTransport] = None,
) -> SendPipeline:
    """创建一个新的发送流程（新的会话 ID、限流窗口与消息日志）。

    Args:
        cfg: 配置对象，默认使用全局 settings。
        notifier: 用户通知回调（可选）。
        transport: webhook 传输实现（可选，默认 WebhookClient）。
    """
    return SendPipeline(
        session=ChatSession(cfg),
        transport=transport or create_transport(cfg),
        notifier=notifier,
    )


def _product_to_dict(product: ProductRecord) -> Dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "price": product.price,
        "imageUrl": product.image_url,
    }


def _order_to_dict(order: OrderRecord) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    if order.order_id:
        data["orderId"] = order.order_id
    if order.status:
        data["status"] = order.status
    if order.items:
        data["items"] = [
            {"name": item.name, "quantity": item.quantity, "price": item.price}
            for item in order.items
        ]
    if order.coupon_code:
        data["couponCode"] = order.coupon_code
    if order.expected_delivery_date:
        data["expectedDeliveryDate"] = order.expected_delivery_date
    return data


def message_to_dict(message: Message) -> Dict[str, Any]:
    """将消息转换为可 JSON 序列化的字典（字段名与 webhook 保持一致）。

    Returns:
        包含 id, role, content, type, created_at 以及（可选）data 的字典
    """
    data: Dict[str, Any] = {
        "id": message.id,
        "role": message.role.value,
        "content": message.content,
        "type": message.kind.value,
        "created_at": message.created_at.isoformat(),
    }
    if message.products:
        data["data"] = [_product_to_dict(p) for p in message.products]
    elif message.order is not None:
        data["data"] = [_order_to_dict(message.order)]
    return data
