import pytest

from leanbot_core import build_pipeline, message_to_dict
from leanbot_core.domain.models import (
    Message,
    MessageKind,
    MessageRole,
    OrderItem,
    OrderRecord,
    ProductRecord,
)
from leanbot_core.providers import WebhookClient


class SettingsStub:
    webhook_url = "https://hooks.example.com/chat"
    http_timeout = 1.0
    session_prefix = "TEST-"
    rate_limit_max_messages = 2
    rate_limit_window_seconds = 60.0


class EchoTransport:
    name = "echo"

    async def post_chat(self, chat_input, session_id):
        return chat_input.upper()


def test_build_pipeline_defaults_to_webhook_client():
    pipeline = build_pipeline(SettingsStub())
    assert isinstance(pipeline._transport, WebhookClient)
    assert pipeline.session.session_id.startswith("TEST-")
    assert pipeline.session.rate_limiter.max_messages == 2


def test_each_pipeline_has_its_own_session():
    first = build_pipeline(SettingsStub(), transport=EchoTransport())
    second = build_pipeline(SettingsStub(), transport=EchoTransport())
    assert first.session.session_id != second.session.session_id
    assert first.session.store is not second.session.store


@pytest.mark.asyncio
async def test_build_pipeline_with_custom_transport():
    notifications = []
    pipeline = build_pipeline(SettingsStub(), notifier=notifications.append, transport=EchoTransport())

    reply = await pipeline.send("hello")
    assert reply.content == "HELLO"

    await pipeline.send("again")
    assert await pipeline.send("third") is None
    assert notifications[0].title == "Rate Limit Exceeded"


def test_message_to_dict_text():
    msg = Message(id="m1", role=MessageRole.USER, content="hi")
    data = message_to_dict(msg)
    assert data["id"] == "m1"
    assert data["role"] == "user"
    assert data["type"] == "text"
    assert data["content"] == "hi"
    assert "data" not in data
    assert data["created_at"].endswith("+00:00")


def test_message_to_dict_products():
    msg = Message(
        id="m2",
        role=MessageRole.BOT,
        content="Products",
        kind=MessageKind.PRODUCT_LIST,
        payload=(ProductRecord(id=1, name="A", price=10, image_url="a.png"),),
    )
    assert message_to_dict(msg)["data"] == [{"id": 1, "name": "A", "price": 10, "imageUrl": "a.png"}]
    assert message_to_dict(msg)["type"] == "product-list"


def test_message_to_dict_order_omits_empty_fields():
    order = OrderRecord(order_id="ORD-1", status="Shipped", items=(OrderItem(name="Mug"),))
    msg = Message(id="m3", role=MessageRole.BOT, content="Order", kind=MessageKind.ORDER_STATUS, payload=(order,))
    assert message_to_dict(msg)["data"] == [
        {
            "orderId": "ORD-1",
            "status": "Shipped",
            "items": [{"name": "Mug", "quantity": 1, "price": 0}],
        }
    ]
