import dataclasses

import pytest

from leanbot_core.domain.models import (
    Message,
    MessageKind,
    MessageRole,
    NormalizedReply,
    OrderRecord,
    ProductRecord,
)
from leanbot_core.infrastructure.storage.memory_store import InMemoryConversationStore


def test_structured_reply_without_payload_is_downgraded():
    reply = NormalizedReply(kind=MessageKind.PRODUCT_LIST, display_text="x", payload=())
    assert reply.kind is MessageKind.TEXT
    assert reply.payload is None


def test_text_reply_drops_payload():
    reply = NormalizedReply(kind=MessageKind.TEXT, display_text="x", payload=(ProductRecord(id=1),))
    assert reply.payload is None


def test_message_accessors():
    order = OrderRecord(order_id="ORD-1")
    msg = Message(id="1", role=MessageRole.BOT, content="c", kind=MessageKind.ORDER_STATUS, payload=(order,))
    assert msg.is_bot
    assert msg.order is order
    assert msg.products == ()

    downgraded = Message(id="2", role=MessageRole.BOT, content="c", kind=MessageKind.ORDER_STATUS)
    assert downgraded.kind is MessageKind.TEXT
    assert downgraded.order is None


def test_messages_are_immutable():
    msg = Message(id="1", role=MessageRole.USER, content="hi")
    with pytest.raises(dataclasses.FrozenInstanceError):
        msg.content = "changed"


def test_memory_store_is_append_only_log():
    store = InMemoryConversationStore()
    assert store.last() is None
    assert store.is_loading is False

    first = Message(id="1", role=MessageRole.USER, content="a")
    second = Message(id="2", role=MessageRole.BOT, content="b")
    store.append(first)
    store.append(second)

    assert store.messages() == (first, second)
    assert store.last() is second
    assert len(store) == 2

    store.set_loading(True)
    assert store.is_loading is True
