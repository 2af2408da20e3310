"""把 webhook 的弱类型 JSON 条目转换为 ProductRecord / OrderRecord。"""

from typing import Any, Dict, List, Optional, Tuple

from leanbot_core.domain.models import (
    OrderItem,
    OrderRecord,
    ProductRecord,
    UNKNOWN_PRODUCT_NAME,
)
from leanbot_core.parsing.extractors import (
    extract_coupon_code,
    extract_delivery_date,
    extract_order_id,
    extract_status,
)


def _as_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    return text or None


def _as_int(value: Any, fallback: int) -> int:
    if isinstance(value, bool):
        return fallback
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return fallback
    return fallback


def _as_number(value: Any, default: float = 0) -> float:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            number = float(value.strip().replace(",", ""))
        except ValueError:
            return default
        return int(number) if number.is_integer() else number
    return default


def coerce_products(entries: Any) -> Tuple[ProductRecord, ...]:
    """将商品数组转换为 ProductRecord 元组。

    非对象条目按空对象处理（下标作为 ID、占位名称），保证卡片数量与数组长度一致。
    """

    if not isinstance(entries, list):
        return ()
    products: List[ProductRecord] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            entry = {}
        products.append(
            ProductRecord(
                id=_as_int(entry.get("id"), index),
                name=_as_text(entry.get("name")) or UNKNOWN_PRODUCT_NAME,
                price=_as_number(entry.get("price")),
                image_url=_as_text(entry.get("imageUrl")) or _as_text(entry.get("image")) or "",
            )
        )
    return tuple(products)


def coerce_order_items(entries: Any) -> Optional[Tuple[OrderItem, ...]]:
    if not isinstance(entries, list):
        return None
    items: List[OrderItem] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        items.append(
            OrderItem(
                name=_as_text(entry.get("name")) or UNKNOWN_PRODUCT_NAME,
                quantity=_as_int(entry.get("quantity"), 1),
                price=_as_number(entry.get("price")),
            )
        )
    return tuple(items) or None


def _explicit(source: Dict[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        value = _as_text(source.get(key))
        if value:
            return value
    return None


def build_order_record(source: Any, text: str) -> OrderRecord:
    """构造唯一的 OrderRecord。

    显式字段非空时总是优先；字段缺失或为空时才用文本抽取器补齐。
    """

    if not isinstance(source, dict):
        source = {}
    return OrderRecord(
        order_id=_explicit(source, "orderId", "order_id") or extract_order_id(text),
        status=_explicit(source, "status") or extract_status(text),
        items=coerce_order_items(source.get("items")),
        coupon_code=_explicit(source, "couponCode", "coupon_code", "coupon") or extract_coupon_code(text),
        expected_delivery_date=(
            _explicit(source, "expectedDeliveryDate", "deliveryDate", "expected_delivery_date")
            or extract_delivery_date(text)
        ),
    )
