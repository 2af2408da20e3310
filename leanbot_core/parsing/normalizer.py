"""webhook 回复规范化器。

webhook 是外部的自动化流程，回复没有固定 schema：可能是纯文本、
扁平 JSON、被 "output" 再包一层的 JSON，字段名也不统一
（products/data，type 有多种写法）。本模块把任意回复转换为
`NormalizedReply(kind, payload, display_text)`。

分类逻辑是一组按固定顺序排列的规则（predicate + transform），
第一个命中的规则决定结果；顺序本身就是冲突时的裁决策略，
调整顺序会改变分类结果。规则列表见 `RULES`。
"""

import json
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

from leanbot_core.domain.exceptions import MalformedResponse
from leanbot_core.domain.models import MessageKind, NormalizedReply
from leanbot_core.infrastructure.logging.logger import logger
from leanbot_core.parsing.cleanup import clean_product_list_text
from leanbot_core.parsing.records import build_order_record, coerce_products


ORDER_TYPE_KEYWORDS = ("order", "delivery", "confirmation", "notification")
STATUS_TYPE_WORDS = ("shipped", "delivered", "delayed", "processing", "pending")
PRODUCTS_FALLBACK_TEXT = "Products"


@dataclass
class ReplyContext:
    """单次规范化过程中各规则共享的上下文。

    - raw_text: 去掉首尾空白后的原始回复。
    - parsed: json.loads 的结果。
    - response: 参与分类的“有效回复”（可能是 output 里解包出来的对象）。
    - candidate_text: 解包时记录的候选展示文本。
    """

    raw_text: str
    parsed: Any
    response: Any
    candidate_text: Optional[str] = None

    @property
    def is_object(self) -> bool:
        return isinstance(self.response, dict)

    def field(self, key: str) -> Any:
        return self.response.get(key) if self.is_object else None


@dataclass(frozen=True)
class Rule:
    name: str
    applies: Callable[[ReplyContext], bool]
    transform: Callable[[ReplyContext], NormalizedReply]


# ---- 辅助函数 ----


def _pretty(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


def _text_of(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _first_text(obj: Any, *keys: str) -> Optional[str]:
    if not isinstance(obj, dict):
        return None
    for key in keys:
        text = _text_of(obj.get(key))
        if text:
            return text
    return None


def _product_array(obj: Any) -> Optional[list]:
    """返回 products（优先）或 data 数组；都不是数组时返回 None。"""

    if not isinstance(obj, dict):
        return None
    for key in ("products", "data"):
        value = obj.get(key)
        if isinstance(value, list):
            return value
    return None


def _output_as_text(output: Any) -> str:
    if isinstance(output, str):
        return output
    return _pretty(output)


def _product_reply(entries: Any, text: str, fallback_text: str, source_type: Optional[str] = None) -> NormalizedReply:
    products = coerce_products(entries)
    if not products:
        return NormalizedReply(kind=MessageKind.TEXT, display_text=fallback_text, source_type=source_type)
    return NormalizedReply(
        kind=MessageKind.PRODUCT_LIST,
        display_text=clean_product_list_text(text),
        payload=products,
        source_type=source_type,
    )


def _order_reply(source: Any, text: str, source_type: Optional[str] = None) -> NormalizedReply:
    return NormalizedReply(
        kind=MessageKind.ORDER_STATUS,
        display_text=text,
        payload=(build_order_record(source, text),),
        source_type=source_type,
    )


def classify_type(type_value: Any) -> Optional[MessageKind]:
    """把 `type` 字段归类；无法归类时返回 None（按原样透传）。"""

    normalized = str(type_value).strip().lower()
    if "product" in normalized:
        return MessageKind.PRODUCT_LIST
    if any(word in normalized for word in ORDER_TYPE_KEYWORDS) or normalized in STATUS_TYPE_WORDS:
        return MessageKind.ORDER_STATUS
    return None


# ---- 预处理：解包 output ----


def unwrap_output(ctx: ReplyContext) -> ReplyContext:
    """处理被自动化平台二次包装的回复：{"output": {"type": ..., "products": [...]}}。"""

    nested = ctx.field("output")
    if not isinstance(nested, dict):
        return ctx
    if not (nested.get("type") or _product_array(nested) is not None):
        return ctx
    candidate = _first_text(nested, "output", "content") or _first_text(ctx.response, "content", "message")
    return ReplyContext(
        raw_text=ctx.raw_text,
        parsed=ctx.parsed,
        response=nested,
        candidate_text=candidate,
    )


# ---- 规则：predicate ----


def _has_type(ctx: ReplyContext) -> bool:
    value = ctx.field("type")
    return value is not None and str(value).strip() != ""


def _has_output(ctx: ReplyContext) -> bool:
    # 空对象/空数组也算存在；只有 null、空串、false、0 视为缺失
    output = ctx.field("output")
    return output is not None and output is not False and output != "" and output != 0


def _output_with_sibling_array(ctx: ReplyContext) -> bool:
    return _has_output(ctx) and _product_array(ctx.response) is not None


def _output_with_nested_products(ctx: ReplyContext) -> bool:
    output = ctx.field("output")
    return _has_output(ctx) and isinstance(output, dict) and "products" in output


def _output_is_array(ctx: ReplyContext) -> bool:
    return _has_output(ctx) and isinstance(ctx.field("output"), list)


def _output_with_order_fields(ctx: ReplyContext) -> bool:
    return _has_output(ctx) and bool(ctx.field("orderId") or ctx.field("status"))


def _output_mentions_products(ctx: ReplyContext) -> bool:
    output = ctx.field("output")
    return _has_output(ctx) and isinstance(output, str) and "products" in output


def _bare_string(ctx: ReplyContext) -> bool:
    return isinstance(ctx.parsed, str)


def _object_with_products(ctx: ReplyContext) -> bool:
    return isinstance(ctx.field("products"), list)


def _non_empty_array(ctx: ReplyContext) -> bool:
    return isinstance(ctx.response, list) and len(ctx.response) > 0


def _always(ctx: ReplyContext) -> bool:
    return True


# ---- 规则：transform ----


def _typed_reply(ctx: ReplyContext) -> NormalizedReply:
    source_type = str(ctx.field("type"))
    text = (
        _first_text(ctx.response, "output", "content")
        or ctx.candidate_text
        or _pretty(ctx.response)
    )
    kind = classify_type(source_type)
    if kind is MessageKind.ORDER_STATUS:
        return _order_reply(ctx.response, text, source_type)
    entries = _product_array(ctx.response)
    if kind is MessageKind.PRODUCT_LIST or entries:
        return _product_reply(entries, text, text, source_type)
    return NormalizedReply(kind=MessageKind.TEXT, display_text=text, source_type=source_type)


def _sibling_array_reply(ctx: ReplyContext) -> NormalizedReply:
    text = _output_as_text(ctx.field("output"))
    return _product_reply(_product_array(ctx.response), text, text)


def _nested_products_reply(ctx: ReplyContext) -> NormalizedReply:
    output = ctx.field("output")
    text = _text_of(output.get("output")) or _pretty(output)
    return _product_reply(output.get("products"), text, text)


def _output_array_reply(ctx: ReplyContext) -> NormalizedReply:
    return _product_reply(ctx.field("output"), PRODUCTS_FALLBACK_TEXT, _pretty(ctx.field("output")))


def _order_fields_reply(ctx: ReplyContext) -> NormalizedReply:
    return _order_reply(ctx.response, _output_as_text(ctx.field("output")))


def _embedded_json_reply(ctx: ReplyContext) -> NormalizedReply:
    output = ctx.field("output")
    try:
        embedded = json.loads(output)
    except ValueError:
        return NormalizedReply(kind=MessageKind.TEXT, display_text=output)
    entries = embedded.get("products") if isinstance(embedded, dict) else None
    if not isinstance(entries, list):
        return NormalizedReply(kind=MessageKind.TEXT, display_text=output)
    text = _first_text(embedded, "message") or PRODUCTS_FALLBACK_TEXT
    return _product_reply(entries, text, output)


def _output_text_reply(ctx: ReplyContext) -> NormalizedReply:
    return NormalizedReply(kind=MessageKind.TEXT, display_text=_output_as_text(ctx.field("output")))


def _bare_string_reply(ctx: ReplyContext) -> NormalizedReply:
    return NormalizedReply(kind=MessageKind.TEXT, display_text=ctx.parsed)


def _object_products_reply(ctx: ReplyContext) -> NormalizedReply:
    best = ctx.candidate_text or _first_text(ctx.response, "message", "content")
    return _product_reply(
        ctx.field("products"),
        best or PRODUCTS_FALLBACK_TEXT,
        best or _pretty(ctx.response),
    )


def _array_reply(ctx: ReplyContext) -> NormalizedReply:
    return _product_reply(ctx.response, PRODUCTS_FALLBACK_TEXT, _pretty(ctx.response))


def _pretty_reply(ctx: ReplyContext) -> NormalizedReply:
    return NormalizedReply(kind=MessageKind.TEXT, display_text=ctx.candidate_text or _pretty(ctx.response))


RULES: Tuple[Rule, ...] = (
    Rule("typed", _has_type, _typed_reply),
    Rule("output-sibling-array", _output_with_sibling_array, _sibling_array_reply),
    Rule("output-nested-products", _output_with_nested_products, _nested_products_reply),
    Rule("output-array", _output_is_array, _output_array_reply),
    Rule("output-order-fields", _output_with_order_fields, _order_fields_reply),
    Rule("output-embedded-json", _output_mentions_products, _embedded_json_reply),
    Rule("output-text", _has_output, _output_text_reply),
    Rule("bare-string", _bare_string, _bare_string_reply),
    Rule("object-products", _object_with_products, _object_products_reply),
    Rule("non-empty-array", _non_empty_array, _array_reply),
    Rule("pretty-printed", _always, _pretty_reply),
)


def build_context(raw_text: str) -> ReplyContext:
    """解析 JSON 并完成 output 解包；解析失败时抛出 MalformedResponse。"""

    text = (raw_text or "").strip()
    try:
        parsed = json.loads(text)
    except (ValueError, RecursionError) as e:
        raise MalformedResponse(code="NOT_JSON", message=str(e))
    return unwrap_output(ReplyContext(raw_text=text, parsed=parsed, response=parsed))


def match_rule(ctx: ReplyContext) -> Rule:
    for rule in RULES:
        if rule.applies(ctx):
            return rule
    # "pretty-printed" 总会命中，这里只是兜底
    return RULES[-1]


def normalize(raw_text: str) -> NormalizedReply:
    """把 webhook 的原始回复文本规范化，永不抛出异常。

    任何解析或结构错误都会退化为 TEXT 类型，展示文本为去除首尾空白的原文。
    """

    text = (raw_text or "").strip()
    try:
        ctx = build_context(text)
    except MalformedResponse as e:
        logger.debug("Reply is not JSON, using raw text", extra={"extra": {"error": e.message}})
        return NormalizedReply(kind=MessageKind.TEXT, display_text=text)

    rule_name = None
    try:
        rule = match_rule(ctx)
        rule_name = rule.name
        reply = rule.transform(ctx)
    except Exception as e:
        logger.debug(
            "Normalizer rule failed, falling back to text",
            extra={"extra": {"rule": rule_name, "error": str(e)}},
        )
        return NormalizedReply(kind=MessageKind.TEXT, display_text=text)
    logger.debug(
        "Normalized reply",
        extra={"extra": {"rule": rule_name, "kind": reply.kind.value}},
    )
    return reply
