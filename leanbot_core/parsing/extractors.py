"""从自由文本中抽取订单字段。

webhook 经常只在回复文本里提到订单号、优惠码、状态或送达日期，
而没有给出对应的结构化字段。这里的四个函数都是纯函数：
输入为 None/空串时返回 None，没有匹配时同样返回 None。
"""

import re
from datetime import date
from typing import Optional


_ORDER_ID_RE = re.compile(r"\bORD-?\d+", re.IGNORECASE)

# 关键字大小写不敏感，优惠码本身要求大写字母/数字，避免把 "available" 之类的普通单词当成优惠码
_COUPON_PATTERNS = (
    re.compile(r"\b(?i:coupon\s+)?(?i:code)\s*[:\-]?\s*[\"'“”]?([A-Z0-9]{4,})(?![A-Za-z0-9])"),
    re.compile(r"[\"'“”]([A-Z0-9]{4,})[\"'“”]"),
    re.compile(r"\b([A-Za-z]{4,}\d+)\b"),
    re.compile(r"\b(?i:coupon|code)[\s:\-]*([A-Z0-9]{4,})(?![A-Za-z0-9])"),
)
_EMPHASIS_RE = re.compile(r"[*_]")

# 优先级固定：先出现在列表中的状态优先，而不是按在文本中出现的位置
STATUS_PRIORITY = (
    ("Shipped", ("shipped",)),
    ("Delivered", ("delivered",)),
    ("Delayed", ("delayed",)),
    ("Processing", ("processing",)),
    ("Pending", ("pending",)),
    ("Cancelled", ("cancelled", "canceled")),
)

_MONTHS = {
    "january": 1, "jan": 1,
    "february": 2, "feb": 2,
    "march": 3, "mar": 3,
    "april": 4, "apr": 4,
    "may": 5,
    "june": 6, "jun": 6,
    "july": 7, "jul": 7,
    "august": 8, "aug": 8,
    "september": 9, "sep": 9, "sept": 9,
    "october": 10, "oct": 10,
    "november": 11, "nov": 11,
    "december": 12, "dec": 12,
}
_MONTH_ALTERNATION = "|".join(sorted(_MONTHS, key=len, reverse=True))

_ISO_DATE_RE = re.compile(r"\b(\d{4}-\d{2}-\d{2})(?!\d)")
_SLASH_DATE_RE = re.compile(r"\b(\d{4}/\d{2}/\d{2})(?!\d)")
_CONTEXT_DATE_RE = re.compile(
    r"\b(?:on|before|by)\s+(?P<y>\d{4})-(?P<m>\d{1,2})-(?P<d>\d{1,2})(?!\d)",
    re.IGNORECASE,
)
_WRITTEN_DATE_RE = re.compile(
    r"(?:\b(?:on|before|by)\s+)?"
    r"(?P<date>\b(?P<month>" + _MONTH_ALTERNATION + r")\.?\s+(?P<day>\d{1,2})(?:st|nd|rd|th)?,?\s+(?P<year>\d{4}))\b",
    re.IGNORECASE,
)


def extract_order_id(text: Optional[str]) -> Optional[str]:
    """返回第一个形如 ORD-1001 / ORD1234 的订单号（保留原文中的连字符）。"""

    if not text:
        return None
    m = _ORDER_ID_RE.search(text)
    return m.group(0) if m else None


def extract_coupon_code(text: Optional[str]) -> Optional[str]:
    """按固定顺序尝试多种优惠码写法，第一个成功的模式胜出。

    匹配前先去掉 markdown 强调符号（`*`、`_`），所以 "**SORRY10**" 也能识别。
    """

    if not text:
        return None
    plain = _EMPHASIS_RE.sub("", text)
    for pattern in _COUPON_PATTERNS:
        m = pattern.search(plain)
        if m:
            return m.group(1)
    return None


def extract_status(text: Optional[str]) -> Optional[str]:
    """返回规范化的状态标签（如 "Shipped"）。

    先做单词边界匹配，全部失败后再按同样的优先级做子串匹配。
    """

    if not text:
        return None
    for label, words in STATUS_PRIORITY:
        for word in words:
            if re.search(rf"\b{word}\b", text, re.IGNORECASE):
                return label
    lowered = text.lower()
    for label, words in STATUS_PRIORITY:
        if any(word in lowered for word in words):
            return label
    return None


def extract_delivery_date(text: Optional[str]) -> Optional[str]:
    """抽取送达日期。

    依次尝试：ISO 日期、斜杠日期（原样返回）、带介词的 ISO 日期（补零），
    最后是英文月份写法（转换为 YYYY-MM-DD，日期非法时返回原始片段）。
    """

    if not text:
        return None
    m = _ISO_DATE_RE.search(text)
    if m:
        return m.group(1)
    m = _SLASH_DATE_RE.search(text)
    if m:
        return m.group(1)
    m = _CONTEXT_DATE_RE.search(text)
    if m:
        return f"{m.group('y')}-{int(m.group('m')):02d}-{int(m.group('d')):02d}"
    m = _WRITTEN_DATE_RE.search(text)
    if m:
        try:
            parsed = date(
                int(m.group("year")),
                _MONTHS[m.group("month").lower()],
                int(m.group("day")),
            )
        except ValueError:
            return m.group("date")
        return parsed.isoformat()
    return None
