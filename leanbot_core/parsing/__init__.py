"""webhook 回复解析层。

- extractors: 从自由文本中抽取订单号、优惠码、状态、送达日期。
- normalizer: 把任意回复规范化为 NormalizedReply（有序规则，先命中先得）。
- records: 弱类型 JSON 条目到 ProductRecord / OrderRecord 的转换。
- cleanup: 商品列表展示文本的清洗。
"""

from leanbot_core.parsing.extractors import (
    extract_coupon_code,
    extract_delivery_date,
    extract_order_id,
    extract_status,
)
from leanbot_core.parsing.normalizer import RULES, normalize

__all__ = [
    "RULES",
    "normalize",
    "extract_coupon_code",
    "extract_delivery_date",
    "extract_order_id",
    "extract_status",
]
