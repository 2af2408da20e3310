from leanbot_core.presentation.ui_mapper import (
    OrderStatusView,
    ProductCardView,
    ProductListView,
    TextView,
    present,
    render_plain,
)

__all__ = [
    "OrderStatusView",
    "ProductCardView",
    "ProductListView",
    "TextView",
    "present",
    "render_plain",
]
