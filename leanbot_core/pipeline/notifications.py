"""用户可见的通知（toast）。

发送流程只负责构造 Notification，真正的展示由宿主应用提供的 notifier 完成。
"""

from dataclasses import dataclass
from typing import Callable, Literal, Optional

from leanbot_core.domain.exceptions import BusinessError, GENERIC_ERROR_MESSAGE, GENERIC_ERROR_TITLE


Severity = Literal["destructive", "default"]
Notifier = Callable[["Notification"], None]


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    severity: Severity = "destructive"


def describe_failure(error: BaseException) -> Notification:
    """把异常映射为通知；不在异常体系内的错误使用通用标题与文案。"""

    if isinstance(error, BusinessError):
        return Notification(title=error.title, description=error.user_message)
    return Notification(title=GENERIC_ERROR_TITLE, description=GENERIC_ERROR_MESSAGE)


def notify(notifier: Optional[Notifier], notification: Notification) -> None:
    if notifier is not None:
        notifier(notification)
