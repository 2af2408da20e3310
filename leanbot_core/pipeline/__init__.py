"""发送流程：会话上下文、发送状态机与用户通知。"""

from leanbot_core.pipeline.notifications import Notification, Notifier, describe_failure
from leanbot_core.pipeline.send_pipeline import SendPipeline
from leanbot_core.pipeline.session import ChatSession

__all__ = ["ChatSession", "Notification", "Notifier", "SendPipeline", "describe_failure"]
