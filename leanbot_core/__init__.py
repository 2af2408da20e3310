"""LeanBot Core 顶层包。

该包提供聊天组件的核心逻辑（不含 UI），
包括配置加载、领域模型、webhook 适配、回复规范化、
发送限流、发送流程与回复逐段显示等能力。
"""

from leanbot_core.api.service import build_pipeline, message_to_dict
from leanbot_core.parsing.normalizer import normalize

__all__ = ["build_pipeline", "message_to_dict", "normalize"]
