"""领域层模型与协议。

包含：
- models: Message / ProductRecord / OrderRecord / NormalizedReply 模型。
- conversation: ConversationStore 协议（只追加的消息日志 + 加载状态）。
- exceptions: 业务异常类型定义。
"""
