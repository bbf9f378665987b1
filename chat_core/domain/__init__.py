"""领域层模型与协议。

包含：
- models: ConversationMessage / MessageView / DecodedEvent 模型。
- conversation: 会话消息状态 ConversationState 及外部协作方协议。
- exceptions: 业务异常类型定义。
"""
