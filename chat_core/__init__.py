"""Chat Core 顶层包。

该包提供流式聊天客户端的核心实现，
包括配置加载、领域模型、事件流解码、快捷回复提取、
助手消息组装、用户上下文收集与会话编排等能力。
"""

from chat_core.session.orchestrator import ChatSession
from chat_core.streaming.quick_replies import extract_quick_replies

__all__ = ["ChatSession", "extract_quick_replies"]
