"""聊天服务传输层。

该包下的模块负责：
- 定义传输抽象接口 (base)。
- 提供基于 httpx 的流式实现 (chat_client)。
"""

from typing import Optional

from chat_core.config.settings import settings
from chat_core.providers.base import ChatTransport
from chat_core.providers.chat_client import ChatStreamClient


def create_transport(cfg: Optional[object] = None) -> ChatTransport:
    """根据配置创建传输实例，默认使用全局 settings。"""

    return ChatStreamClient(cfg or settings)


__all__ = ["ChatTransport", "ChatStreamClient", "create_transport"]
