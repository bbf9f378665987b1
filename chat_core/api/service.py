"""对外 API 服务模块。

提供简化的函数接口供上层应用（视图层）调用。
"""

from typing import Optional, Dict, Any

from chat_core.config.settings import settings
from chat_core.context.user_context import UserContextBuilder
from chat_core.domain.models import ConversationMessage
from chat_core.infrastructure.logging.logger import logger
from chat_core.infrastructure.storage.json_store import JsonActivityStore
from chat_core.notifications import LoggingNotifier
from chat_core.providers.chat_client import ChatStreamClient
from chat_core.session.orchestrator import ChatSession


_session: Optional[ChatSession] = None


def get_default_session() -> ChatSession:
    """获取默认的会话编排器实例（单例）。"""
    global _session
    if _session is None:
        _session = ChatSession(
            transport=ChatStreamClient(settings),
            context_builder=UserContextBuilder(activity_store=JsonActivityStore(root=settings.storage_root)),
            notifier=LoggingNotifier(),
        )
    return _session


def _to_dict(message: ConversationMessage) -> Dict[str, Any]:
    return {
        "id": message.id,
        "role": message.role,
        "content": message.content,
        "quick_replies": list(message.quick_replies),
        "timestamp": message.timestamp.isoformat(),
    }


def send_message(text: str) -> Optional[Dict[str, Any]]:
    """发送用户消息并返回最终的助手消息。

    Args:
        text: 用户输入内容

    Returns:
        助手消息字典（id, role, content, quick_replies, timestamp）；
        没有收到任何内容或发送被拒绝时返回 None。失败原因通过 Notifier 提示。
    """
    session = get_default_session()
    reply = session.send_message(text)
    if reply is None:
        logger.info("No assistant reply produced")
        return None
    return _to_dict(reply)


def list_messages() -> list[Dict[str, Any]]:
    """列出当前会话的所有消息。"""
    return [_to_dict(m) for m in get_default_session().state.messages]


def clear_conversation() -> None:
    """清空当前会话（若有进行中的回复会先放弃）。"""
    get_default_session().clear()
