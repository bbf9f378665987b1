import threading
from dataclasses import replace
from typing import Optional, Dict, Any, List, Protocol, Tuple
from uuid import uuid4

from .models import ConversationMessage, MessageView


def new_message_id() -> str:
    return f"m-{uuid4().hex}"


class ConversationState:
    """单个会话的消息列表。

    由会话编排器显式持有：用户提交路径追加用户消息，
    组装器的发布步骤按 reply id 原地替换助手消息。
    视图层可能在流式线程发布的同时读取，因此所有访问都加锁。
    """

    def __init__(self, messages: Optional[List[ConversationMessage]] = None):
        self._lock = threading.RLock()
        self._messages: List[ConversationMessage] = list(messages or [])

    @property
    def messages(self) -> Tuple[ConversationMessage, ...]:
        with self._lock:
            return tuple(self._messages)

    def __len__(self) -> int:
        with self._lock:
            return len(self._messages)

    def append_user(self, text: str) -> ConversationMessage:
        msg = ConversationMessage(id=new_message_id(), role="user", content=text)
        with self._lock:
            self._messages.append(msg)
        return msg

    def upsert_assistant(self, reply_id: str, view: MessageView) -> ConversationMessage:
        """用最新视图替换 reply_id 对应的助手消息；不存在时追加一条。"""

        with self._lock:
            for idx, existing in enumerate(self._messages):
                if existing.id == reply_id:
                    updated = replace(
                        existing,
                        content=view.clean_content,
                        quick_replies=list(view.quick_replies),
                    )
                    self._messages[idx] = updated
                    return updated
            created = ConversationMessage(
                id=reply_id,
                role="assistant",
                content=view.clean_content,
                quick_replies=list(view.quick_replies),
            )
            self._messages.append(created)
            return created

    def get(self, message_id: str) -> Optional[ConversationMessage]:
        with self._lock:
            for msg in self._messages:
                if msg.id == message_id:
                    return msg
        return None

    def clear(self) -> None:
        with self._lock:
            self._messages.clear()

    def to_turns(self) -> List[Dict[str, str]]:
        with self._lock:
            return [m.to_turn() for m in self._messages]


class LocationProvider(Protocol):
    def get_location(self) -> Optional[Dict[str, Any]]:
        ...


class ProfileProvider(Protocol):
    def get_profile(self) -> Optional[Dict[str, Any]]:
        ...


class ActivityStore(Protocol):
    """用户活动数据的只读查询接口（收藏、打卡、日历）。

    返回的每条记录都是普通 dict，活动信息嵌套在 "activity" 字段中
    （{"name", "category"}），可能缺失。
    """

    def list_saved_items(self, user_id: str, limit: int) -> List[Dict[str, Any]]:
        ...

    def list_check_ins(self, user_id: str, limit: int) -> List[Dict[str, Any]]:
        ...

    def list_calendar_events(self, user_id: str, limit: int) -> List[Dict[str, Any]]:
        ...
