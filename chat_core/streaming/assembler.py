"""助手消息组装器。

持有单次回复的累积文本（只追加），每次追加后对完整文本重新提取快捷回复，
并通过 on_update 回调把最新视图发布出去，由上层按 reply id 原地替换消息。
"""

import logging
from enum import Enum
from typing import Callable, Optional

from chat_core.domain.conversation import new_message_id
from chat_core.domain.models import MessageView
from chat_core.infrastructure.logging.logger import log_event
from chat_core.streaming.quick_replies import extract_quick_replies

UpdateCallback = Callable[[str, MessageView], object]


class AssemblerState(str, Enum):
    IDLE = "idle"
    STREAMING = "streaming"
    FINALIZED = "finalized"


class AssistantMessageAssembler:
    """单次回复的组装器：IDLE -> STREAMING -> FINALIZED。

    FINALIZED 之后到达的增量会被丢弃，不会让已结束的消息“复活”。
    """

    def __init__(self, reply_id: Optional[str] = None, on_update: Optional[UpdateCallback] = None):
        self._on_update = on_update
        self._reply_id = reply_id or new_message_id()
        self._running_text = ""
        self._view: Optional[MessageView] = None
        self._state = AssemblerState.IDLE

    @property
    def reply_id(self) -> str:
        return self._reply_id

    @property
    def state(self) -> AssemblerState:
        return self._state

    @property
    def running_text(self) -> str:
        return self._running_text

    @property
    def view(self) -> Optional[MessageView]:
        return self._view

    def reset(self, reply_id: Optional[str] = None) -> None:
        """开始新的回复。"""

        self._reply_id = reply_id or new_message_id()
        self._running_text = ""
        self._view = None
        self._state = AssemblerState.IDLE

    def append(self, content: str) -> Optional[MessageView]:
        if self._state is AssemblerState.FINALIZED:
            log_event(
                logging.WARNING,
                "Dropped fragment after reply finalized",
                {"reply_id": self._reply_id},
                fragment_length=len(content),
            )
            return None
        self._state = AssemblerState.STREAMING
        self._running_text += content
        self._view = extract_quick_replies(self._running_text)
        if self._on_update is not None:
            self._on_update(self._reply_id, self._view)
        return self._view

    def finalize(self) -> Optional[MessageView]:
        self._state = AssemblerState.FINALIZED
        return self._view
