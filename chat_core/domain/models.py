"""统一的对话与流式事件数据模型。

本模块定义了客户端内部在解码器、组装器与会话编排之间共享的标准数据结构：

- ConversationMessage: 会话中的一条消息（user/assistant）。
- MessageView: 从助手累积文本推导出的展示视图（正文 + 快捷回复）。
- DecodedEvent: 事件流中单行记录的解码结果。

所有结构都只描述数据本身，不负责 I/O。
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal, Optional, List, Dict


# 会话消息角色类型（与后端请求体中的 role 字段对应）
Role = Literal["user", "assistant"]

# 单行记录的解码分类
EventKind = Literal["ignorable", "data", "terminator", "malformed"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class MessageView:
    """助手消息的当前展示视图。

    - clean_content: 去掉快捷回复标注并 strip 后的正文；没有合法标注时为原文。
    - quick_replies: 解析出的快捷回复列表，无标注或解析失败时为空。
    """

    clean_content: str
    quick_replies: List[str] = field(default_factory=list)


@dataclass
class ConversationMessage:
    """会话中的一条消息。

    助手消息在整个回复过程中保持同一个 id，并且是唯一会被原地更新的消息；
    其余消息追加后即不可变。
    """

    id: str
    role: Role
    content: str
    timestamp: datetime = field(default_factory=utcnow)
    quick_replies: List[str] = field(default_factory=list)

    def to_turn(self) -> Dict[str, str]:
        """转换为请求体中的 {role, content} 轮次。"""

        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class DecodedEvent:
    """事件流单行记录的解码结果。

    - kind="data": content 为本次增量文本。
    - kind="malformed": record 保存原始记录文本，供重新缓冲。
    """

    kind: EventKind
    content: Optional[str] = None
    record: Optional[str] = None

    @classmethod
    def ignorable(cls) -> "DecodedEvent":
        return cls(kind="ignorable")

    @classmethod
    def terminator(cls) -> "DecodedEvent":
        return cls(kind="terminator")

    @classmethod
    def data(cls, content: str) -> "DecodedEvent":
        return cls(kind="data", content=content)

    @classmethod
    def malformed(cls, record: str) -> "DecodedEvent":
        return cls(kind="malformed", record=record)
