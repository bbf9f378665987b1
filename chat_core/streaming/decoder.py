"""事件流解码。

线协议（每行一个事件）：

- 以 ":" 开头的行是注释，空行忽略；
- 只处理以 "data: " 开头的行，其余行（例如传输层保活）静默丢弃；
- "data: [DONE]" 表示流结束；
- 其余 payload 为 JSON 对象，增量文本位于 choices[0].delta.content。
"""

import json
import logging
from typing import Any, List, Optional

from chat_core.domain.models import DecodedEvent
from chat_core.infrastructure.logging.logger import log_event
from chat_core.streaming.framer import LineFramer

COMMENT_MARKER = ":"
DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


def _delta_content(payload: Any) -> Optional[str]:
    if not isinstance(payload, dict):
        return None
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    delta = first.get("delta")
    if not isinstance(delta, dict):
        return None
    content = delta.get("content")
    if isinstance(content, str) and content:
        return content
    return None


def decode_record(record: str) -> DecodedEvent:
    """对单行记录分类，并从数据行中提取增量文本。"""

    if not record.strip() or record.startswith(COMMENT_MARKER):
        return DecodedEvent.ignorable()
    if not record.startswith(DATA_PREFIX):
        return DecodedEvent.ignorable()
    body = record[len(DATA_PREFIX):].strip()
    if body == DONE_SENTINEL:
        return DecodedEvent.terminator()
    try:
        payload = json.loads(body)
    except json.JSONDecodeError:
        return DecodedEvent.malformed(record)
    content = _delta_content(payload)
    if content is None:
        # role-only / 元数据片段
        return DecodedEvent.ignorable()
    return DecodedEvent.data(content)


class StreamDecoder:
    """单次回复的流解码器：LineFramer + decode_record + 畸形记录恢复。

    每个回复新建一个实例。遇到无法解析的数据行时，把该行及本批次中
    尚未处理的记录原样放回缓冲区头部并停止本批次，等下一个片段到达后重试；
    流结束时（finish）仍无法解析的记录被丢弃。
    """

    def __init__(self, log_ctx: Optional[dict] = None):
        self._framer = LineFramer()
        self._done = False
        self._log_ctx = dict(log_ctx or {})
        self.malformed_retries = 0
        self.dropped_records = 0

    @property
    def done(self) -> bool:
        """是否已收到结束标记。"""

        return self._done

    @property
    def pending(self) -> str:
        return self._framer.pending

    def feed(self, chunk: str) -> List[str]:
        """处理一个传输片段，按到达顺序返回其中完整解码出的增量文本。"""

        if self._done:
            return []
        records = self._framer.feed(chunk)
        contents: List[str] = []
        for idx, record in enumerate(records):
            event = decode_record(record)
            if event.kind == "data":
                contents.append(event.content)
            elif event.kind == "terminator":
                self._done = True
                break
            elif event.kind == "malformed":
                self.malformed_retries += 1
                self._framer.push_back("".join(r + "\n" for r in records[idx:]))
                log_event(
                    logging.DEBUG,
                    "Re-buffered malformed record",
                    self._log_ctx,
                    record_length=len(record),
                    retries=self.malformed_retries,
                )
                break
        return contents

    def finish(self) -> List[str]:
        """流结束时处理缓冲区中的剩余记录。"""

        if self._done:
            return []
        contents: List[str] = []
        for record in self._framer.flush():
            event = decode_record(record)
            if event.kind == "data":
                contents.append(event.content)
            elif event.kind == "terminator":
                break
            elif event.kind == "malformed":
                self.dropped_records += 1
        if self.dropped_records:
            log_event(
                logging.WARNING,
                "Dropped malformed records at end of stream",
                self._log_ctx,
                dropped=self.dropped_records,
            )
        self._done = True
        return contents
