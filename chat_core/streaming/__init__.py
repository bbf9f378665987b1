"""流式响应解码层。

- framer: 把任意切分的文本片段还原为完整行。
- decoder: 行记录分类、增量提取与畸形记录恢复。
- quick_replies: 快捷回复标注提取。
- assembler: 单次回复的累积文本与视图发布。
"""

from chat_core.streaming.framer import LineFramer
from chat_core.streaming.decoder import StreamDecoder, decode_record
from chat_core.streaming.quick_replies import extract_quick_replies
from chat_core.streaming.assembler import AssemblerState, AssistantMessageAssembler

__all__ = [
    "LineFramer",
    "StreamDecoder",
    "decode_record",
    "extract_quick_replies",
    "AssemblerState",
    "AssistantMessageAssembler",
]
