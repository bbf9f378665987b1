"""聊天传输抽象接口。

会话编排器不直接依赖具体的 HTTP 实现，而是依赖此协议：

- 输入：按顺序排列的 {role, content} 轮次 + 不透明的用户上下文 dict。
- 输出：原始文本片段的迭代器（片段边界任意，不保证按行切分）。

非成功响应、网络错误、超时都以 domain.exceptions 中的异常抛出。
"""

from typing import Any, Dict, Iterator, List, Optional, Protocol


class ChatTransport(Protocol):
    """聊天服务的流式请求协议。

    返回的迭代器应是生成器：调用方 close() 时必须释放底层连接。
    """

    name: str

    def stream_chat(
        self,
        turns: List[Dict[str, str]],
        user_context: Dict[str, Any],
        access_token: Optional[str] = None,
    ) -> Iterator[str]:
        ...
