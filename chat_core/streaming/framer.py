"""按行切分传输层文本片段。"""

from typing import List


class LineFramer:
    """把任意切分的文本片段还原为完整的行记录。

    缓冲区只保留尚未遇到换行符的尾部内容；记录在完整分隔之前不会被输出，
    跨调用不会丢失或重复任何字符。
    """

    def __init__(self) -> None:
        self._buffer = ""

    @property
    def pending(self) -> str:
        return self._buffer

    def feed(self, chunk: str) -> List[str]:
        self._buffer += chunk
        records: List[str] = []
        while True:
            idx = self._buffer.find("\n")
            if idx == -1:
                break
            line = self._buffer[:idx]
            self._buffer = self._buffer[idx + 1:]
            if line.endswith("\r"):
                line = line[:-1]
            records.append(line)
        return records

    def push_back(self, text: str) -> None:
        """把尚未处理完的文本放回缓冲区头部。"""

        self._buffer = text + self._buffer

    def flush(self) -> List[str]:
        """流结束时输出剩余内容（包括未以换行结尾的最后一行）。"""

        residual, self._buffer = self._buffer, ""
        records: List[str] = []
        for raw in residual.split("\n"):
            if not raw:
                continue
            if raw.endswith("\r"):
                raw = raw[:-1]
            records.append(raw)
        return records
