"""聊天服务的 HTTP 流式客户端。

本模块负责：

1. 把会话轮次与用户上下文组装成请求体 {"messages": [...], "userContext": {...}}。
2. 以 POST + 流式读取的方式调用聊天接口。
3. 把 HTTP 状态码与网络异常映射为统一的业务异常（429 限流、402 额度耗尽、其他错误）。
4. 原样产出响应体的文本片段，由 streaming 层负责分行与解码。
"""

from typing import Any, Dict, Iterator, List, Optional

import httpx

from chat_core.config.settings import settings
from chat_core.domain.exceptions import (
    ApiError,
    CreditsExhaustedError,
    NetworkError,
    RateLimitError,
    ValidationError,
)

DEFAULT_ERROR_MESSAGE = "Failed to get a response. Please try again."


class ChatStreamClient:
    """聊天服务客户端实现。

    - name: 客户端名称（供日志使用）。
    - stream_chat: 发起一次流式请求，逐个 yield 原始文本片段。
    """

    name = "chat"

    def __init__(self, cfg=settings):
        # Settings 里包含 chat_url、公开密钥、超时等配置
        self._settings = cfg

    def stream_chat(
        self,
        turns: List[Dict[str, str]],
        user_context: Dict[str, Any],
        access_token: Optional[str] = None,
    ) -> Iterator[str]:
        """执行一次流式请求。

        access_token 为已登录用户的 JWT；未提供时回退到配置中的公开密钥，
        让后端既能识别登录用户，也能服务匿名会话。
        """

        url = getattr(self._settings, "chat_url", None)
        if not url:
            raise ValidationError(code="MISSING_CHAT_URL", message="CHAT_URL not set")
        token = access_token or getattr(self._settings, "publishable_key", None)
        if not token:
            raise ValidationError(code="MISSING_API_KEY", message="No access token or PUBLISHABLE_KEY set")
        payload = self._build_payload(turns, user_context)
        try:
            with httpx.Client(timeout=self._timeout(), trust_env=False) as client:
                with client.stream(
                    "POST",
                    url,
                    json=payload,
                    headers={
                        "Authorization": f"Bearer {token}",
                        "Content-Type": "application/json",
                    },
                ) as resp:
                    if resp.status_code >= 400:
                        self._raise_for_status(resp)
                    for text in resp.iter_text():
                        if text:
                            yield text
        except httpx.RequestError as e:
            # 网络错误：DNS 失败、连接超时、读取超时等
            raise NetworkError(code="NETWORK_ERROR", message=str(e) or type(e).__name__)

    def _timeout(self) -> httpx.Timeout:
        """连接/写入使用 http_timeout，单次读取使用 stream_read_timeout。"""

        base = float(getattr(self._settings, "http_timeout", 30.0))
        read = float(getattr(self._settings, "stream_read_timeout", base))
        return httpx.Timeout(base, read=read)

    @staticmethod
    def _build_payload(turns: List[Dict[str, str]], user_context: Dict[str, Any]) -> dict:
        return {
            "messages": [{"role": t["role"], "content": t["content"]} for t in turns],
            "userContext": dict(user_context),
        }

    @staticmethod
    def _raise_for_status(resp) -> None:
        resp.read()
        try:
            data = resp.json()
        except ValueError:
            data = {}
        message = DEFAULT_ERROR_MESSAGE
        if isinstance(data, dict) and data.get("error"):
            message = str(data["error"])
        if resp.status_code == 429:
            # 限流交给上层提示用户稍后再试
            raise RateLimitError(code="RATE_LIMIT", message=message, http_status=429)
        if resp.status_code == 402:
            raise CreditsExhaustedError(code="CREDITS_EXHAUSTED", message=message, http_status=402)
        raise ApiError(code="API_ERROR", message=message, http_status=resp.status_code)
