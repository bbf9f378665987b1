"""会话编排器。

负责一次完整的发送流程：追加用户消息 → 收集用户上下文 → 发起流式请求 →
把解码出的增量交给组装器并原地发布助手消息 → 成功/失败/取消后统一收尾。
这是核心中唯一接触外部协作方（传输、上下文、提示）的组件。
"""

import logging
import threading
import time
from typing import Optional
from uuid import uuid4

from chat_core.config.settings import settings
from chat_core.context.user_context import UserContextBuilder
from chat_core.domain.conversation import ConversationState
from chat_core.domain.exceptions import BusinessError
from chat_core.domain.models import ConversationMessage
from chat_core.infrastructure.logging.logger import log_event, logger
from chat_core.notifications import LoggingNotifier, Notifier, notice_for_error
from chat_core.providers.base import ChatTransport
from chat_core.streaming.assembler import AssistantMessageAssembler
from chat_core.streaming.decoder import StreamDecoder


class ChatSession:
    """单会话的编排器。

    同一时间只允许一个进行中的回复：is_loading 为 True 时新的发送直接被拒绝。
    cancel() 可以从其他线程调用，流在下一个片段到达后（或读取超时后）被放弃，
    底层连接随生成器关闭而释放；已经发布的部分消息保留。
    """

    def __init__(
        self,
        transport: ChatTransport,
        state: Optional[ConversationState] = None,
        context_builder: Optional[UserContextBuilder] = None,
        notifier: Optional[Notifier] = None,
        access_token: Optional[str] = None,
        cfg=settings,
    ):
        self._transport = transport
        self._state = state if state is not None else ConversationState()
        self._context_builder = context_builder
        self._notifier = notifier or LoggingNotifier()
        self.access_token = access_token
        self._settings = cfg
        self._lock = threading.Lock()
        self._loading = False
        self._cancelled = threading.Event()

    @property
    def state(self) -> ConversationState:
        return self._state

    @property
    def is_loading(self) -> bool:
        return self._loading

    def cancel(self) -> None:
        """放弃进行中的回复（没有进行中的回复时无操作）。"""

        with self._lock:
            if self._loading:
                self._cancelled.set()

    def clear(self) -> None:
        """清空会话；若有进行中的回复先放弃它。"""

        self.cancel()
        self._state.clear()

    def send_message(self, text: str) -> Optional[ConversationMessage]:
        """发送一条用户消息并流式接收回复。

        Returns:
            本次回复最终发布的助手消息；被拒绝、失败前未收到内容或被取消前
            未收到内容时返回 None。
        """

        if not text.strip():
            return None
        with self._lock:
            if self._loading:
                log_event(logging.INFO, "Send refused while a reply is in progress", {})
                return None
            self._loading = True
            self._cancelled.clear()

        start_time = time.time()
        user_msg = self._state.append_user(text)
        assembler = AssistantMessageAssembler(on_update=self._state.upsert_assistant)
        log_ctx = {
            "trace_id": f"tr-{uuid4().hex}",
            "user_message_id": user_msg.id,
            "reply_id": assembler.reply_id,
        }
        decoder = StreamDecoder(log_ctx)
        stream = None
        outcome = "completed"
        try:
            user_context = self._context_builder.build() if self._context_builder else {}
            turns = self._state.to_turns()
            log_event(
                logging.INFO,
                "Calling chat service (stream)",
                log_ctx,
                transport=getattr(self._transport, "name", "unknown"),
                message_count=len(turns),
                context_keys=sorted(user_context),
            )
            stream = self._transport.stream_chat(turns, user_context, access_token=self.access_token)
            for chunk in stream:
                if self._cancelled.is_set():
                    break
                for content in decoder.feed(chunk):
                    if self._cancelled.is_set():
                        break
                    assembler.append(content)
                if decoder.done:
                    break
            if self._cancelled.is_set():
                # 放弃后到达的增量不再发布，已发布的部分消息保留
                outcome = "cancelled"
            else:
                for content in decoder.finish():
                    assembler.append(content)
        except BusinessError as e:
            outcome = "failed"
            log_event(
                logging.ERROR,
                "Chat request failed",
                log_ctx,
                code=e.code,
                http_status=e.http_status,
                error=e.message,
            )
            self._notifier.notify(notice_for_error(e))
        except Exception as e:
            outcome = "failed"
            logger.exception("Chat error: %s", e, extra={"extra": log_ctx})
            self._notifier.notify(notice_for_error(e))
        finally:
            close = getattr(stream, "close", None)
            if close is not None:
                close()
            view = assembler.finalize()
            self._loading = False
            log_event(
                logging.INFO,
                "Reply finalized",
                log_ctx,
                outcome=outcome,
                elapsed_seconds=round(time.time() - start_time, 2),
                content_length=len(assembler.running_text),
                quick_replies=len(view.quick_replies) if view else 0,
                malformed_retries=decoder.malformed_retries,
            )

        if assembler.view is None:
            return None
        return self._state.get(assembler.reply_id)
