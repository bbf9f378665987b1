"""用户可见提示。

编排层只产出 Notice，具体展示（toast、对话框、终端输出）由 Notifier 实现负责。
"""

import logging
from dataclasses import dataclass
from typing import Literal, Protocol

from chat_core.domain.exceptions import ApiError, CreditsExhaustedError, RateLimitError
from chat_core.infrastructure.logging.logger import log_event

Variant = Literal["default", "destructive"]


@dataclass(frozen=True)
class Notice:
    title: str
    description: str
    variant: Variant = "default"


class Notifier(Protocol):
    def notify(self, notice: Notice) -> None:
        ...


class LoggingNotifier:
    """默认实现：只写日志。"""

    def notify(self, notice: Notice) -> None:
        log_event(
            logging.WARNING if notice.variant == "destructive" else logging.INFO,
            "Notice",
            {},
            title=notice.title,
            description=notice.description,
            variant=notice.variant,
        )


def notice_for_error(exc: BaseException) -> Notice:
    """把传输/请求错误映射为用户提示，限流与额度耗尽各有独立文案。"""

    if isinstance(exc, RateLimitError):
        return Notice("Rate Limited", "Too many requests. Please wait a moment.", "destructive")
    if isinstance(exc, CreditsExhaustedError):
        return Notice("Credits Exhausted", "AI usage credits have been exhausted.", "destructive")
    if isinstance(exc, ApiError):
        return Notice("Error", exc.message or "Failed to get a response. Please try again.", "destructive")
    return Notice("Connection Error", "Could not connect to AI assistant.", "destructive")
