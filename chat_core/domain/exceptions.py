"""统一业务异常模型。

所有跨模块抛出的业务级错误都应该继承自 BusinessError，
便于在会话编排层做统一捕获并转换成用户可见的提示。
"""


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "STORE_READ_ERROR"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 reply_id、url 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class NetworkError(BusinessError):
    """网络层错误，例如连接失败、读取超时等。"""


class ApiError(BusinessError):
    """聊天服务返回非 2xx（且不是 402/429）时抛出。"""


class RateLimitError(BusinessError):
    """服务端限流（HTTP 429）。"""


class CreditsExhaustedError(BusinessError):
    """AI 用量额度耗尽（HTTP 402）。"""


class ValidationError(BusinessError):
    """参数或配置校验失败。"""
