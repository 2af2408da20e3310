"""统一业务异常模型。

所有跨模块抛出的业务级错误都应该继承自 BusinessError，
便于发送流程统一捕获并转换为用户提示。

每个子类都带有两个类属性：
- title: 通知（toast）的标题。
- user_message: 追加到会话中的机器人消息文本。
"""

GENERIC_ERROR_TITLE = "Error"
GENERIC_ERROR_MESSAGE = "Sorry, I encountered an error. Please try again."


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "NETWORK_ERROR"）。
        message: 错误详情（用于日志，不直接展示给用户）。
        http_status: 对应的 HTTP 状态码，默认 400。
        extra: 其他补充字段（例如 session_id、url 等）。
    """

    title = GENERIC_ERROR_TITLE
    user_message = GENERIC_ERROR_MESSAGE

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class AdmissionDenied(BusinessError):
    """客户端限流：窗口内发送次数已满，本次消息不会发出。"""

    title = "Rate Limit Exceeded"

    def __init__(self, retry_after_seconds: int, max_messages: int = 5):
        self.retry_after_seconds = retry_after_seconds
        self.max_messages = max_messages
        unit = "second" if retry_after_seconds == 1 else "seconds"
        super().__init__(
            code="RATE_LIMITED",
            message=(
                f"You can send up to {max_messages} messages per minute. "
                f"Please wait {retry_after_seconds} {unit} before sending another message."
            ),
            http_status=429,
        )
        self.user_message = self.message


class NetworkError(BusinessError):
    """网络层错误的基类。"""


class TransportFailure(NetworkError):
    """请求未能完成，例如 DNS 失败、连接被拒绝。"""

    title = "Network Error"
    user_message = (
        "I couldn't reach the server. Please check your internet connection and try again."
    )


class TimeoutFailure(TransportFailure):
    title = "Request Timeout"
    user_message = "The request took too long to complete. Please try again."


class ApiError(BusinessError):
    """webhook 返回非 2xx 状态码时抛出。"""


class ServerFailure(ApiError):
    """5xx 服务端错误。"""

    title = "Server Error"
    user_message = (
        "The server ran into a problem while answering. "
        "Please try again in a moment or rephrase your question."
    )


class NotFoundFailure(ApiError):
    title = "Service Unavailable"
    user_message = "The chat service is temporarily unavailable. Please try again later."


class RateLimitError(ApiError):
    """webhook 自身返回 429。"""


class MalformedResponse(BusinessError):
    """回复内容无法按预期结构解析；只在规范化器内部使用，不会向外传播。"""


class ValidationError(BusinessError):
    """参数或配置校验失败。"""
