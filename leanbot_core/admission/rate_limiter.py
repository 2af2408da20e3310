"""客户端发送限流（滑动窗口）。

每次检查时惰性清理窗口外的时间戳，不依赖后台定时器；
长时间空闲不会产生任何开销。所有时间单位均为秒。
"""

import math
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Optional

from leanbot_core.domain.exceptions import AdmissionDenied


@dataclass(frozen=True)
class AdmissionDecision:
    """一次准入检查的结果。

    - admitted: 是否允许发送。
    - retry_after_seconds: 被拒绝时需要等待的秒数（向上取整，至少为 1）。
    """

    admitted: bool
    retry_after_seconds: int = 0


ADMITTED = AdmissionDecision(admitted=True)


class RateLimiter:
    def __init__(
        self,
        max_messages: int = 5,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_messages = max_messages
        self.window_seconds = window_seconds
        self._clock = clock
        self._timestamps: Deque[float] = deque()

    def _prune(self, now: float) -> None:
        while self._timestamps and now - self._timestamps[0] > self.window_seconds:
            self._timestamps.popleft()

    def try_admit(self, now: Optional[float] = None) -> AdmissionDecision:
        """检查并（在允许时）记录一次发送。被拒绝时不记录。"""

        now = self._clock() if now is None else now
        self._prune(now)
        if len(self._timestamps) < self.max_messages:
            self._timestamps.append(now)
            return ADMITTED
        oldest = self._timestamps[0]
        retry_after = max(1, math.ceil(oldest + self.window_seconds - now))
        return AdmissionDecision(admitted=False, retry_after_seconds=retry_after)

    def check(self, now: Optional[float] = None) -> None:
        """与 try_admit 相同，但被拒绝时抛出 AdmissionDenied。"""

        decision = self.try_admit(now)
        if not decision.admitted:
            raise AdmissionDenied(decision.retry_after_seconds, max_messages=self.max_messages)

    def remaining(self, now: Optional[float] = None) -> int:
        now = self._clock() if now is None else now
        self._prune(now)
        return self.max_messages - len(self._timestamps)

    def reset(self) -> None:
        self._timestamps.clear()
