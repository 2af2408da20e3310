"""机器人回复的逐段显示调度器。

把最终文本按空白切分成单词，每个周期多显示 chunk_size 个单词，
直到显示完整文本。每条消息拥有自己的调度器（独立的定时任务和下标），
多条消息可以同时显示而互不干扰。

定时任务必须在消息销毁时取消，推荐用法：

    async with TextRevealScheduler(text, on_update=render) as reveal:
        await reveal.wait_complete()
"""

import asyncio
import re
from typing import Callable, Iterator, List, Optional

from leanbot_core.config.settings import settings


RevealCallback = Callable[[str, bool], None]

_WORD_RE = re.compile(r"\S+")


def _word_ends(text: str) -> List[int]:
    return [m.end() for m in _WORD_RE.finditer(text)]


class TextRevealScheduler:
    """逐段显示调度器。

    - text: 最终要显示的完整文本。
    - chunk_size: 每次新增显示的单词数。
    - delay: 两次显示之间的间隔（秒）。
    - enabled: 为 False 时立即显示完整文本并标记完成，不会启动定时任务。
    - on_update: 每次显示内容变化时回调 `(displayed_text, is_complete)`。
    """

    def __init__(
        self,
        text: str,
        chunk_size: int = 3,
        delay: float = 0.05,
        enabled: bool = True,
        on_update: Optional[RevealCallback] = None,
    ):
        if chunk_size < 1:
            raise ValueError("chunk_size must be >= 1")
        if delay <= 0:
            raise ValueError("delay must be > 0")
        self._chunk_size = chunk_size
        self._delay = delay
        self._enabled = enabled
        self._on_update = on_update
        self._task: Optional[asyncio.Task] = None
        self._completed = asyncio.Event()
        self._load(text or "")

    @classmethod
    def from_settings(cls, text: str, cfg=settings, on_update: Optional[RevealCallback] = None) -> "TextRevealScheduler":
        return cls(
            text,
            chunk_size=cfg.reveal_chunk_size,
            delay=cfg.reveal_delay_seconds,
            enabled=cfg.reveal_enabled,
            on_update=on_update,
        )

    # ---- 状态 ----

    @property
    def text(self) -> str:
        return self._text

    @property
    def displayed_text(self) -> str:
        return self._displayed

    @property
    def is_complete(self) -> bool:
        return self._complete

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _load(self, text: str) -> None:
        self._text = text
        self._ends = _word_ends(text)
        self._index = 0
        if self._enabled:
            self._displayed = ""
            self._complete = False
            self._completed.clear()
        else:
            self._displayed = text
            self._complete = True
            self._completed.set()

    def _emit(self) -> None:
        if self._on_update is not None:
            self._on_update(self._displayed, self._complete)

    def frames(self) -> Iterator[str]:
        """惰性产出逐渐变长的前缀，最后一个一定是完整文本。

        每次调用都会得到一个新的生成器，与定时器状态无关。
        """

        if not self._enabled or not self._ends:
            yield self._text
            return
        total = len(self._ends)
        for index in range(self._chunk_size, total + self._chunk_size, self._chunk_size):
            if index >= total:
                yield self._text
                return
            yield self._text[: self._ends[index - 1]]

    def tick(self) -> str:
        """前进一个周期并返回当前显示的文本；已完成时不做任何事。"""

        if self._complete:
            return self._displayed
        self._index = min(self._index + self._chunk_size, len(self._ends))
        if self._index >= len(self._ends):
            self._displayed = self._text
            self._complete = True
            self._completed.set()
        else:
            self._displayed = self._text[: self._ends[self._index - 1]]
        self._emit()
        return self._displayed

    def set_text(self, text: str) -> None:
        """更换文本：从空白重新开始显示（定时器在运行时会一并重启）。"""

        text = text or ""
        if text == self._text:
            return
        was_running = self.is_running
        self.stop()
        self._load(text)
        self._emit()
        if was_running:
            self.start()

    # ---- 定时器 ----

    def start(self) -> None:
        if self._complete or self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        while not self._complete:
            await asyncio.sleep(self._delay)
            self.tick()

    def stop(self) -> None:
        """取消定时任务（同步版本，供无法 await 的清理代码使用）。"""

        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()

    async def aclose(self) -> None:
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def wait_complete(self) -> str:
        """启动（如有必要）并等待显示完成，返回完整文本。"""

        self.start()
        await self._completed.wait()
        return self._displayed

    async def __aenter__(self) -> "TextRevealScheduler":
        self.start()
        return self

    async def __aexit__(self, *exc) -> bool:
        await self.aclose()
        return False
