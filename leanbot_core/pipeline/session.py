"""Explicit per-widget session context."""

from __future__ import annotations

from typing import Optional

from leanbot_core.admission.rate_limiter import RateLimiter
from leanbot_core.config.settings import settings
from leanbot_core.domain.conversation import ConversationStore
from leanbot_core.ids import new_session_id
from leanbot_core.infrastructure.storage.memory_store import InMemoryConversationStore


class ChatSession:
    """Owns the session id, the rate limiter and the message log of one widget.

    The session id is generated on first access and never changes afterwards.
    """

    def __init__(
        self,
        cfg=settings,
        rate_limiter: Optional[RateLimiter] = None,
        store: Optional[ConversationStore] = None,
    ):
        self._settings = cfg
        self._session_id: Optional[str] = None
        self.rate_limiter = rate_limiter or RateLimiter(
            max_messages=cfg.rate_limit_max_messages,
            window_seconds=cfg.rate_limit_window_seconds,
        )
        self.store: ConversationStore = store or InMemoryConversationStore()

    @property
    def session_id(self) -> str:
        if self._session_id is None:
            self._session_id = new_session_id(getattr(self._settings, "session_prefix", "LSC-"))
        return self._session_id
