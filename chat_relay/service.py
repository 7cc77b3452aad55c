"""Request handling for the chat relay."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .config import RelayConfig
from .exceptions import ValidationError
from .llm_client import GeminiClient
from .prompts import build_prompt
from .tracker import SeenUserTracker

logger = logging.getLogger(__name__)


@dataclass
class ChatReply:
    reply: str
    user_id: str
    new_conversation: bool
    fallback: bool = False


class ChatRelayService:
    """Core relay used by both the API and direct Python consumers."""

    def __init__(
        self,
        config: RelayConfig,
        *,
        client: Optional[GeminiClient] = None,
        tracker: Optional[SeenUserTracker] = None,
    ) -> None:
        self.config = config
        self.client = client or GeminiClient(config.llm)
        self.tracker = tracker or SeenUserTracker(
            ttl_seconds=config.seen_ttl_seconds,
            max_users=config.max_tracked_users,
        )

    def handle(self, message: Optional[str], user_id: Optional[str] = None) -> ChatReply:
        """Relay one message upstream and return the generated reply.

        Raises :class:`ValidationError` for a missing message and lets
        :class:`~chat_relay.exceptions.UpstreamError` propagate so the caller
        decides what the client sees.
        """
        if not message:
            raise ValidationError("Message is required")

        user_id = self.resolve_user_id(user_id)
        is_new = self.tracker.mark_seen(user_id)
        logger.info(
            "Relaying message for user %s (%s conversation)", user_id, "new" if is_new else "ongoing"
        )

        prompt = build_prompt(message, is_new, self.config)
        text = self.client.generate(prompt)
        if text is None:
            logger.warning("Upstream returned no text for user %s, using fallback reply", user_id)
            return ChatReply(self.config.fallback_reply, user_id, is_new, fallback=True)
        return ChatReply(text, user_id, is_new)

    def resolve_user_id(self, user_id: Optional[str]) -> str:
        if user_id is None or not user_id.strip():
            return self.config.anonymous_user_id
        return user_id
