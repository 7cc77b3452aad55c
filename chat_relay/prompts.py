"""Prompt composition for the relay."""

from __future__ import annotations

from .config import RelayConfig


def build_prompt(message: str, is_new: bool, config: RelayConfig) -> str:
    """Return the persona block, the conversation-state instruction and the user message."""
    state_instruction = config.new_conversation_prompt if is_new else config.ongoing_conversation_prompt
    return f"{config.persona_prompt}\n\n{state_instruction}\n\nUser: {message}\n"
