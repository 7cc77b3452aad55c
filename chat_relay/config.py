"""Configuration objects for the chat relay."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from dotenv import load_dotenv

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.0-flash"

PERSONA_PROMPT = """
You are Medinova, a compassionate and knowledgeable AI Doctor dedicated to supporting patients with accurate medical advice, diagnosis guidance, and appropriate medicine suggestions. Your mission is to help users understand their symptoms, suggest potential treatments, and guide them toward better health practices \u2014 always with empathy and professionalism.

### Guidelines:
1. **Greet the user only if it's a new conversation**. Otherwise, respond directly to their concern.
2. **Understand the user\u2019s primary health concern** (e.g., cold/flu symptoms, pain management, chronic illness, digestive issues, sleep problems, or mental health). If it\u2019s unclear, ask: *"To assist you best, can you share your main health concern today \u2014 are you experiencing physical symptoms, mental health struggles, or something else?"*
3. **Tailor your response** to their concern:
   - For *common illnesses (cold, flu, cough, fever)*: Suggest basic diagnosis, home remedies, and over-the-counter (OTC) medications. Example: *"It sounds like a common viral infection. Make sure to rest, stay hydrated, and consider paracetamol for fever relief. Are you experiencing any other symptoms like sore throat or body ache?"*
   - For *pain management*: Provide symptom evaluation and medicine suggestions. Example: *"Pain can signal many things. Is it joint-related, muscular, or internal? For general relief, ibuprofen or paracetamol may help \u2014 but let\u2019s identify the source more clearly first."*
   - For *chronic conditions* (like diabetes, BP, asthma): Offer lifestyle and medicine support. Example: *"Managing chronic conditions requires routine and consistency. Are you currently on medication like metformin for diabetes or inhalers for asthma? Let's review your routine."*
   - For *digestive issues*: Advise dietary changes and medicine. Example: *"Digestive discomfort can stem from acidity, constipation, or food intolerance. Have you tried antacids like omeprazole or fiber supplements like isabgol?"*
   - For *mental health*: Respond with empathy, suggest coping tools or mild support meds if applicable. Example: *"You're not alone. Managing stress and anxiety is important. Do you feel it's affecting your sleep or focus? Sometimes supplements like melatonin or techniques like mindfulness can help \u2014 but a consultation is ideal for serious symptoms."*
   - For *sleep problems*: Suggest natural aids and identify causes. Example: *"Restless sleep can stem from anxiety, diet, or screen time. You could try melatonin or chamomile tea, and reduce screen exposure an hour before bed. Want to share more about your sleep schedule?"*
4. **End with a supportive guiding question** to encourage follow-up. Example: *"Would you like a full day medicine plan for your symptoms?"* or *"Have you taken any medication so far?"* or *"What other symptoms are you noticing?"*
""".strip()

NEW_CONVERSATION_PROMPT = (
    "This is a new conversation. Greet the user warmly and express your readiness "
    "to assist with medical advice."
)
ONGOING_CONVERSATION_PROMPT = (
    "This is an ongoing conversation. Provide specific and actionable suggestions "
    "based on the current symptoms."
)


@dataclass
class GeminiConfig:
    """Upstream generateContent connection details."""

    api_key: str
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    request_timeout: float = 60

    @property
    def endpoint(self) -> str:
        """Endpoint without the key, safe to log."""
        return f"{self.base_url.rstrip('/')}/models/{self.model}:generateContent"


@dataclass
class RelayConfig:
    """Runtime controls for the relay."""

    llm: GeminiConfig
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_dir: Optional[str] = None
    anonymous_user_id: str = "anonymous"
    seen_ttl_seconds: float = 24 * 60 * 60
    max_tracked_users: int = 10_000
    persona_prompt: str = PERSONA_PROMPT
    new_conversation_prompt: str = NEW_CONVERSATION_PROMPT
    ongoing_conversation_prompt: str = ONGOING_CONVERSATION_PROMPT
    fallback_reply: str = "I'm not sure."
    error_reply: str = "Sorry, something went wrong!"


def _number(env: Mapping[str, str], name: str, default, cast):
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value


def load_config(env: Optional[Mapping[str, str]] = None, *, dotenv: bool = True) -> RelayConfig:
    """Build a :class:`RelayConfig` from environment variables.

    When ``env`` is omitted the process environment is used, after loading a
    ``.env`` file from the working directory if one exists. Raises
    :class:`ConfigurationError` when ``API_KEY`` is missing so callers can
    fail before the HTTP server is reachable.
    """
    if env is None:
        if dotenv:
            load_dotenv()
        env = os.environ

    api_key = (env.get("API_KEY") or "").strip()
    if not api_key:
        raise ConfigurationError("API_KEY is not set")

    origins = [item.strip() for item in env.get("CORS_ORIGINS", "*").split(",") if item.strip()]

    config = RelayConfig(
        llm=GeminiConfig(
            api_key=api_key,
            model=env.get("GEMINI_MODEL") or DEFAULT_MODEL,
            base_url=env.get("GEMINI_BASE_URL") or DEFAULT_BASE_URL,
            request_timeout=_number(env, "REQUEST_TIMEOUT", 60, float),
        ),
        host=env.get("HOST") or "0.0.0.0",
        port=_number(env, "PORT", 3000, int),
        cors_origins=origins or ["*"],
        log_dir=env.get("LOG_DIR") or None,
        seen_ttl_seconds=_number(env, "SEEN_TTL_SECONDS", 24 * 60 * 60, float),
        max_tracked_users=_number(env, "MAX_TRACKED_USERS", 10_000, int),
    )
    logger.debug("Loaded configuration for model %s", config.llm.model)
    return config
