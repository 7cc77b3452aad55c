"""HTTP relay between a chat frontend and the Gemini generateContent API.

Each message is wrapped in the Medinova AI-doctor persona prompt, with a
greeting instruction for users seen for the first time, and forwarded to the
upstream model. The primary entry points are ``chat_relay.api.create_app``
for running the HTTP service and ``chat_relay.service.ChatRelayService`` for
embedding the relay directly into Python code.
"""

from .config import GeminiConfig, RelayConfig, load_config
from .service import ChatRelayService

__all__ = ["GeminiConfig", "RelayConfig", "ChatRelayService", "load_config"]
